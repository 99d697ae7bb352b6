"""
Postcode Boundary Lookup — Interactive CLI
==========================================
Thin wrapper around the ukboundary library.

Usage:
    ukboundary                        # interactive mode
    ukboundary "SW1A 0AA"             # single lookup
    ukboundary "SW1A 0AA" --geojson   # single lookup, print GeoJSON Feature

Settings are read from environment variables:
    NOMINATIM_URL          Nominatim base URL
    NOMINATIM_USER_AGENT   User-Agent sent with every search
    UKBOUNDARY_DELAY       Seconds to wait between searches (default 1.0)
    UKBOUNDARY_MIN_SCORE   Minimum score for a match to be accepted (default 50)
    UKBOUNDARY_LOG_LEVEL   Logging level (default WARNING)
"""

import asyncio
import json
import logging
import os
import sys

from ukboundary import BoundaryResolver, NominatimSearch, ScoringWeights
from ukboundary.exceptions import (
    InvalidInput,
    NoBoundaryFound,
    UKBoundaryError,
)
from ukboundary.models import ResolutionResult
from ukboundary.search import DEFAULT_BASE_URL, DEFAULT_USER_AGENT

# ── Settings ──────────────────────────────────────────────────
_BASE_URL = os.environ.get("NOMINATIM_URL", DEFAULT_BASE_URL)
_USER_AGENT = os.environ.get("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT)
_DELAY = float(os.environ.get("UKBOUNDARY_DELAY", "1.0"))
_MIN_SCORE = float(os.environ.get("UKBOUNDARY_MIN_SCORE", "50"))
_LOG_LEVEL = os.environ.get("UKBOUNDARY_LOG_LEVEL", "WARNING").upper()

_BANNER = """\
╔══════════════════════════════════════╗
║      Postcode Boundary Lookup        ║
║     Postcode → Boundary Polygon      ║
╚══════════════════════════════════════╝
Type 'q' to quit.
"""


def _print_summary(result: ResolutionResult) -> None:
    bounds = result.bounds
    bounds_text = (
        f"{bounds.south:.4f}, {bounds.north:.4f}, {bounds.west:.4f}, {bounds.east:.4f}"
        if bounds is not None
        else "unknown"
    )
    print(f"\r  ✓ Boundary found for '{result.fragment}' (score {result.score:.1f})")
    print()
    print(f"  ┌──────────────────────────────────────────────────────┐")
    print(f"  │  Matched Fragment  {result.fragment:<35}│")
    print(f"  │  Place             {result.candidate.display_name[:35]:<35}│")
    print(f"  │  Category          {result.candidate.subtype:<35}│")
    print(f"  │  Geometry          {result.candidate.geometry_type or '':<35}│")
    print(f"  │  Bounds (S,N,W,E)  {bounds_text[:35]:<35}│")
    print(f"  └──────────────────────────────────────────────────────┘")


async def _run_interactive(resolver: BoundaryResolver) -> None:
    print(_BANNER)

    while True:
        try:
            raw_postcode = (await asyncio.to_thread(input, "\nPostcode:  ")).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if raw_postcode.lower() in ("q", "quit", "exit"):
            print("Bye!")
            break

        print("  ⏳ Searching …", end="", flush=True)
        try:
            result = await resolver.resolve(raw_postcode)
        except UKBoundaryError as exc:
            print(f"\r  ✗ {exc}")
            continue

        _print_summary(result)


async def _run(argv: list[str]) -> int:
    flags = {arg for arg in argv if arg.startswith("--")}
    positional = [arg for arg in argv if not arg.startswith("--")]
    weights = ScoringWeights(min_score=_MIN_SCORE)
    async with NominatimSearch(base_url=_BASE_URL, user_agent=_USER_AGENT) as search:
        resolver = BoundaryResolver(search, weights=weights, delay=_DELAY)

        if not positional:
            await _run_interactive(resolver)
            return 0

        try:
            result = await resolver.resolve(positional[0])
        except InvalidInput as exc:
            print(str(exc), file=sys.stderr)
            return 1
        except NoBoundaryFound as exc:
            print(str(exc), file=sys.stderr)
            return 1

        if "--geojson" in flags:
            print(json.dumps(result.to_feature()))
        else:
            for key, val in result.to_dict().items():
                print(f"{key:>16}: {val}")
        return 0


def main() -> None:
    """Entry point — supports both CLI args and interactive mode."""
    logging.basicConfig(
        level=_LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    sys.exit(asyncio.run(_run(sys.argv[1:])))


if __name__ == "__main__":
    main()
