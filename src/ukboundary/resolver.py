"""BoundaryResolver — the main entry point for the library."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Sequence

from ukboundary import postcode, scoring
from ukboundary.exceptions import (
    InvalidInput,
    NoBoundaryFound,
    ResolutionCancelled,
    UpstreamUnavailable,
)
from ukboundary.models import ResolutionResult, SearchCandidate
from ukboundary.scoring import DEFAULT_WEIGHTS, ScoringWeights
from ukboundary.search import SearchFunction

logger = logging.getLogger(__name__)

_DEFAULT_DELAY = 1.0
_DEFAULT_COUNTRY = "United Kingdom"


class CancellationToken:
    """Signal that a resolution has been abandoned by its caller."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, delay: float) -> bool:
        """
        Pause for *delay* seconds unless cancelled first.

        Returns True if the token was cancelled before the delay elapsed.
        """
        if self.cancelled:
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True


class BoundaryResolver:
    """
    Resolve UK postcodes to boundary polygons via a noisy geocoding search.

    *search* is any coroutine function taking a query string and returning
    a list of raw result records, typically a NominatimSearch. Fragments
    are queried one at a time, most specific first, with *delay* seconds
    between queries to stay inside the upstream rate limit.

    A resolver holds no per-request state, so one instance can serve any
    number of concurrent resolutions.
    """

    def __init__(
        self,
        search: SearchFunction,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        delay: float = _DEFAULT_DELAY,
        country: str = _DEFAULT_COUNTRY,
    ):
        self._search = search
        self._weights = weights
        self._delay = delay
        self._country = country

    # ── Public API ────────────────────────────────────────────────

    async def resolve(
        self, postcode_raw: str, token: Optional[CancellationToken] = None
    ) -> ResolutionResult:
        """
        Find the best boundary for *postcode_raw*.

        Returns a ResolutionResult for the most specific fragment with an
        acceptable match. Raises InvalidInput, NoBoundaryFound, or
        ResolutionCancelled if *token* is cancelled mid-way.
        """
        if not postcode_raw or not postcode_raw.strip():
            raise InvalidInput(postcode_raw)
        token = token or CancellationToken()

        fragments = postcode.hierarchy(postcode_raw)
        logger.debug("Hierarchy for %r: %s", postcode_raw, fragments)

        attempted: list[str] = []
        for index, fragment in enumerate(fragments):
            if index > 0 and await token.sleep(self._delay):
                raise ResolutionCancelled(postcode_raw)
            if token.cancelled:
                raise ResolutionCancelled(postcode_raw)

            attempted.append(fragment)
            records = await self._query(fragment, token, postcode_raw)
            candidates = self._parse(records)

            best = scoring.select(candidates, fragment, self._weights)
            if best is not None:
                logger.info(
                    "Accepted %r for fragment %r (score %.1f)",
                    best.candidate.display_name,
                    fragment,
                    best.score,
                )
                return ResolutionResult(
                    candidate=best.candidate,
                    fragment=fragment,
                    score=best.score,
                    attempted=tuple(attempted),
                )
            logger.debug(
                "No acceptable match for %r among %d candidates",
                fragment,
                len(candidates),
            )

        raise NoBoundaryFound(attempted)

    # ── Private helpers ───────────────────────────────────────────

    async def _query(
        self, fragment: str, token: CancellationToken, postcode_raw: str
    ) -> Sequence[Mapping[str, Any]]:
        """
        Run one search, racing it against *token*.

        Upstream failures are logged and reported as an empty result set.
        If the token fires first the search task is cancelled and its
        result discarded.
        """
        query = f"{fragment}, {self._country}"
        search_task = asyncio.ensure_future(self._search(query))
        cancel_task = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait(
                {search_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            search_task.cancel()
            raise
        finally:
            cancel_task.cancel()

        if token.cancelled:
            search_task.cancel()
            if search_task.done() and not search_task.cancelled():
                search_task.exception()
            raise ResolutionCancelled(postcode_raw)

        try:
            records = search_task.result()
        except UpstreamUnavailable as exc:
            logger.warning("Skipping fragment %r: %s", fragment, exc)
            return []
        except Exception as exc:
            logger.warning(
                "Skipping fragment %r: search raised %s: %s",
                fragment,
                type(exc).__name__,
                exc,
            )
            return []
        if not isinstance(records, Sequence) or isinstance(records, (str, bytes)):
            logger.warning(
                "Skipping fragment %r: search returned %s",
                fragment,
                type(records).__name__,
            )
            return []
        return records

    @staticmethod
    def _parse(records: Sequence[Any]) -> list[SearchCandidate]:
        return [
            SearchCandidate.from_record(r) for r in records if isinstance(r, Mapping)
        ]


class SearchSession:
    """
    Run resolutions where only the most recent one matters.

    Starting a new search cancels whichever one is still running, so a
    user who types a new postcode never sees the stale result arrive.
    """

    def __init__(self, resolver: BoundaryResolver):
        self._resolver = resolver
        self._current: Optional[CancellationToken] = None

    def cancel(self) -> None:
        if self._current is not None:
            self._current.cancel()

    async def search(self, postcode_raw: str) -> ResolutionResult:
        self.cancel()
        token = CancellationToken()
        self._current = token
        try:
            return await self._resolver.resolve(postcode_raw, token)
        finally:
            if self._current is token:
                self._current = None
