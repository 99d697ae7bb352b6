"""
Relevance scoring for geocoder search results.

The upstream search is free-text, so a query for "SW1A" comes back with
the postcode boundary itself mixed in with boroughs, streets and places
that merely mention it. Each candidate is scored with a fixed set of
additive rules and only the top one is accepted, and only if it clears a
confidence floor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ukboundary.models import ScoredCandidate, SearchCandidate

BOUNDARY = "boundary"
POSTAL_CODE = "postal_code"


@dataclass(frozen=True)
class ScoringWeights:
    """Tunable weights for :func:`score`. Defaults were calibrated on Nominatim."""

    postal_code_bonus: float = 100.0
    label_prefix_bonus: float = 80.0
    label_contains_bonus: float = 25.0
    structured_postcode_bonus: float = 50.0
    importance_multiplier: float = 10.0
    penalised_subtype_penalty: float = 60.0
    penalised_subtypes: frozenset[str] = frozenset(
        {"administrative", "county", "city", "suburb", "borough"}
    )
    min_score: float = 50.0


DEFAULT_WEIGHTS = ScoringWeights()


def _label_starts_with(label: str, query: str) -> bool:
    if label == query:
        return True
    return label.startswith(query + ",") or label.startswith(query + " ")


def score(
    candidate: SearchCandidate,
    fragment: str,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> float:
    """Score how likely *candidate* is the boundary for *fragment*."""
    query = fragment.upper()
    label = candidate.display_name.upper()
    is_boundary = candidate.classification == BOUNDARY

    total = 0.0
    if is_boundary and candidate.subtype == POSTAL_CODE:
        total += weights.postal_code_bonus

    if _label_starts_with(label, query):
        total += weights.label_prefix_bonus
    elif query in label:
        total += weights.label_contains_bonus

    postcode = candidate.structured_postcode
    if postcode and postcode.upper().startswith(query):
        total += weights.structured_postcode_bonus

    total += candidate.importance * weights.importance_multiplier

    if is_boundary and candidate.subtype in weights.penalised_subtypes:
        total -= weights.penalised_subtype_penalty

    return total


def rank(
    candidates: Iterable[SearchCandidate],
    fragment: str,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[ScoredCandidate]:
    """
    Score the polygon-bearing candidates, best first.

    Candidates without a polygon geometry are dropped. Equal scores keep
    their input order.
    """
    scored = [
        ScoredCandidate(candidate=c, score=score(c, fragment, weights))
        for c in candidates
        if c.has_polygon
    ]
    scored.sort(key=lambda sc: sc.score, reverse=True)
    return scored


def select(
    candidates: Iterable[SearchCandidate],
    fragment: str,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Optional[ScoredCandidate]:
    """Return the top-ranked candidate if it clears ``weights.min_score``."""
    ranked = rank(candidates, fragment, weights)
    if not ranked or not ranked[0].score >= weights.min_score:
        return None
    return ranked[0]
