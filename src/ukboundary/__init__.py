"""ukboundary — Resolve UK postcodes to boundary polygons via geocoder search."""

from ukboundary.exceptions import (
    InvalidInput,
    NoBoundaryFound,
    ResolutionCancelled,
    UKBoundaryError,
    UpstreamUnavailable,
)
from ukboundary.models import (
    BoundingBox,
    ResolutionResult,
    ScoredCandidate,
    SearchCandidate,
)
from ukboundary.postcode import hierarchy
from ukboundary.resolver import BoundaryResolver, CancellationToken, SearchSession
from ukboundary.scoring import ScoringWeights
from ukboundary.search import NominatimSearch

__all__ = [
    "BoundaryResolver",
    "CancellationToken",
    "SearchSession",
    "NominatimSearch",
    "ScoringWeights",
    "hierarchy",
    "BoundingBox",
    "ResolutionResult",
    "ScoredCandidate",
    "SearchCandidate",
    "UKBoundaryError",
    "InvalidInput",
    "UpstreamUnavailable",
    "NoBoundaryFound",
    "ResolutionCancelled",
]
