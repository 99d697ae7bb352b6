"""Custom exception hierarchy for ukboundary."""

from typing import Sequence


class UKBoundaryError(Exception):
    """Base exception for all ukboundary errors."""


class InvalidInput(UKBoundaryError):
    """Nothing usable was entered (empty or whitespace-only postcode)."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__("Please enter a postcode.")


class UpstreamUnavailable(UKBoundaryError):
    """A search request failed at the transport or HTTP level."""

    def __init__(self, query: str, detail: str):
        self.query = query
        self.detail = detail
        super().__init__(f"Search for '{query}' failed: {detail}")


class NoBoundaryFound(UKBoundaryError):
    """Every fragment in the hierarchy was tried without an accepted match."""

    def __init__(self, fragments: Sequence[str]):
        self.fragments = list(fragments)
        super().__init__(
            "No boundary found after trying these fragments: "
            + ", ".join(self.fragments)
        )


class ResolutionCancelled(UKBoundaryError):
    """The caller abandoned the resolution before it finished."""

    def __init__(self, postcode: str):
        self.postcode = postcode
        super().__init__(f"Resolution of '{postcode}' was cancelled")
