"""Shared test fixtures — Nominatim-shaped records and a scripted search."""

from __future__ import annotations

import time

import pytest

from ukboundary.exceptions import UpstreamUnavailable

SQUARE = {
    "type": "Polygon",
    "coordinates": [
        [[-0.13, 51.50], [-0.12, 51.50], [-0.12, 51.51], [-0.13, 51.51], [-0.13, 51.50]]
    ],
}


def make_record(
    display_name: str,
    category: str = "boundary",
    type_: str = "postal_code",
    importance: float | None = 0.3,
    postcode: str | None = None,
    geometry: dict | None = SQUARE,
    place_id: int = 1,
) -> dict:
    """Build a record shaped like a Nominatim jsonv2 search result."""
    record: dict = {
        "place_id": place_id,
        "display_name": display_name,
        "category": category,
        "type": type_,
        "boundingbox": ["51.50", "51.51", "-0.13", "-0.12"],
    }
    if importance is not None:
        record["importance"] = importance
    if postcode is not None:
        record["address"] = {"postcode": postcode, "country": "United Kingdom"}
    if geometry is not None:
        record["geojson"] = geometry
    return record


class ScriptedSearch:
    """
    Search stand-in that replays canned responses per query.

    Values may be a list of records or an exception to raise. Queries with
    no entry return an empty list. Every call is recorded with a timestamp.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list[str] = []
        self.times: list[float] = []

    async def __call__(self, query: str) -> list[dict]:
        self.calls.append(query)
        self.times.append(time.monotonic())
        response = self.responses.get(query, [])
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def postal_record():
    """The gold-standard candidate: a postal_code boundary for EC1A."""
    return make_record(
        "EC1A, London, Greater London, England, United Kingdom",
        postcode="EC1A",
        importance=0.4,
        place_id=101,
    )


@pytest.fixture()
def noisy_records():
    """Plausible-looking distractors for the EC1A query."""
    return [
        make_record(
            "City of London, Greater London, England, United Kingdom",
            type_="administrative",
            importance=0.8,
            place_id=201,
        ),
        make_record(
            "EC1A 1BB, St Bartholomew's Hospital, London, United Kingdom",
            category="place",
            type_="postcode",
            geometry={"type": "Point", "coordinates": [-0.1, 51.5]},
            place_id=202,
        ),
        make_record(
            "Little Britain, Farringdon, London EC1A, United Kingdom",
            category="highway",
            type_="residential",
            geometry=None,
            place_id=203,
        ),
    ]


@pytest.fixture()
def upstream_down():
    return UpstreamUnavailable("EC1A 1BB, United Kingdom", "HTTP 503")
