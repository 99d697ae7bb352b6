"""Typed result models for ukboundary."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

POLYGON_TYPES = frozenset({"Polygon", "MultiPolygon"})


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _importance(value: Any) -> float:
    """Nominatim importance is a relevance in [0, 1]; clamp anything else."""
    return min(max(_to_float(value), 0.0), 1.0)


@dataclass(frozen=True)
class BoundingBox:
    """Viewport bounds in WGS84 degrees, ordered as Nominatim reports them."""

    south: float
    north: float
    west: float
    east: float

    @classmethod
    def from_nominatim(cls, value: Any) -> Optional[BoundingBox]:
        """Parse a ``[south, north, west, east]`` list of strings or numbers."""
        if not isinstance(value, (list, tuple)) or len(value) != 4:
            return None
        try:
            south, north, west, east = (float(v) for v in value)
        except (TypeError, ValueError):
            return None
        return cls(south=south, north=north, west=west, east=east)

    def to_geojson_bbox(self) -> list[float]:
        """GeoJSON order: [west, south, east, north]."""
        return [self.west, self.south, self.east, self.north]


@dataclass(frozen=True)
class SearchCandidate:
    """One record returned by the upstream geocoding search."""

    display_name: str
    classification: str
    subtype: str
    importance: float = 0.0
    structured_postcode: Optional[str] = None
    geometry: Optional[Mapping[str, Any]] = None
    bounds: Optional[BoundingBox] = None
    place_id: Optional[int] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> SearchCandidate:
        """
        Build a candidate from a Nominatim ``json`` or ``jsonv2`` record.

        ``json`` calls the classification ``class``; ``jsonv2`` calls it
        ``category``. Missing or malformed optional fields fall back to
        their defaults rather than failing the whole response.
        """
        address = record.get("address")
        postcode = address.get("postcode") if isinstance(address, Mapping) else None
        geometry = record.get("geojson")
        place_id = record.get("place_id")

        return cls(
            display_name=str(record.get("display_name") or ""),
            classification=str(record.get("category") or record.get("class") or ""),
            subtype=str(record.get("type") or ""),
            importance=_importance(record.get("importance")),
            structured_postcode=str(postcode) if postcode else None,
            geometry=geometry if isinstance(geometry, Mapping) else None,
            bounds=BoundingBox.from_nominatim(record.get("boundingbox")),
            place_id=place_id if isinstance(place_id, int) else None,
            raw=record,
        )

    @property
    def geometry_type(self) -> Optional[str]:
        if self.geometry is None:
            return None
        geometry_type = self.geometry.get("type")
        return geometry_type if isinstance(geometry_type, str) else None

    @property
    def has_polygon(self) -> bool:
        """True if the geometry is something a renderer can draw as an area."""
        return self.geometry_type in POLYGON_TYPES


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate paired with its relevance score for one fragment."""

    candidate: SearchCandidate
    score: float


@dataclass(frozen=True)
class ResolutionResult:
    """The accepted boundary for a postcode and the fragment that found it."""

    candidate: SearchCandidate
    fragment: str
    score: float
    attempted: tuple[str, ...] = ()

    @property
    def geometry(self) -> Mapping[str, Any]:
        return self.candidate.geometry or {}

    @property
    def bounds(self) -> Optional[BoundingBox]:
        return self.candidate.bounds

    def to_dict(self) -> dict:
        """Convert to a plain dictionary (useful for JSON serialisation)."""
        bounds = self.bounds
        return {
            "fragment": self.fragment,
            "display_name": self.candidate.display_name,
            "classification": self.candidate.classification,
            "subtype": self.candidate.subtype,
            "score": round(self.score, 3),
            "geometry_type": self.candidate.geometry_type,
            "bounds": (
                [bounds.south, bounds.north, bounds.west, bounds.east]
                if bounds is not None
                else None
            ),
            "attempted": list(self.attempted),
        }

    def to_feature(self) -> dict:
        """Wrap the boundary as a GeoJSON Feature for map renderers."""
        feature: dict = {
            "type": "Feature",
            "geometry": dict(self.geometry),
            "properties": {
                "name": self.fragment,
                "display_name": self.candidate.display_name,
                "place_id": self.candidate.place_id,
                "score": round(self.score, 3),
            },
        }
        if self.bounds is not None:
            feature["bbox"] = self.bounds.to_geojson_bbox()
        return feature
