"""
Core domain models for the landmark browser.
These are framework-agnostic and can be used across all services.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from domain.errors import ValidationError

METERS_PER_DEGREE = 111000.0


class LandmarkType(str, Enum):
    """Fixed set of landmark categories shown in the filter panel."""
    HISTORICAL_SITES = "Historical Sites"
    MUSEUMS = "Museums"
    PARKS_AND_NATURE = "Parks & Nature"
    ARCHITECTURE = "Architecture"


LANDMARK_TYPES: List[str] = [t.value for t in LandmarkType]


def check_lat(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or not -90.0 <= value <= 90.0:
        raise ValidationError(f"{name} must be a latitude between -90 and 90, got {value!r}")


def check_lng(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or not -180.0 <= value <= 180.0:
        raise ValidationError(f"{name} must be a longitude between -180 and 180, got {value!r}")


@dataclass(frozen=True)
class BoundingBox:
    """A rectangular lat/lng region. Never persisted, only queried."""
    north: float
    south: float
    east: float
    west: float

    def __post_init__(self) -> None:
        check_lat("north", self.north)
        check_lat("south", self.south)
        check_lng("east", self.east)
        check_lng("west", self.west)
        if self.north < self.south:
            raise ValidationError("north must be greater than or equal to south")
        if self.east < self.west:
            raise ValidationError("east must be greater than or equal to west")

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lng <= self.east

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.north + self.south) / 2, (self.east + self.west) / 2)

    @property
    def approximate_radius_m(self) -> float:
        """
        Half of the larger side of the box in meters.

        Latitude span uses a flat 111 km per degree; longitude span is scaled by
        cos(center latitude). Not geodesically accurate.
        """
        center_lat, _ = self.center
        lat_span_m = abs(self.north - self.south) * METERS_PER_DEGREE
        lng_span_m = abs(self.east - self.west) * METERS_PER_DEGREE * math.cos(math.radians(center_lat))
        return max(lat_span_m, lng_span_m) / 2

    def cache_key(self) -> str:
        return f"bounds:{self.north},{self.south},{self.east},{self.west}"


@dataclass
class Landmark:
    """
    A point of interest shown on the map.

    `id` and `created_at` are assigned by the store and never change; the
    descriptive fields may be backfilled later.
    """
    id: int
    title: str
    lat: float
    lng: float
    type: LandmarkType = LandmarkType.HISTORICAL_SITES
    description: Optional[str] = None
    image_url: Optional[str] = None
    wikipedia_url: Optional[str] = None
    wikipedia_page_id: Optional[int] = None
    opened: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase wire names."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "lat": self.lat,
            "lng": self.lng,
            "type": self.type.value,
            "imageUrl": self.image_url,
            "wikipediaUrl": self.wikipedia_url,
            "wikipediaPageId": self.wikipedia_page_id,
            "opened": self.opened,
            "categories": list(self.categories),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Landmark":
        created_at = data.get("createdAt")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=int(data["id"]),
            title=data["title"],
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            type=LandmarkType(data.get("type") or LandmarkType.HISTORICAL_SITES.value),
            description=data.get("description"),
            image_url=data.get("imageUrl"),
            wikipedia_url=data.get("wikipediaUrl"),
            wikipedia_page_id=data.get("wikipediaPageId"),
            opened=data.get("opened"),
            categories=list(data.get("categories") or []),
            created_at=created_at,
        )


# Fields callers may pass to LandmarkStore.upsert.
LANDMARK_MUTABLE_FIELDS = (
    "title",
    "lat",
    "lng",
    "type",
    "description",
    "image_url",
    "wikipedia_url",
    "wikipedia_page_id",
    "opened",
    "categories",
)


def validate_landmark_fields(fields: Dict[str, Any], creating: bool) -> Dict[str, Any]:
    """
    Check an upsert payload and return a normalized copy.

    When `creating` is True, title/lat/lng are required.
    """
    unknown = set(fields) - set(LANDMARK_MUTABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown or immutable landmark fields: {sorted(unknown)}")
    clean = dict(fields)
    if creating:
        for required in ("title", "lat", "lng"):
            if clean.get(required) is None:
                raise ValidationError(f"{required} is required")
    if "title" in clean:
        title = clean["title"]
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("title must be a non-empty string")
    if "lat" in clean:
        check_lat("lat", clean["lat"])
        clean["lat"] = float(clean["lat"])
    if "lng" in clean:
        check_lng("lng", clean["lng"])
        clean["lng"] = float(clean["lng"])
    if "type" in clean:
        try:
            clean["type"] = LandmarkType(clean["type"] or LandmarkType.HISTORICAL_SITES.value)
        except ValueError:
            raise ValidationError(f"Unknown landmark type: {clean['type']!r}")
    if "categories" in clean:
        clean["categories"] = list(clean["categories"] or [])
    return clean


@dataclass
class SearchLog:
    """A record of one provider-backed query. Write-once."""
    id: int
    query: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: Optional[float] = None
    result_count: int = 0
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "query": self.query,
            "lat": self.lat,
            "lng": self.lng,
            "radius": self.radius,
            "resultCount": self.result_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class SearchLogEntry:
    """Payload for appending a search log; the store assigns id/created_at."""
    query: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: Optional[float] = None
    result_count: int = 0


@dataclass(frozen=True)
class GeocodeResult:
    display_name: str
    lat: float
    lng: float
    type: Optional[str] = None
    importance: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "display_name": self.display_name,
            "lat": self.lat,
            "lng": self.lng,
            "type": self.type,
            "importance": self.importance,
        }
