from dataclasses import dataclass
from typing import Optional


@dataclass
class PlaceCandidate:
    title: str
    lat: float
    lng: float
    summary: Optional[str] = None  # short provider blurb, good enough for first paint
    image_url: Optional[str] = None
    wikipedia_url: Optional[str] = None
    page_id: Optional[int] = None


@dataclass
class PlaceSummary:
    title: str
    extract: Optional[str] = None
    image_url: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    wikipedia_url: Optional[str] = None
    page_id: Optional[int] = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None
