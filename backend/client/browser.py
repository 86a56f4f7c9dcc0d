"""
Client-side state behind the map view: the landmarks on screen, the type
filter, the selected landmark, location search results and favorites.

The UI itself is out of scope; it reads this state and forwards map events.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

from client.api_client import ApiClientError, LandmarkApiClient
from client.bounds_tracker import DEFAULT_DEBOUNCE_SECONDS, BoundsTracker
from client.distance import format_distance
from client.favorites import Favorites
from domain.models import LANDMARK_TYPES, BoundingBox, GeocodeResult, Landmark

logger = logging.getLogger(__name__)

DIRECTIONS_BASE_URL = "https://www.google.com/maps/dir/"

# notify(title, description)
Notifier = Callable[[str, str], None]


def filter_by_types(landmarks: List[Landmark], selected_types: List[str]) -> List[Landmark]:
    """An empty selection shows every landmark."""
    if not selected_types:
        return list(landmarks)
    return [l for l in landmarks if l.type.value in selected_types]


def directions_url(landmark: Landmark) -> str:
    """Google Maps directions link to the landmark."""
    return f"{DIRECTIONS_BASE_URL}?api=1&destination={landmark.lat},{landmark.lng}"


def count_by_type(landmarks: List[Landmark]) -> Dict[str, int]:
    counts = {t: 0 for t in LANDMARK_TYPES}
    for landmark in landmarks:
        counts[landmark.type.value] = counts.get(landmark.type.value, 0) + 1
    return counts


class LandmarkBrowser:
    def __init__(
        self,
        api: LandmarkApiClient,
        favorites: Favorites,
        notify: Optional[Notifier] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.api = api
        self.favorites = favorites
        self.notify = notify or (lambda title, description: logger.warning("%s: %s", title, description))
        self.landmarks: List[Landmark] = []
        self.selected_types: List[str] = []
        self.selected_landmark: Optional[Landmark] = None
        self.location_results: List[GeocodeResult] = []
        self.tracker = BoundsTracker(
            fetch=api.landmarks_in_bounds,
            on_result=self._show_landmarks,
            on_error=self._on_landmarks_error,
            delay=debounce_seconds,
            timer_factory=timer_factory,
        )

    # Map events

    def viewport_settled(self, bounds: BoundingBox) -> None:
        self.tracker.viewport_settled(bounds)

    def _show_landmarks(self, landmarks: List[Landmark]) -> None:
        self.landmarks = list(landmarks)

    def _on_landmarks_error(self, exc: Exception) -> None:
        self.notify("Failed to load landmarks", "Please check your internet connection and try again.")

    # Type filter

    def toggle_type(self, landmark_type: str) -> None:
        if landmark_type in self.selected_types:
            self.selected_types = [t for t in self.selected_types if t != landmark_type]
        else:
            self.selected_types = self.selected_types + [landmark_type]

    def clear_types(self) -> None:
        self.selected_types = []

    @property
    def visible_landmarks(self) -> List[Landmark]:
        return filter_by_types(self.landmarks, self.selected_types)

    @property
    def type_counts(self) -> Dict[str, int]:
        return count_by_type(self.landmarks)

    # Details panel

    def select_landmark(self, landmark: Landmark) -> Landmark:
        """
        Open a landmark, refreshing it from the server so backfilled
        description/image show up. Falls back to the snapshot on error.
        """
        self.selected_landmark = landmark
        try:
            fresh = self.api.get_landmark(landmark.id)
        except ApiClientError as exc:
            logger.info("Could not refresh landmark %s: %s", landmark.id, exc)
            return landmark
        if fresh is not None:
            self.selected_landmark = fresh
        return self.selected_landmark

    def close_details(self) -> None:
        self.selected_landmark = None

    def distance_to(self, landmark: Landmark, user_location: Optional[Tuple[float, float]]) -> Optional[str]:
        if user_location is None:
            return None
        return format_distance(user_location[0], user_location[1], landmark.lat, landmark.lng)

    def directions_url(self, landmark: Landmark) -> str:
        return directions_url(landmark)

    # Search box

    def search_locations(self, query: str) -> List[GeocodeResult]:
        if not query or not query.strip():
            self.location_results = []
            return []
        try:
            self.location_results = self.api.geocode(query)
        except ApiClientError as exc:
            logger.warning("Location search failed for %r: %s", query, exc)
            self.notify("Search failed", "Unable to search for locations. Please try again.")
            self.location_results = []
        return self.location_results

    def search_landmarks(self, query: str, near: Optional[Tuple[float, float]] = None) -> List[Landmark]:
        lat, lng = near if near is not None else (None, None)
        try:
            results = self.api.search_landmarks(query, lat=lat, lng=lng)
        except ApiClientError as exc:
            logger.warning("Landmark search failed for %r: %s", query, exc)
            self.notify("Search failed", "Unable to search for landmarks. Please try again.")
            results = []
        self.landmarks = results
        return results

    # Favorites

    def toggle_favorite(self, landmark: Landmark) -> bool:
        return self.favorites.toggle(landmark)

    def is_favorite(self, landmark_id: int) -> bool:
        return self.favorites.is_favorite(landmark_id)
