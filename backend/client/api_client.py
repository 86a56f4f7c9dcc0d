"""HTTP wrapper around the landmark browser API, used by the client-side state."""

import logging
from typing import Any, List, Optional

import requests

from domain.models import BoundingBox, GeocodeResult, Landmark

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """The API could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LandmarkApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 20.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[dict] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            logger.debug("GET request to %s", url)
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("GET request failed: %s - %s", url, e)
            raise ApiClientError(f"Failed to GET {url}: {e}") from e

    def _get_json(self, path: str, params: Optional[dict] = None, missing_ok: bool = False) -> Any:
        resp = self._get(path, params)
        if missing_ok and resp.status_code == 404:
            return None
        if not resp.ok:
            raise ApiClientError(f"GET {path} returned HTTP {resp.status_code}", resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise ApiClientError(f"GET {path} returned invalid JSON: {e}", resp.status_code) from e

    def landmarks_in_bounds(self, bounds: BoundingBox) -> List[Landmark]:
        data = self._get_json(
            "/api/landmarks/bounds",
            {"north": bounds.north, "south": bounds.south, "east": bounds.east, "west": bounds.west},
        )
        return [Landmark.from_dict(item) for item in data]

    def search_landmarks(
        self, query: str, lat: Optional[float] = None, lng: Optional[float] = None
    ) -> List[Landmark]:
        params: dict = {"query": query}
        if lat is not None and lng is not None:
            params.update(lat=lat, lng=lng)
        data = self._get_json("/api/landmarks/search", params)
        return [Landmark.from_dict(item) for item in data]

    def get_landmark(self, landmark_id: int) -> Optional[Landmark]:
        """Fetch one landmark; returns None when the server answers 404."""
        data = self._get_json(f"/api/landmarks/{landmark_id}", missing_ok=True)
        return Landmark.from_dict(data) if data is not None else None

    def geocode(self, query: str) -> List[GeocodeResult]:
        data = self._get_json("/api/geocode", {"q": query})
        return [
            GeocodeResult(
                display_name=item.get("display_name", ""),
                lat=float(item["lat"]),
                lng=float(item["lng"]),
                type=item.get("type"),
                importance=item.get("importance"),
            )
            for item in data
        ]

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "LandmarkApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
