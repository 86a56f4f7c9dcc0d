"""
Enrichment client for points of interest: GeoNames nearby-Wikipedia lookups
plus Wikipedia page search and page summaries.

Every call makes a single attempt; transport failures and non-success
responses surface as UpstreamError and the caller decides what to do.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple
from urllib.parse import quote

import requests

from domain.errors import UpstreamError
from services.places_types import PlaceCandidate, PlaceSummary

GEONAMES_MAX_RADIUS_KM = 20.0
GEONAMES_MAX_ROWS = 50
WIKIPEDIA_SEARCH_LIMIT = 20
USER_AGENT = "landmark-browser/0.1 (https://github.com/landmark-browser)"


def default_wikipedia_url(title: str, base_url: str = "https://en.wikipedia.org") -> str:
    return f"{base_url.rstrip('/')}/wiki/{quote(title, safe='')}"


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class PlacesClient:
    def __init__(
        self,
        geonames_username: str,
        geonames_base_url: str = "http://api.geonames.org",
        wikipedia_base_url: str = "https://en.wikipedia.org",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.geonames_username = geonames_username
        self.geonames_base_url = geonames_base_url.rstrip("/")
        self.wikipedia_base_url = wikipedia_base_url.rstrip("/")
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self.session = session
        self.logger = logging.getLogger(__name__)

    def _get_json(self, provider: str, url: str, params: Optional[dict] = None) -> Any:
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamError(f"{provider} request failed: {exc}", provider=provider) from exc
        if not resp.ok:
            raise UpstreamError(
                f"{provider} API error: {resp.status_code}",
                provider=provider,
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(f"{provider} returned invalid JSON: {exc}", provider=provider) from exc

    def _wikipedia_url_from_geonames(self, entry: dict, title: str) -> str:
        url = entry.get("wikipediaUrl")
        if not url:
            return default_wikipedia_url(title, self.wikipedia_base_url)
        # GeoNames omits the scheme, e.g. "en.wikipedia.org/wiki/Coit_Tower"
        if not url.startswith(("http://", "https://")):
            url = f"https://{url}"
        return url

    def find_near(self, center: Tuple[float, float], radius_m: float) -> List[PlaceCandidate]:
        """Candidates with Wikipedia articles around `center`, radius capped at 20 km."""
        lat, lng = center
        radius_km = min(radius_m / 1000.0, GEONAMES_MAX_RADIUS_KM)
        data = self._get_json(
            "geonames",
            f"{self.geonames_base_url}/findNearbyWikipediaJSON",
            params={
                "lat": lat,
                "lng": lng,
                "radius": radius_km,
                "maxRows": GEONAMES_MAX_ROWS,
                "username": self.geonames_username,
            },
        )
        # GeoNames reports account/quota problems with HTTP 200 and a status object
        status = (data or {}).get("status")
        if status:
            raise UpstreamError(
                f"geonames API error: {status.get('message', 'unknown error')}",
                provider="geonames",
            )

        results: List[PlaceCandidate] = []
        for entry in (data or {}).get("geonames") or []:
            title = (entry.get("title") or "").strip()
            c_lat = _as_float(entry.get("lat"))
            c_lng = _as_float(entry.get("lng"))
            if not title or c_lat is None or c_lng is None:
                continue
            results.append(
                PlaceCandidate(
                    title=title,
                    lat=c_lat,
                    lng=c_lng,
                    summary=entry.get("summary") or None,
                    image_url=entry.get("thumbnailImg") or None,
                    wikipedia_url=self._wikipedia_url_from_geonames(entry, title),
                    page_id=_as_int(entry.get("wikipediaId")),
                )
            )
        self.logger.debug(
            "PlacesClient.find_near: lat=%.6f lng=%.6f radius_km=%.2f got %d candidates",
            lat,
            lng,
            radius_km,
            len(results),
        )
        return results

    def fetch_summary(self, title: str) -> PlaceSummary:
        """Wikipedia REST page summary for one title."""
        data = self._get_json(
            "wikipedia",
            f"{self.wikipedia_base_url}/api/rest_v1/page/summary/{quote(title, safe='')}",
        ) or {}
        coords = data.get("coordinates") or {}
        desktop = (data.get("content_urls") or {}).get("desktop") or {}
        return PlaceSummary(
            title=data.get("title") or title,
            extract=data.get("extract") or None,
            image_url=(data.get("thumbnail") or {}).get("source") or None,
            lat=_as_float(coords.get("lat")),
            lng=_as_float(coords.get("lon")),
            wikipedia_url=desktop.get("page") or default_wikipedia_url(title, self.wikipedia_base_url),
            page_id=_as_int(data.get("pageid")),
        )

    def search_by_text(self, query: str) -> List[PlaceCandidate]:
        """
        Wikipedia page search, keeping only pages whose summary carries coordinates.

        A failing search raises; a failing per-page summary only skips that page.
        """
        data = self._get_json(
            "wikipedia",
            f"{self.wikipedia_base_url}/w/rest.php/v1/search/page",
            params={"q": query, "limit": WIKIPEDIA_SEARCH_LIMIT},
        )
        results: List[PlaceCandidate] = []
        for page in (data or {}).get("pages") or []:
            title = page.get("title")
            if not title:
                continue
            try:
                summary = self.fetch_summary(title)
            except UpstreamError as exc:
                self.logger.warning("Error processing search result %r: %s", title, exc)
                continue
            if not summary.has_coordinates:
                continue
            results.append(
                PlaceCandidate(
                    title=title,
                    lat=summary.lat,
                    lng=summary.lng,
                    summary=summary.extract,
                    image_url=summary.image_url,
                    wikipedia_url=summary.wikipedia_url,
                    page_id=_as_int(page.get("id")) or summary.page_id,
                )
            )
        self.logger.debug("PlacesClient.search_by_text: q=%r got %d candidates", query, len(results))
        return results


def build_places_client(settings) -> PlacesClient:
    return PlacesClient(
        geonames_username=settings.GEONAMES_USERNAME,
        geonames_base_url=settings.GEONAMES_BASE_URL,
        wikipedia_base_url=settings.WIKIPEDIA_BASE_URL,
        timeout=settings.PROVIDER_TIMEOUT_SECONDS,
    )
