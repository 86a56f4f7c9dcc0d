"""Lightweight forward geocoding helpers using OpenStreetMap Nominatim.

Used by the location search box: free text in, a handful of candidate
coordinates out. Requests share one session and a global rate limit so we
stay within the Nominatim usage policy.
"""

from __future__ import annotations

import os
import re
import threading
import time
import logging
from functools import lru_cache
from typing import Any, List, Tuple

import requests

from domain.errors import UpstreamError
from domain.models import GeocodeResult

NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org").rstrip("/")
logger = logging.getLogger(__name__)
_session = requests.Session()
_last_request_ts: float = 0.0
_lock = threading.Lock()
_MIN_INTERVAL_SEC = float(os.getenv("NOMINATIM_MIN_INTERVAL", "1.1"))
_TIMEOUT_SEC = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
_logged_ua = False
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT")
NOMINATIM_REFERER = os.getenv("NOMINATIM_REFERER")
GEOCODE_RESULT_LIMIT = 5

FALLBACK_UA = "landmark-browser/0.1 (contact: example@example.com)"
if NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )


def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)


_ua_value = NOMINATIM_USER_AGENT or FALLBACK_UA
NOMINATIM_HEADERS = {
    "User-Agent": _ua_value,
}
if NOMINATIM_REFERER:
    NOMINATIM_HEADERS["Referer"] = NOMINATIM_REFERER


def _throttled_get(
    url: str,
    *,
    params: dict[str, Any],
    headers: dict[str, str],
    timeout: float,
) -> requests.Response:
    """Perform a GET request with a simple global rate limit."""
    global _last_request_ts
    with _lock:
        now = time.time()
        delta = now - _last_request_ts
        if delta < _MIN_INTERVAL_SEC:
            time.sleep(_MIN_INTERVAL_SEC - delta)
        _last_request_ts = time.time()
    return _session.get(url, params=params, headers=headers, timeout=timeout)


def _parse_item(item: dict) -> GeocodeResult:
    importance = item.get("importance")
    return GeocodeResult(
        display_name=item.get("display_name", ""),
        lat=float(item["lat"]),
        lng=float(item["lon"]),
        type=item.get("type"),
        importance=float(importance) if importance is not None else None,
    )


@lru_cache(maxsize=256)
def _search_cached(query: str) -> Tuple[GeocodeResult, ...]:
    global _logged_ua
    if not _logged_ua:
        logger.debug("Nominatim User-Agent: %s", _redact_email(_ua_value))
        _logged_ua = True

    params = {
        "format": "json",
        "q": query,
        "limit": str(GEOCODE_RESULT_LIMIT),
        "addressdetails": "1",
    }
    try:
        resp = _throttled_get(
            f"{NOMINATIM_BASE_URL}/search",
            params=params,
            headers=NOMINATIM_HEADERS,
            timeout=_TIMEOUT_SEC,
        )
    except requests.RequestException as exc:
        logger.warning("Nominatim search error for q=%r: %s", query, exc)
        raise UpstreamError(f"Geocoding request failed: {exc}", provider="nominatim") from exc

    if not resp.ok:
        logger.warning("Nominatim search for q=%r returned HTTP %s", query, resp.status_code)
        raise UpstreamError(
            f"Geocoding API error: {resp.status_code}",
            provider="nominatim",
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
        return tuple(_parse_item(item) for item in data or [])
    except (ValueError, KeyError, TypeError) as exc:
        logger.warning("Nominatim search JSON error for q=%r: %s", query, exc)
        raise UpstreamError(f"Geocoding response could not be parsed: {exc}", provider="nominatim") from exc


def geocode_search(query: str) -> List[GeocodeResult]:
    """Forward geocode free text into up to five candidate locations.

    Raises UpstreamError on network or provider errors; failures are not cached.
    """
    return list(_search_cached(query.strip()))
