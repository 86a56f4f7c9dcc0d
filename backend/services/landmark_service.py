"""
Landmark query orchestration: store lookup first, provider fallback on a
miss, then background backfill of the richer Wikipedia fields.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from domain.errors import NotFoundError, ValidationError
from domain.models import BoundingBox, Landmark, SearchLog, SearchLogEntry
from services.classification import classify_landmark
from services.places_client import default_wikipedia_url
from services.places_enrichment import backfill_landmarks
from services.places_types import PlaceCandidate

logger = logging.getLogger(__name__)

DEFAULT_MAX_LANDMARKS = 20


@dataclass
class QueryResult:
    landmarks: List[Landmark]
    cache_hit: bool
    # Landmarks created on this request that still need the backfill pass
    pending_backfill: List[Landmark] = field(default_factory=list)


class LandmarkQueryService:
    def __init__(self, store, client, max_landmarks: int = DEFAULT_MAX_LANDMARKS, backfill_enabled: bool = True):
        self.store = store
        self.client = client
        self.max_landmarks = max_landmarks
        self.backfill_enabled = backfill_enabled

    def get_landmark(self, landmark_id: int) -> Landmark:
        landmark = self.store.get(landmark_id)
        if landmark is None:
            raise NotFoundError(f"Landmark {landmark_id} not found")
        return landmark

    def landmarks_in_bounds(self, box: BoundingBox) -> QueryResult:
        """
        Return stored landmarks inside `box`, or fetch and store provider
        candidates when there are none.

        Raises UpstreamError when the provider fetch fails.
        """
        cached = self.store.query_by_bounds(box)
        if cached:
            logger.debug("bounds cache hit: %s (%d landmarks)", box.cache_key(), len(cached))
            return QueryResult(landmarks=cached, cache_hit=True)

        center = box.center
        radius = box.approximate_radius_m
        logger.info(
            "bounds cache miss: %s center=(%.5f, %.5f) radius_m=%.0f",
            box.cache_key(),
            center[0],
            center[1],
            radius,
        )
        candidates = self.client.find_near(center, radius)
        created = self._materialize(candidates[: self.max_landmarks], use_description=False)

        self._log_search(
            SearchLogEntry(
                query=box.cache_key(),
                lat=center[0],
                lng=center[1],
                radius=radius,
                result_count=len(created),
            )
        )
        pending = list(created) if self.backfill_enabled else []
        return QueryResult(landmarks=created, cache_hit=False, pending_backfill=pending)

    def search(self, query: str, lat: Optional[float] = None, lng: Optional[float] = None) -> QueryResult:
        """Title/description search over the store, falling back to Wikipedia search."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("query must be a non-empty string")

        local = self.store.search_by_title(query)
        if local:
            logger.debug("search cache hit: q=%r (%d landmarks)", query, len(local))
            return QueryResult(landmarks=local, cache_hit=True)

        candidates = self.client.search_by_text(query)
        created = self._materialize(candidates, use_description=True)
        self._log_search(SearchLogEntry(query=query, lat=lat, lng=lng, result_count=len(created)))
        return QueryResult(landmarks=created, cache_hit=False)

    def backfill(self, landmarks: Sequence[Landmark]) -> List[Landmark]:
        return backfill_landmarks(self.store, self.client, landmarks)

    def recent_searches(self, limit: int = 10) -> List[SearchLog]:
        return self.store.recent_search_logs(limit)

    def _materialize(self, candidates: Sequence[PlaceCandidate], use_description: bool) -> List[Landmark]:
        created: List[Landmark] = []
        for cand in candidates:
            landmark_type = classify_landmark(cand.title, cand.summary if use_description else None)
            fields = {
                "title": cand.title,
                "description": cand.summary or "",
                "lat": cand.lat,
                "lng": cand.lng,
                "type": landmark_type,
                "wikipedia_url": cand.wikipedia_url or default_wikipedia_url(cand.title),
                "wikipedia_page_id": cand.page_id,
                "image_url": cand.image_url or "",
                "categories": [landmark_type.value],
            }
            try:
                created.append(self.store.upsert(fields))
            except ValidationError as exc:
                logger.warning("Skipping provider candidate %r: %s", cand.title, exc)
        return created

    def _log_search(self, entry: SearchLogEntry) -> None:
        try:
            self.store.append_search_log(entry)
        except Exception:
            logger.exception("Failed to record search log for %r", entry.query)
