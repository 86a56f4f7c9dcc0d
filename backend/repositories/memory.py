"""
In-memory landmark store.

Dictionary-backed; one instance is created at process start and handed to
request handlers. Tests build a fresh instance each time.
"""
import copy
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from domain.models import (
    BoundingBox,
    Landmark,
    SearchLog,
    SearchLogEntry,
    validate_landmark_fields,
)


class MemoryLandmarkStore:
    """Owns all Landmark and SearchLog records; callers only ever get copies."""

    def __init__(self) -> None:
        self._landmarks: Dict[int, Landmark] = {}
        self._searches: Dict[int, SearchLog] = {}
        self._next_landmark_id = 1
        self._next_search_id = 1
        self._lock = threading.RLock()

    def get(self, landmark_id: int) -> Optional[Landmark]:
        with self._lock:
            landmark = self._landmarks.get(landmark_id)
            return copy.deepcopy(landmark) if landmark else None

    def upsert(self, fields: Dict[str, Any], landmark_id: Optional[int] = None) -> Landmark:
        with self._lock:
            existing = self._landmarks.get(landmark_id) if landmark_id is not None else None
            if existing is not None:
                clean = validate_landmark_fields(fields, creating=False)
                for name, value in clean.items():
                    setattr(existing, name, value)
                return copy.deepcopy(existing)

            clean = validate_landmark_fields(fields, creating=True)
            new_id = self._next_landmark_id
            self._next_landmark_id += 1
            landmark = Landmark(id=new_id, created_at=datetime.utcnow(), **clean)
            self._landmarks[new_id] = landmark
            return copy.deepcopy(landmark)

    def query_by_bounds(self, box: BoundingBox) -> List[Landmark]:
        with self._lock:
            return [copy.deepcopy(l) for l in self._landmarks.values() if box.contains(l.lat, l.lng)]

    def search_by_title(self, text: str) -> List[Landmark]:
        needle = text.casefold()
        with self._lock:
            return [
                copy.deepcopy(l)
                for l in self._landmarks.values()
                if needle in l.title.casefold() or (l.description and needle in l.description.casefold())
            ]

    def append_search_log(self, entry: SearchLogEntry) -> SearchLog:
        with self._lock:
            search_id = self._next_search_id
            self._next_search_id += 1
            record = SearchLog(
                id=search_id,
                query=entry.query,
                lat=entry.lat,
                lng=entry.lng,
                radius=entry.radius,
                result_count=entry.result_count,
                created_at=datetime.utcnow(),
            )
            self._searches[search_id] = record
            return copy.deepcopy(record)

    def recent_search_logs(self, limit: int = 10) -> List[SearchLog]:
        with self._lock:
            ordered = sorted(
                self._searches.values(),
                key=lambda s: (s.created_at or datetime.min, s.id),
                reverse=True,
            )
            return [copy.deepcopy(s) for s in ordered[: max(limit, 0)]]

    def count(self) -> int:
        with self._lock:
            return len(self._landmarks)
