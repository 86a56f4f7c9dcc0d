"""
Locally persisted favorite landmarks.

Favorites are snapshots of Landmark records keyed by id and stored as one
JSON list. Every change rewrites the full list immediately.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

from domain.models import Landmark

logger = logging.getLogger(__name__)

FAVORITES_FILENAME = "landmark-favorites.json"


class JsonFileFavoritesStorage:
    """persist(list) / load() -> list over a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Error loading favorites from %s: %s", self.path, exc)
            return []
        return data if isinstance(data, list) else []

    def persist(self, items: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(items, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)


def _parse_snapshots(items: List[Dict[str, Any]]) -> List[Landmark]:
    try:
        return [Landmark.from_dict(item) for item in items]
    except (KeyError, TypeError, ValueError) as exc:
        # Any unreadable entry means the stored list is not trustworthy
        logger.error("Discarding corrupt favorites data: %s", exc)
        return []


class Favorites:
    def __init__(self, storage):
        self.storage = storage
        self._items: List[Landmark] = _parse_snapshots(storage.load())

    @property
    def favorites(self) -> List[Landmark]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def is_favorite(self, landmark_id: int) -> bool:
        return any(fav.id == landmark_id for fav in self._items)

    def add(self, landmark: Landmark) -> None:
        if self.is_favorite(landmark.id):
            return
        self._items = self._items + [landmark]
        self._persist()

    def remove(self, landmark_id: int) -> None:
        self._items = [fav for fav in self._items if fav.id != landmark_id]
        self._persist()

    def toggle(self, landmark: Landmark) -> bool:
        """Add or remove `landmark`; returns True when it is now a favorite."""
        if self.is_favorite(landmark.id):
            self.remove(landmark.id)
            return False
        self.add(landmark)
        return True

    def _persist(self) -> None:
        self.storage.persist([fav.to_dict() for fav in self._items])
