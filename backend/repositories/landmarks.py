"""
Landmark store backed by SQLAlchemy (SQLite by default).

Same contract as MemoryLandmarkStore; each call opens and commits its own
session.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, sessionmaker

from domain.models import (
    BoundingBox,
    Landmark,
    LandmarkType,
    SearchLog,
    SearchLogEntry,
    validate_landmark_fields,
)
from repositories.models import LandmarkORM, SearchLogORM


def _landmark_from_orm(orm: LandmarkORM) -> Landmark:
    return Landmark(
        id=orm.id,
        title=orm.title,
        lat=orm.lat,
        lng=orm.lng,
        type=LandmarkType(orm.type),
        description=orm.description,
        image_url=orm.image_url,
        wikipedia_url=orm.wikipedia_url,
        wikipedia_page_id=orm.wikipedia_page_id,
        opened=orm.opened,
        categories=list(orm.categories or []),
        created_at=orm.created_at,
    )


def _search_from_orm(orm: SearchLogORM) -> SearchLog:
    return SearchLog(
        id=orm.id,
        query=orm.query,
        lat=orm.lat,
        lng=orm.lng,
        radius=orm.radius,
        result_count=orm.result_count or 0,
        created_at=orm.created_at,
    )


def _apply_fields(orm: LandmarkORM, clean: Dict[str, Any]) -> None:
    for name, value in clean.items():
        if name == "type":
            value = value.value
        setattr(orm, name, value)
    if "title" in clean:
        orm.title_folded = clean["title"].casefold()
    if "description" in clean:
        orm.description_folded = clean["description"].casefold() if clean["description"] else None


class SqlLandmarkStore:
    """CRUD operations for landmarks and the search log."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _session(self) -> Session:
        return self._session_factory()

    def get(self, landmark_id: int) -> Optional[Landmark]:
        with self._session() as session:
            orm = session.get(LandmarkORM, landmark_id)
            return _landmark_from_orm(orm) if orm else None

    def upsert(self, fields: Dict[str, Any], landmark_id: Optional[int] = None) -> Landmark:
        with self._session() as session:
            orm = session.get(LandmarkORM, landmark_id) if landmark_id is not None else None
            if orm is not None:
                _apply_fields(orm, validate_landmark_fields(fields, creating=False))
            else:
                clean = validate_landmark_fields(fields, creating=True)
                clean.setdefault("type", LandmarkType.HISTORICAL_SITES)
                orm = LandmarkORM(created_at=datetime.utcnow())
                _apply_fields(orm, clean)
                session.add(orm)
            session.commit()
            session.refresh(orm)
            return _landmark_from_orm(orm)

    def query_by_bounds(self, box: BoundingBox) -> List[Landmark]:
        with self._session() as session:
            rows = (
                session.query(LandmarkORM)
                .filter(
                    LandmarkORM.lat >= box.south,
                    LandmarkORM.lat <= box.north,
                    LandmarkORM.lng >= box.west,
                    LandmarkORM.lng <= box.east,
                )
                .order_by(LandmarkORM.id)
                .all()
            )
            return [_landmark_from_orm(r) for r in rows]

    def search_by_title(self, text: str) -> List[Landmark]:
        needle = text.casefold()
        with self._session() as session:
            rows = (
                session.query(LandmarkORM)
                .filter(
                    or_(
                        LandmarkORM.title_folded.contains(needle, autoescape=True),
                        LandmarkORM.description_folded.contains(needle, autoescape=True),
                    )
                )
                .order_by(LandmarkORM.id)
                .all()
            )
            return [_landmark_from_orm(r) for r in rows]

    def append_search_log(self, entry: SearchLogEntry) -> SearchLog:
        with self._session() as session:
            orm = SearchLogORM(
                query=entry.query,
                lat=entry.lat,
                lng=entry.lng,
                radius=entry.radius,
                result_count=entry.result_count,
                created_at=datetime.utcnow(),
            )
            session.add(orm)
            session.commit()
            session.refresh(orm)
            return _search_from_orm(orm)

    def recent_search_logs(self, limit: int = 10) -> List[SearchLog]:
        with self._session() as session:
            rows = (
                session.query(SearchLogORM)
                .order_by(SearchLogORM.created_at.desc(), SearchLogORM.id.desc())
                .limit(max(limit, 0))
                .all()
            )
            return [_search_from_orm(r) for r in rows]

    def count(self) -> int:
        with self._session() as session:
            return session.query(LandmarkORM).count()
