from .memory import MemoryLandmarkStore
from .landmarks import SqlLandmarkStore
from . import models

__all__ = ["MemoryLandmarkStore", "SqlLandmarkStore", "models", "create_store"]


def create_store(settings):
    """Build the store selected by LANDMARK_STORE ("memory" or "sql")."""
    if settings.LANDMARK_STORE == "sql":
        from db import init_db, make_engine, make_session_factory

        engine = make_engine(settings.DATABASE_URL)
        init_db(engine)
        return SqlLandmarkStore(make_session_factory(engine))
    if settings.LANDMARK_STORE != "memory":
        raise ValueError(f"Unknown LANDMARK_STORE: {settings.LANDMARK_STORE!r}")
    return MemoryLandmarkStore()
