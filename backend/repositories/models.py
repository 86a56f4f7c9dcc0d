"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text

from db import Base


class LandmarkORM(Base):
    __tablename__ = "landmarks"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    # casefolded copies for case-insensitive search; SQLite lower() is ASCII-only
    title_folded = Column(Text, nullable=False, default="")
    description_folded = Column(Text, nullable=True)
    lat = Column(Float, nullable=False, index=True)
    lng = Column(Float, nullable=False, index=True)
    type = Column(String, nullable=False)
    wikipedia_url = Column(Text, nullable=True)
    wikipedia_page_id = Column(Integer, nullable=True)
    image_url = Column(Text, nullable=True)
    opened = Column(Text, nullable=True)
    categories = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class SearchLogORM(Base):
    __tablename__ = "searches"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    query = Column(Text, nullable=False)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    radius = Column(Float, nullable=True)
    result_count = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
