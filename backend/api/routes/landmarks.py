"""
Landmark API routes.
"""
import logging
import math
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from api.dependencies import get_service
from domain.errors import NotFoundError, UpstreamError, ValidationError
from domain.models import BoundingBox, Landmark, check_lat, check_lng
from services.landmark_service import LandmarkQueryService

router = APIRouter()
logger = logging.getLogger(__name__)


class LandmarkResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = None
    lat: float
    lng: float
    type: str
    image_url: Optional[str] = None
    wikipedia_url: Optional[str] = None
    wikipedia_page_id: Optional[int] = None
    opened: Optional[str] = None
    categories: List[str] = []
    created_at: Optional[datetime] = None


def landmark_to_response(landmark: Landmark) -> LandmarkResponse:
    """Convert domain Landmark to API response."""
    return LandmarkResponse(
        id=landmark.id,
        title=landmark.title,
        description=landmark.description,
        lat=landmark.lat,
        lng=landmark.lng,
        type=landmark.type.value,
        image_url=landmark.image_url,
        wikipedia_url=landmark.wikipedia_url,
        wikipedia_page_id=landmark.wikipedia_page_id,
        opened=landmark.opened,
        categories=list(landmark.categories),
        created_at=landmark.created_at,
    )


def parse_float_param(name: str, raw: Optional[str], required: bool = True) -> Optional[float]:
    """Parse a query-string float; missing, non-numeric or non-finite values are invalid."""
    if raw is None or raw.strip() == "":
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number, got {raw!r}")
    return value


@router.get("/bounds", response_model=List[LandmarkResponse])
def landmarks_in_bounds(
    background_tasks: BackgroundTasks,
    north: Optional[str] = None,
    south: Optional[str] = None,
    east: Optional[str] = None,
    west: Optional[str] = None,
    service: LandmarkQueryService = Depends(get_service),
):
    """
    Landmarks inside the visible map bounds.

    Served from the store when it already has landmarks in the box; otherwise
    fetched from GeoNames, stored, and backfilled from Wikipedia after the
    response is sent.
    """
    try:
        box = BoundingBox(
            north=parse_float_param("north", north),
            south=parse_float_param("south", south),
            east=parse_float_param("east", east),
            west=parse_float_param("west", west),
        )
    except ValidationError as exc:
        logger.info("Bounds validation error: %s", exc)
        raise HTTPException(status_code=400, detail=f"Invalid bounds parameters: {exc}")

    try:
        result = service.landmarks_in_bounds(box)
    except UpstreamError as exc:
        logger.error("Landmark provider error for %s: %s", box.cache_key(), exc)
        raise HTTPException(status_code=500, detail="Failed to fetch landmarks from Wikipedia")

    if result.pending_backfill:
        background_tasks.add_task(service.backfill, result.pending_backfill)
    return [landmark_to_response(l) for l in result.landmarks]


@router.get("/search", response_model=List[LandmarkResponse])
def search_landmarks(
    query: Optional[str] = None,
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    service: LandmarkQueryService = Depends(get_service),
):
    """Search stored landmarks by title/description, falling back to Wikipedia search."""
    try:
        if query is None or not query.strip():
            raise ValidationError("query is required")
        lat_value = parse_float_param("lat", lat, required=False)
        lng_value = parse_float_param("lng", lng, required=False)
        if lat_value is not None:
            check_lat("lat", lat_value)
        if lng_value is not None:
            check_lng("lng", lng_value)
    except ValidationError as exc:
        logger.info("Search validation error: %s", exc)
        raise HTTPException(status_code=400, detail=f"Invalid search parameters: {exc}")

    try:
        result = service.search(query, lat=lat_value, lng=lng_value)
    except UpstreamError as exc:
        logger.error("Wikipedia search error for q=%r: %s", query, exc)
        raise HTTPException(status_code=500, detail="Failed to search landmarks")
    return [landmark_to_response(l) for l in result.landmarks]


@router.get("/{landmark_id}", response_model=LandmarkResponse)
def get_landmark(landmark_id: str, service: LandmarkQueryService = Depends(get_service)):
    """Get a single landmark by id."""
    try:
        return landmark_to_response(service.get_landmark(int(landmark_id)))
    except (ValueError, NotFoundError):
        raise HTTPException(status_code=404, detail="Landmark not found")
