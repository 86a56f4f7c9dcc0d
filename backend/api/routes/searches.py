"""
Search log routes (analytics / debugging).
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from api.dependencies import get_service
from services.landmark_service import LandmarkQueryService

router = APIRouter()


class SearchLogResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    query: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: Optional[float] = None
    result_count: int = 0
    created_at: Optional[datetime] = None


@router.get("/recent", response_model=List[SearchLogResponse])
def recent_searches(
    limit: int = Query(10, ge=1, le=100),
    service: LandmarkQueryService = Depends(get_service),
):
    """Most recent provider-backed queries, newest first."""
    return [SearchLogResponse(**s.to_dict()) for s in service.recent_searches(limit)]
