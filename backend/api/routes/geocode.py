"""
Location search (forward geocoding) routes.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.dependencies import get_geocoder
from domain.errors import UpstreamError

router = APIRouter()
logger = logging.getLogger(__name__)


class GeocodeResponse(BaseModel):
    display_name: str
    lat: float
    lng: float
    type: Optional[str] = None
    importance: Optional[float] = None


@router.get("", response_model=List[GeocodeResponse])
def geocode(q: Optional[str] = None, geocoder=Depends(get_geocoder)):
    """Resolve free text (an address, a city) into candidate coordinates."""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter required")
    try:
        results = geocoder(q)
    except UpstreamError as exc:
        logger.error("Geocoding error for q=%r: %s", q, exc)
        raise HTTPException(status_code=500, detail="Failed to geocode location")
    return [GeocodeResponse(**r.to_dict()) for r in results]
