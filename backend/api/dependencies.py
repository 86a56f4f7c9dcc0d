"""
FastAPI dependencies. The store, provider client and query service are built
once in create_app and hung off app.state.
"""
from fastapi import Request

from services.landmark_service import LandmarkQueryService


def get_service(request: Request) -> LandmarkQueryService:
    return request.app.state.service


def get_geocoder(request: Request):
    return request.app.state.geocoder
