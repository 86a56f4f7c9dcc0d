"""Distance helpers for the landmark detail panel."""
import math
from typing import Tuple

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Compute distance in kilometers between two lat/lng points."""
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> Tuple[float, str]:
    """
    Distance rounded for display: whole meters under 1 km, one decimal
    under 10 km, whole kilometers beyond.
    """
    km = haversine_km(lat1, lng1, lat2, lng2)
    if km < 1:
        return float(round(km * 1000)), "m"
    if km < 10:
        return round(km, 1), "km"
    return float(round(km)), "km"


def format_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> str:
    value, unit = calculate_distance(lat1, lng1, lat2, lng2)
    if unit == "m" or value.is_integer():
        return f"{int(value)} {unit}"
    return f"{value} {unit}"
