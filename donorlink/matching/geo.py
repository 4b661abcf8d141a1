"""Great-circle distance helpers. Stored coordinates are [longitude, latitude]."""
import math

EARTH_RADIUS_KM = 6371


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Calculate the great-circle distance between two points in kilometers."""
    lat1, lat2 = math.radians(lat1), math.radians(lat2)
    dlat = lat2 - lat1
    dlng = math.radians(lng2 - lng1)
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_between(coords1, coords2) -> float:
    """Distance in km between two [longitude, latitude] pairs."""
    lng1, lat1 = coords1
    lng2, lat2 = coords2
    return haversine_km(float(lat1), float(lng1), float(lat2), float(lng2))
