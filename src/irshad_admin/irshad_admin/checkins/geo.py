from __future__ import annotations

import math

EARTH_RADIUS_METERS = 6371e3


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def center_configured(lat: float, lng: float) -> bool:
    return not (lat == 0 and lng == 0)


def is_within_radius(lat: float, lng: float, *, center_lat: float, center_lng: float, radius_meters: float) -> bool:
    """False whenever the center is the unset (0, 0) default."""
    if not center_configured(center_lat, center_lng):
        return False
    return haversine_meters(lat, lng, center_lat, center_lng) <= radius_meters
