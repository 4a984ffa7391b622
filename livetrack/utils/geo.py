"""
Great-circle helpers for live tracks.

Distances use a spherical Earth which is accurate to ~0.5% and is all
speed estimation between two consecutive fixes needs.
"""

from typing import Optional, Protocol

import numpy as np


EARTH_RADIUS_M = 6371000  # Earth's mean radius in meters


class LatLon(Protocol):
    lat: float
    lon: float


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in meters
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = np.radians(lat2 - lat1)
    dlon = np.radians(lon2 - lon1)

    a = np.sin(dlat/2)**2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon/2)**2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1-a))

    return float(EARTH_RADIUS_M * c)


def distance(a: LatLon, b: LatLon) -> float:
    """Distance in meters between two objects exposing ``lat`` and ``lon``."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def estimate_speed(distance_m: float, elapsed_s: float) -> Optional[float]:
    """
    Average speed over a leg.

    Args:
        distance_m: Distance covered in meters
        elapsed_s: Elapsed time in seconds

    Returns:
        Speed in m/s, or None when the elapsed time is not positive
        or the result is not a finite number
    """
    if np.isnan(elapsed_s) or elapsed_s <= 0:
        return None
    speed = distance_m / elapsed_s
    if not np.isfinite(speed):
        return None
    return float(speed)
