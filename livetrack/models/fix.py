"""
Raw fix model (provider-format, unencoded).

Ingestion adapters produce these before they are encoded into a live track.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RawFix:
    """One position reported by a tracker."""

    device: int      # tracker family, see TrackerId
    lat: float       # degrees
    lon: float       # degrees
    alt: float       # meters
    timestamp: int   # milliseconds since epoch

    gnd_alt: Optional[float] = None  # ground elevation, meters

    # None means "not reported"
    valid: Optional[bool] = None
    emergency: Optional[bool] = None
    low_battery: Optional[bool] = None

    speed: Optional[float] = None  # km/h
    message: Optional[str] = None
