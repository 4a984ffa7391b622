"""
Schemas (Pydantic models) for validating raw fixes and serializing tracks.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from livetrack.models.fix import RawFix
from livetrack.models.track import LiveTrack
from livetrack.utils.counter import split_counter


# ============================================================================
# Input Schemas
# ============================================================================

class LivePointIn(BaseModel):
    """A raw fix as reported by an ingestion collaborator."""
    model_config = ConfigDict(populate_by_name=True)

    device: int = Field(ge=0)
    lat: float
    lon: float
    alt: float
    timestamp: int = Field(ge=0, description="Milliseconds since epoch")
    gnd_alt: Optional[float] = Field(default=None, alias="gndAlt")
    valid: Optional[bool] = None
    emergency: Optional[bool] = None
    low_battery: Optional[bool] = Field(default=None, alias="lowBattery")
    speed: Optional[float] = Field(default=None, description="km/h")
    message: Optional[str] = None

    def to_fix(self) -> RawFix:
        return RawFix(
            device=self.device,
            lat=self.lat,
            lon=self.lon,
            alt=self.alt,
            timestamp=self.timestamp,
            gnd_alt=self.gnd_alt,
            valid=self.valid,
            emergency=self.emergency,
            low_battery=self.low_battery,
            speed=self.speed,
            message=self.message,
        )


# ============================================================================
# Output Schemas
# ============================================================================

class ExtraFieldsOut(BaseModel):
    """Optional values of one point."""
    model_config = ConfigDict(populate_by_name=True)

    speed: Optional[int] = None
    gnd_alt: Optional[int] = Field(default=None, alias="gndAlt")
    message: Optional[str] = None


class LiveTrackOut(BaseModel):
    """
    Encoded live track.

    Dump with ``by_alias=True, exclude_none=True`` to keep extras sparse.
    """
    model_config = ConfigDict(populate_by_name=True)

    lat: list[float]
    lon: list[float]
    alt: list[int]
    time_sec: list[int] = Field(alias="timeSec")
    flags: list[int]
    extra: dict[int, ExtraFieldsOut] = Field(default_factory=dict)

    @classmethod
    def from_track(cls, track: LiveTrack) -> "LiveTrackOut":
        data = track.to_dict()
        return cls(
            lat=data["lat"],
            lon=data["lon"],
            alt=data["alt"],
            time_sec=data["timeSec"],
            flags=data["flags"],
            extra={idx: ExtraFieldsOut(**fields) for idx, fields in data["extra"].items()},
        )


class RequestCountsOut(BaseModel):
    """Decoded packed request counter."""
    requests: int = Field(ge=0, le=999)
    errors: int = Field(ge=0, le=999)

    @classmethod
    def from_value(cls, value: Optional[int]) -> "RequestCountsOut":
        counts = split_counter(value)
        return cls(requests=counts.requests, errors=counts.errors)
