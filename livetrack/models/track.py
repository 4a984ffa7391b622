"""
Encoded live track model.

A live track stores N points as parallel columns:
- lat/lon rounded to 5 decimals (~1.1 m)
- alt in whole meters
- time in whole seconds
- flags packing the device id and status bits

Optional per-point values (speed, ground altitude, message) live in a
sparse ``extra`` map keyed by point index.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray


@dataclass
class ExtraFields:
    """Optional values attached to a single point."""

    speed: Optional[int] = None     # km/h
    gnd_alt: Optional[int] = None   # meters
    message: Optional[str] = None

    def is_empty(self) -> bool:
        return self.speed is None and self.gnd_alt is None and self.message is None

    def to_dict(self) -> dict:
        """Only the populated fields, with wire names."""
        result = {}
        if self.speed is not None:
            result["speed"] = self.speed
        if self.gnd_alt is not None:
            result["gndAlt"] = self.gnd_alt
        if self.message is not None:
            result["message"] = self.message
        return result


@dataclass(frozen=True, eq=False)
class LiveTrack:
    """
    Column-oriented, precision-reduced track.

    Compare tracks through ``to_dict()``; columns are numpy arrays.
    """

    lat: NDArray[np.float64]
    lon: NDArray[np.float64]
    alt: NDArray[np.int64]
    time_sec: NDArray[np.int64]
    flags: NDArray[np.int64]

    # Point index -> extras. Indices without extras are absent.
    extra: dict[int, ExtraFields] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.time_sec)

    @classmethod
    def empty(cls) -> "LiveTrack":
        return cls(
            lat=np.array([], dtype=np.float64),
            lon=np.array([], dtype=np.float64),
            alt=np.array([], dtype=np.int64),
            time_sec=np.array([], dtype=np.int64),
            flags=np.array([], dtype=np.int64),
        )

    def get_time_range(self) -> tuple[int, int]:
        if len(self.time_sec) == 0:
            return (0, 0)
        return (int(self.time_sec[0]), int(self.time_sec[-1]))

    def to_dict(self) -> dict:
        """Plain-Python representation using the wire field names."""
        return {
            "lat": [float(v) for v in self.lat],
            "lon": [float(v) for v in self.lon],
            "alt": [int(v) for v in self.alt],
            "timeSec": [int(v) for v in self.time_sec],
            "flags": [int(v) for v in self.flags],
            "extra": {idx: extra.to_dict() for idx, extra in sorted(self.extra.items())},
        }
