"""
Live track encoder.

Sorts raw fixes chronologically and reduces them to the compact live
track representation.
"""

import logging
from typing import Iterable

import numpy as np

from livetrack.models.fix import RawFix
from livetrack.models.track import LiveTrack
from livetrack.services.extras import build_extras
from livetrack.utils.flags import encode_flags
from livetrack.utils.rounding import round_half_away


logger = logging.getLogger(__name__)

LATLON_DIGITS = 5  # ~1.1 m


def make_live_track(fixes: Iterable[RawFix]) -> LiveTrack:
    """
    Encode a batch of raw fixes into a LiveTrack.

    Fixes may come in any order. They are sorted by timestamp, ties keep
    their input order. Every fix produces exactly one point.
    """
    # sorted() is stable
    fixes = sorted(fixes, key=lambda f: f.timestamp)
    if not fixes:
        return LiveTrack.empty()

    lat = round_half_away([f.lat for f in fixes], LATLON_DIGITS)
    lon = round_half_away([f.lon for f in fixes], LATLON_DIGITS)
    alt = _encode_altitude(np.array([f.alt for f in fixes], dtype=np.float64))

    # Timestamps are non-negative, floor division truncates
    timestamps = np.array([f.timestamp for f in fixes], dtype=np.int64)
    time_sec = timestamps // 1000

    flags = np.array(
        [
            encode_flags(
                f.device,
                f.valid is not False,
                f.emergency is True,
                f.low_battery is True,
            )
            for f in fixes
        ],
        dtype=np.int64,
    )

    extra = build_extras(fixes)

    logger.debug(f"Encoded {len(fixes)} fixes, {len(extra)} with extras")

    return LiveTrack(
        lat=lat,
        lon=lon,
        alt=alt,
        time_sec=time_sec,
        flags=flags,
        extra=extra,
    )


def _encode_altitude(alt: np.ndarray) -> np.ndarray:
    finite = np.isfinite(alt)
    if not np.all(finite):
        logger.warning(f"{int(np.sum(~finite))} fixes without a finite altitude, encoded as 0")
        alt = np.where(finite, alt, 0.0)
    return round_half_away(alt).astype(np.int64)
