"""
Sparse per-point extras for live tracks.
"""

import logging
from typing import Optional, Sequence

from livetrack.models.fix import RawFix
from livetrack.models.track import ExtraFields
from livetrack.utils.geo import distance, estimate_speed
from livetrack.utils.rounding import is_finite_number, round_to_int


logger = logging.getLogger(__name__)

MS_TO_KMH = 3.6
# Only derive a speed from a recent previous fix
MAX_SPEED_GAP_S = 5 * 60


def build_extras(fixes: Sequence[RawFix]) -> dict[int, ExtraFields]:
    """
    Collect optional values for a chronologically sorted list of fixes.

    Speed reported by the tracker is kept as is. When the last fix has no
    speed it is derived from the previous fix so the current speed can be
    displayed, as long as the previous fix is at most MAX_SPEED_GAP_S old.

    Returns:
        Map of point index -> ExtraFields, only for points with data
    """
    extras: dict[int, ExtraFields] = {}
    last_idx = len(fixes) - 1

    for i, fix in enumerate(fixes):
        extra = ExtraFields()

        if is_finite_number(fix.speed):
            extra.speed = round_to_int(fix.speed)
        elif i == last_idx and i > 0:
            extra.speed = _derive_speed(fixes[i - 1], fix)

        if is_finite_number(fix.gnd_alt):
            extra.gnd_alt = round_to_int(fix.gnd_alt)

        if fix.message:
            extra.message = fix.message

        if not extra.is_empty():
            extras[i] = extra

    return extras


def _derive_speed(previous: RawFix, current: RawFix) -> Optional[int]:
    """Speed in km/h between two fixes, None when it can not be computed."""
    elapsed_s = (current.timestamp - previous.timestamp) / 1000
    if elapsed_s > MAX_SPEED_GAP_S:
        logger.debug(f"Previous fix too old for a speed ({elapsed_s}s)")
        return None
    speed = estimate_speed(distance(previous, current), elapsed_s)
    if speed is None:
        logger.debug(f"No speed for last fix (elapsed {elapsed_s}s)")
        return None
    return round_to_int(speed * MS_TO_KMH)
