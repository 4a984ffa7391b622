"""
Operations on encoded live tracks.

Tracks kept per pilot are trimmed to a rolling window and merged with
freshly fetched points. All operations return new tracks.
"""

import logging
from dataclasses import replace

import numpy as np

from livetrack.models.track import ExtraFields, LiveTrack
from livetrack.utils.flags import DEFAULT_LAYOUT, decode_flags


logger = logging.getLogger(__name__)

_COLUMNS = ("lat", "lon", "alt", "time_sec", "flags")


def remove_before(track: LiveTrack, time_sec: int) -> LiveTrack:
    """
    Drop the points older than ``time_sec``.

    Keeps alignment across all columns and re-keys the extras.
    """
    start_idx = int(np.searchsorted(track.time_sec, time_sec, side="left"))
    sl = slice(start_idx, None)
    extra = {
        idx - start_idx: replace(fields)
        for idx, fields in track.extra.items()
        if idx >= start_idx
    }
    return LiveTrack(
        lat=track.lat[sl],
        lon=track.lon[sl],
        alt=track.alt[sl],
        time_sec=track.time_sec[sl],
        flags=track.flags[sl],
        extra=extra,
    )


def merge_tracks(first: LiveTrack, second: LiveTrack) -> LiveTrack:
    """
    Merge two tracks in chronological order.

    When both tracks have a point at the same second, the point from
    ``second`` is kept.
    """
    kept = np.flatnonzero(~np.isin(first.time_sec, second.time_sec))
    if len(kept) < len(first):
        logger.debug(f"Merge replaced {len(first) - len(kept)} points")

    columns = {
        name: np.concatenate([getattr(first, name)[kept], getattr(second, name)])
        for name in _COLUMNS
    }

    # Extras keyed by position in the concatenated columns
    pending: dict[int, ExtraFields] = {}
    for pos, idx in enumerate(kept):
        if int(idx) in first.extra:
            pending[pos] = first.extra[int(idx)]
    for idx, fields in second.extra.items():
        pending[len(kept) + idx] = fields

    # first's points come first in the concatenation so they win ties
    order = np.argsort(columns["time_sec"], kind="stable")
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))

    return LiveTrack(
        lat=columns["lat"][order],
        lon=columns["lon"][order],
        alt=columns["alt"][order],
        time_sec=columns["time_sec"][order],
        flags=columns["flags"][order],
        extra={int(rank[pos]): replace(fields) for pos, fields in pending.items()},
    )


def is_emergency_track(track: LiveTrack) -> bool:
    """True when any point was sent in emergency mode."""
    return bool(np.any(track.flags & DEFAULT_LAYOUT.emergency_bit))


def sample_at_index(track: LiveTrack, idx: int) -> dict:
    """
    Get a single decoded point.

    Extras are merged in when the point has any.
    """
    flags = decode_flags(int(track.flags[idx]))
    sample = {
        "lat": float(track.lat[idx]),
        "lon": float(track.lon[idx]),
        "alt": int(track.alt[idx]),
        "timeSec": int(track.time_sec[idx]),
        "device": flags.device,
        "valid": flags.valid,
        "emergency": flags.emergency,
        "lowBattery": flags.low_battery,
    }
    if idx < 0:
        idx += len(track)
    extra = track.extra.get(idx)
    if extra is not None:
        sample.update(extra.to_dict())
    return sample
