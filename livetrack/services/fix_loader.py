"""
Tabular fix adapter.

Loads tracker exports (CSV, or an already parsed DataFrame) into RawFix
lists ready to be encoded by the track builder.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from livetrack.models.fix import RawFix
from livetrack.utils.flags import TrackerId


logger = logging.getLogger(__name__)


# Column name mappings - exports use various naming conventions
COLUMN_MAPPINGS = {
    "device": ["device", "Device", "tracker", "Tracker", "source"],
    "time": ["timestamp", "Timestamp", "time", "Time", "GPS Time", "gps_time", "timeMs"],
    "latitude": ["lat", "Lat", "latitude", "Latitude", "LAT"],
    "longitude": ["lon", "Lon", "longitude", "Longitude", "LON", "lng", "Long"],
    "altitude": ["alt", "Alt", "altitude", "Altitude", "Elevation", "elevation"],
    "gnd_alt": ["gndAlt", "gnd_alt", "Ground Altitude", "ground_alt", "terrain"],
    "valid": ["valid", "Valid", "fix_valid", "validFix"],
    "emergency": ["emergency", "Emergency", "sos", "SOS"],
    "low_battery": ["lowBattery", "low_battery", "Low Battery", "lowBat"],
    "speed": ["speed", "Speed", "Speed (km/h)", "speed_kph"],
    "message": ["message", "Message", "msg", "text"],
}

TRUE_VALUES = {"true", "1", "yes", "y", "t"}
FALSE_VALUES = {"false", "0", "no", "n", "f"}


def load_fixes_csv(filepath: Path) -> list[RawFix]:
    """Parse a CSV export into raw fixes."""
    with open(filepath, "r", encoding="utf-8-sig") as f:
        lines = f.read().splitlines()

    skip_rows = 0
    for i, line in enumerate(lines):
        if not line.strip().startswith("#"):
            skip_rows = i
            break

    df = pd.read_csv(filepath, skiprows=skip_rows, encoding="utf-8-sig")
    fixes = fixes_from_frame(df)
    logger.info(f"Loaded {len(fixes)} fixes from {filepath}")
    return fixes


def fixes_from_frame(df: pd.DataFrame) -> list[RawFix]:
    """
    Convert a DataFrame of fixes into RawFix objects.

    Raises:
        ValueError: if the time, latitude or longitude column is missing,
            or a device name is unknown
    """
    df = df.copy()
    df.columns = df.columns.astype(str).str.strip()
    col_map = _map_columns(df.columns.tolist())

    for required in ("time", "latitude", "longitude"):
        if col_map[required] is None:
            raise ValueError(f"No {required} column found")

    n_samples = len(df)
    timestamps = _parse_time_column(df[col_map["time"]])
    lat = _extract_numeric(df, col_map, "latitude", n_samples)
    lon = _extract_numeric(df, col_map, "longitude", n_samples)
    missing_pos = np.isnan(lat) | np.isnan(lon)
    if np.any(missing_pos):
        logger.warning(f"{int(np.sum(missing_pos))} fixes without numeric lat/lon")
    alt = np.nan_to_num(_extract_numeric(df, col_map, "altitude", n_samples), nan=0.0)
    gnd_alt = _extract_numeric(df, col_map, "gnd_alt", n_samples)
    speed = _extract_numeric(df, col_map, "speed", n_samples)

    devices = _extract_devices(df, col_map, n_samples)
    valid = _extract_tristate(df, col_map, "valid", n_samples)
    emergency = _extract_tristate(df, col_map, "emergency", n_samples)
    low_battery = _extract_tristate(df, col_map, "low_battery", n_samples)
    messages = _extract_messages(df, col_map, n_samples)

    return [
        RawFix(
            device=devices[i],
            lat=float(lat[i]),
            lon=float(lon[i]),
            alt=float(alt[i]),
            timestamp=int(timestamps[i]),
            gnd_alt=None if np.isnan(gnd_alt[i]) else float(gnd_alt[i]),
            valid=valid[i],
            emergency=emergency[i],
            low_battery=low_battery[i],
            speed=None if np.isnan(speed[i]) else float(speed[i]),
            message=messages[i],
        )
        for i in range(n_samples)
    ]


def _map_columns(columns: list[str]) -> dict[str, Optional[str]]:
    col_map: dict[str, Optional[str]] = {}
    for std_name, variants in COLUMN_MAPPINGS.items():
        col_map[std_name] = None
        for variant in variants:
            if variant in columns:
                col_map[std_name] = variant
                break
    return col_map


def _parse_time_column(values: pd.Series) -> np.ndarray:
    """Epoch milliseconds from numeric ms or ISO-8601 strings."""
    numeric = pd.to_numeric(values, errors="coerce")
    if not numeric.isna().any():
        return numeric.values.astype(np.int64)

    parsed = pd.to_datetime(values, utc=True, errors="coerce")
    if parsed.isna().any():
        raise ValueError("Unparseable values in time column")
    epoch = pd.Timestamp(0, tz="UTC")
    return ((parsed - epoch) // pd.Timedelta(milliseconds=1)).values.astype(np.int64)


def _extract_numeric(
    df: pd.DataFrame,
    col_map: dict[str, Optional[str]],
    std_name: str,
    n_samples: int,
) -> np.ndarray:
    col = col_map.get(std_name)
    if col is None:
        return np.full(n_samples, np.nan, dtype=np.float64)
    return pd.to_numeric(df[col], errors="coerce").values.astype(np.float64)


def _extract_devices(
    df: pd.DataFrame,
    col_map: dict[str, Optional[str]],
    n_samples: int,
) -> list[int]:
    col = col_map.get("device")
    if col is None:
        return [0] * n_samples

    devices = []
    for value in df[col].values:
        if pd.isna(value):
            devices.append(0)
            continue
        text = str(value).strip()
        try:
            devices.append(int(float(text)))
        except ValueError:
            try:
                devices.append(int(TrackerId[text.upper()]))
            except KeyError:
                raise ValueError(f"Unknown tracker device: {text}") from None
    return devices


def _extract_tristate(
    df: pd.DataFrame,
    col_map: dict[str, Optional[str]],
    std_name: str,
    n_samples: int,
) -> list[Optional[bool]]:
    col = col_map.get(std_name)
    if col is None:
        return [None] * n_samples

    result: list[Optional[bool]] = []
    for value in df[col].values:
        if pd.isna(value):
            result.append(None)
            continue
        text = str(value).strip().lower()
        if text.endswith(".0"):
            text = text[:-2]
        if text in TRUE_VALUES:
            result.append(True)
        elif text in FALSE_VALUES:
            result.append(False)
        else:
            result.append(None)
    return result


def _extract_messages(
    df: pd.DataFrame,
    col_map: dict[str, Optional[str]],
    n_samples: int,
) -> list[Optional[str]]:
    col = col_map.get("message")
    if col is None:
        return [None] * n_samples
    return [None if pd.isna(v) or str(v) == "" else str(v) for v in df[col].values]
