"""
Tests for the tabular fix adapter.
"""

import logging
import math

import pandas as pd
import pytest

from livetrack.services.fix_loader import fixes_from_frame, load_fixes_csv
from livetrack.services.track_builder import make_live_track
from livetrack.utils.flags import TrackerId, is_valid_fix


@pytest.fixture
def sample_csv_content():
    """Export with a comment header and camelCase columns."""
    return """# Tracker export
# generated for tests
device,timestamp,lat,lon,alt,gndAlt,valid,emergency,lowBattery,speed,message
inreach,2000001,10.123456,-12.123456,100.123,,false,,,,
skylines,1000001,11.123456,-13.123456,200.123,150.4,true,false,true,12.6,
3,3000000,11.2,-13.2,210,,,,,,hello
"""


@pytest.fixture
def sample_csv_file(sample_csv_content, tmp_path):
    """Create a temporary CSV file."""
    csv_file = tmp_path / "fixes.csv"
    csv_file.write_text(sample_csv_content)
    return csv_file


@pytest.fixture
def iso_csv_file(tmp_path):
    """CSV with ISO-8601 times and capitalised headers."""
    csv_file = tmp_path / "iso.csv"
    csv_file.write_text(
        "Time,Latitude,Longitude,Altitude\n"
        "2024-05-01T10:00:00Z,45.0,6.0,1000\n"
        "2024-05-01T10:00:30Z,45.001,6.0,1010\n"
    )
    return csv_file


class TestLoadFixesCsv:
    """Tests for load_fixes_csv."""

    def test_parse_standard_format(self, sample_csv_file):
        fixes = load_fixes_csv(sample_csv_file)

        assert len(fixes) == 3
        assert fixes[0].device == TrackerId.INREACH
        assert fixes[0].timestamp == 2000001
        assert fixes[0].lat == pytest.approx(10.123456)

    def test_tristate_booleans(self, sample_csv_file):
        fixes = load_fixes_csv(sample_csv_file)

        assert [f.valid for f in fixes] == [False, True, None]
        assert [f.emergency for f in fixes] == [None, False, None]
        assert [f.low_battery for f in fixes] == [None, True, None]

    def test_optional_values(self, sample_csv_file):
        fixes = load_fixes_csv(sample_csv_file)

        assert fixes[0].gnd_alt is None
        assert fixes[1].gnd_alt == pytest.approx(150.4)
        assert fixes[1].speed == pytest.approx(12.6)
        assert fixes[0].speed is None
        assert [f.message for f in fixes] == [None, None, "hello"]

    def test_numeric_device(self, sample_csv_file):
        fixes = load_fixes_csv(sample_csv_file)

        assert fixes[2].device == 3

    def test_iso_times(self, iso_csv_file):
        fixes = load_fixes_csv(iso_csv_file)

        assert [f.timestamp for f in fixes] == [1714557600000, 1714557630000]
        assert [f.device for f in fixes] == [0, 0]
        assert fixes[1].alt == 1010

    def test_encode_loaded_fixes(self, sample_csv_file):
        track = make_live_track(load_fixes_csv(sample_csv_file))

        assert track.time_sec.tolist() == [1000, 2000, 3000]
        assert [is_valid_fix(f) for f in track.flags] == [True, False, True]
        assert track.extra[0].speed == 13
        assert track.extra[2].message == "hello"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_fixes_csv(tmp_path / "missing.csv")


class TestFixesFromFrame:
    """Tests for fixes_from_frame."""

    def test_missing_required_column(self):
        df = pd.DataFrame({"timestamp": [1000], "lat": [45.0]})

        with pytest.raises(ValueError, match="longitude"):
            fixes_from_frame(df)

    def test_unknown_device_name(self):
        df = pd.DataFrame({"device": ["pigeon"], "timestamp": [1000], "lat": [45.0], "lon": [6.0]})

        with pytest.raises(ValueError, match="pigeon"):
            fixes_from_frame(df)

    def test_missing_altitude_defaults_to_zero(self):
        df = pd.DataFrame({"timestamp": [1000], "lat": [45.0], "lon": [6.0]})

        assert fixes_from_frame(df)[0].alt == 0.0

    def test_numeric_booleans(self):
        df = pd.DataFrame({
            "timestamp": [1000, 2000, 3000],
            "lat": [45.0] * 3,
            "lon": [6.0] * 3,
            "sos": [1, 0, None],
        })

        assert [f.emergency for f in fixes_from_frame(df)] == [True, False, None]

    def test_empty_frame(self):
        df = pd.DataFrame({"timestamp": [], "lat": [], "lon": []})

        assert fixes_from_frame(df) == []

    def test_non_numeric_position_is_logged(self, caplog):
        df = pd.DataFrame({
            "timestamp": [1000, 2000],
            "lat": ["abc", 45.0],
            "lon": [6.0, 6.0],
        })

        with caplog.at_level(logging.WARNING, logger="livetrack.services.fix_loader"):
            fixes = fixes_from_frame(df)

        assert math.isnan(fixes[0].lat)
        assert fixes[1].lat == 45.0
        assert "1 fixes without numeric lat/lon" in caplog.text
