"""
Tests for validation and serialization schemas.
"""

import json

import pytest
from pydantic import ValidationError

from livetrack.models.fix import RawFix
from livetrack.schemas import LivePointIn, LiveTrackOut, RequestCountsOut
from livetrack.services.track_builder import make_live_track
from livetrack.utils.flags import TrackerId


class TestLivePointIn:
    """Tests for LivePointIn."""

    def test_camel_case_aliases(self):
        point = LivePointIn.model_validate({
            "device": 1,
            "lat": 45.0,
            "lon": 6.0,
            "alt": 1200.5,
            "timestamp": 1000,
            "gndAlt": 900.0,
            "lowBattery": True,
            "valid": None,
        })

        assert point.to_fix() == RawFix(
            device=1,
            lat=45.0,
            lon=6.0,
            alt=1200.5,
            timestamp=1000,
            gnd_alt=900.0,
            low_battery=True,
        )

    def test_absent_booleans_are_none(self):
        fix = LivePointIn(device=2, lat=0, lon=0, alt=0, timestamp=0).to_fix()

        assert fix.valid is None
        assert fix.emergency is None
        assert fix.low_battery is None

    def test_negative_device_rejected(self):
        with pytest.raises(ValidationError):
            LivePointIn(device=-1, lat=0, lon=0, alt=0, timestamp=0)

    def test_missing_coordinates_rejected(self):
        with pytest.raises(ValidationError):
            LivePointIn.model_validate({"device": 1, "alt": 0, "timestamp": 0})


class TestLiveTrackOut:
    """Tests for LiveTrackOut."""

    def test_sparse_dump(self):
        track = make_live_track([
            RawFix(device=TrackerId.INREACH, lat=10, lon=-12, alt=100, timestamp=1000000),
            RawFix(device=TrackerId.INREACH, lat=10, lon=-12, alt=100, timestamp=2000000, gnd_alt=32),
        ])

        dumped = LiveTrackOut.from_track(track).model_dump(by_alias=True, exclude_none=True)

        assert dumped["timeSec"] == [1000, 2000]
        assert dumped["extra"] == {1: {"gndAlt": 32}}

    def test_json_without_extras(self):
        track = make_live_track([RawFix(device=1, lat=1.5, lon=2.5, alt=3, timestamp=4000)])

        data = json.loads(LiveTrackOut.from_track(track).model_dump_json(by_alias=True, exclude_none=True))

        assert data == {
            "lat": [1.5],
            "lon": [2.5],
            "alt": [3],
            "timeSec": [4],
            "flags": [track.flags[0].item()],
            "extra": {},
        }


class TestRequestCountsOut:
    """Tests for RequestCountsOut."""

    def test_from_value(self):
        counts = RequestCountsOut.from_value(500500)

        assert counts.requests == 500
        assert counts.errors == 500

    def test_from_none(self):
        assert RequestCountsOut.from_value(None).model_dump() == {"requests": 0, "errors": 0}
