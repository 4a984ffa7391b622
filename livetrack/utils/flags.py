"""
Per-fix flag codec.

A fix's tracker device and its status booleans are packed into one int:

    bit  7        6          5      4 .. 0
         LOW_BAT  EMERGENCY  VALID  device id

The device field width comes from the layout (5 bits by default). Status
bits always sit directly above it so the fields never overlap.
"""

import os
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import NamedTuple


DEVICE_BITS = int(os.getenv("LIVETRACK_DEVICE_BITS", "5"))


class TrackerId(IntEnum):
    """Supported tracker device families."""

    INREACH = 1
    SPOT = 2
    SKYLINES = 3
    FLYME = 4
    FLYMASTER = 5
    OGN = 6
    ZOLEO = 7
    XCONTEST = 8


class LiveTrackFlag(IntFlag):
    """Status bits for the default layout."""

    VALID = 1 << DEVICE_BITS
    EMERGENCY = 1 << (DEVICE_BITS + 1)
    LOW_BAT = 1 << (DEVICE_BITS + 2)


class FixFlags(NamedTuple):
    device: int
    valid: bool
    emergency: bool
    low_battery: bool


@dataclass(frozen=True)
class FlagLayout:
    """Bit layout of the flags int."""

    device_bits: int = DEVICE_BITS

    def __post_init__(self):
        if self.device_bits < 1:
            raise ValueError(f"device_bits must be positive, got {self.device_bits}")
        max_id = max(TrackerId)
        if max_id > self.device_mask:
            raise ValueError(
                f"{self.device_bits} device bits cannot hold tracker id {max_id.name}={int(max_id)}"
            )

    @property
    def device_mask(self) -> int:
        return (1 << self.device_bits) - 1

    @property
    def valid_bit(self) -> int:
        return 1 << self.device_bits

    @property
    def emergency_bit(self) -> int:
        return self.valid_bit << 1

    @property
    def low_bat_bit(self) -> int:
        return self.valid_bit << 2

    def encode(self, device: int, valid: bool, emergency: bool, low_battery: bool) -> int:
        device = int(device)
        if device < 0 or device > self.device_mask:
            raise ValueError(f"Device id {device} does not fit in {self.device_bits} bits")
        flags = device
        if valid:
            flags |= self.valid_bit
        if emergency:
            flags |= self.emergency_bit
        if low_battery:
            flags |= self.low_bat_bit
        return flags

    def decode(self, flags: int) -> FixFlags:
        return FixFlags(
            device=flags & self.device_mask,
            valid=bool(flags & self.valid_bit),
            emergency=bool(flags & self.emergency_bit),
            low_battery=bool(flags & self.low_bat_bit),
        )


DEFAULT_LAYOUT = FlagLayout()


def encode_flags(device: int, valid: bool, emergency: bool, low_battery: bool) -> int:
    """
    Pack a device id and status booleans into a flags int.

    Raises:
        ValueError: if the device id does not fit the device field
    """
    return DEFAULT_LAYOUT.encode(device, valid, emergency, low_battery)


def decode_flags(flags: int) -> FixFlags:
    return DEFAULT_LAYOUT.decode(int(flags))


def is_valid_fix(flags: int) -> bool:
    return bool(int(flags) & DEFAULT_LAYOUT.valid_bit)


def is_emergency_fix(flags: int) -> bool:
    return bool(int(flags) & DEFAULT_LAYOUT.emergency_bit)


def is_low_bat_fix(flags: int) -> bool:
    return bool(int(flags) & DEFAULT_LAYOUT.low_bat_bit)


def get_fix_device(flags: int) -> int:
    return int(flags) & DEFAULT_LAYOUT.device_mask
