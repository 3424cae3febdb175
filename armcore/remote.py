"""Decoding of DT7 remote-control receiver frames."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

FRAME_LENGTH = 18
CHANNEL_OFFSET = 1024
_CHANNEL_MASK = 0x7FF


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass
class Mouse:
    """Mouse state reported by the remote link."""

    x: int = 0
    y: int = 0
    z: int = 0
    press_l: int = 0
    press_r: int = 0
    press_l_last: int = 0
    press_r_last: int = 0


@dataclass
class RemoteControl:
    """Latest decoded state of the remote: sticks, wheel, switches, mouse, keys.

    ``channels`` holds the four stick channels and the wheel, centred by
    subtracting ``channel_offset``.
    """

    channel_offset: int = CHANNEL_OFFSET
    channels: list[int] = field(default_factory=lambda: [0] * 5)
    switches: list[int] = field(default_factory=lambda: [0, 0])
    mouse: Mouse = field(default_factory=Mouse)
    key: int = 0

    def update(self, frame: bytes) -> RemoteControl:
        """Decode one receiver frame into this state and return self."""
        b = bytes(frame)
        if len(b) != FRAME_LENGTH:
            raise ValueError(f"expected a {FRAME_LENGTH}-byte frame, got {len(b)}")

        raw = (
            (b[0] | b[1] << 8) & _CHANNEL_MASK,
            (b[1] >> 3 | b[2] << 5) & _CHANNEL_MASK,
            (b[2] >> 6 | b[3] << 2 | b[4] << 10) & _CHANNEL_MASK,
            (b[4] >> 1 | b[5] << 7) & _CHANNEL_MASK,
            b[16] | b[17] << 8,
        )
        self.channels = [_int16(value - self.channel_offset) for value in raw]
        self.switches = [(b[5] >> 4) & 0x03, (b[5] >> 6) & 0x03]

        mouse = self.mouse
        mouse.x, mouse.y, mouse.z = struct.unpack_from("<3h", b, 6)
        mouse.press_l_last = mouse.press_l
        mouse.press_r_last = mouse.press_r
        mouse.press_l = b[12]
        mouse.press_r = b[13]
        (self.key,) = struct.unpack_from("<H", b, 14)
        return self