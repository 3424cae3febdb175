"""Text command link to bus servos: gripper commands and angle read-back.

Commands are ASCII strings such as ``#000P1500T2000!``. Angle replies
have the form ``#iiiPaaaa!``: a three-digit servo id and a four-digit
pulse value.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass

ANGLE_RESPONSE_LEN = 10
DEFAULT_MAX_SERVOS = 8
DEFAULT_RX_BUFFER_SIZE = 256

GRIPPER_RELEASE_CMD = "#000P1500T2000!"
GRIPPER_PICK_UP_CMD = "#000P0800T2000!"
RESET_DELAY_S = 0.010
PICK_UP_DELAY_S = 0.100

ANGLE_MIN_EXCLUSIVE = 500
ANGLE_MAX_EXCLUSIVE = 2500

_FRAME_START = ord("#")
_FRAME_END = ord("!")
_ANGLE_MARK = ord("P")


@dataclass
class _ServoInfo:
    angle: int = 0
    updated: bool = False


def _digits(raw: bytes) -> int | None:
    text = raw.decode("ascii", errors="replace")
    return int(text) if text.isdigit() else None


class ServoBus:
    """A half-duplex servo bus reached through a ``write`` callable.

    Received bytes are handed to ``feed``; ``parse_angles`` then scans them
    for angle replies, which ``get_angle`` returns once each.
    """

    def __init__(
        self,
        write: Callable[[bytes], object],
        max_servos: int = DEFAULT_MAX_SERVOS,
        rx_buffer_size: int = DEFAULT_RX_BUFFER_SIZE,
        sleep: Callable[[float], object] = time.sleep,
    ) -> None:
        if max_servos <= 0:
            raise ValueError(f"max_servos must be positive, got {max_servos}")
        if rx_buffer_size <= 0:
            raise ValueError(f"rx_buffer_size must be positive, got {rx_buffer_size}")
        self._write = write
        self._sleep = sleep
        self.max_servos = max_servos
        self._rx: deque[int] = deque(maxlen=rx_buffer_size)
        self._frame = bytearray()
        self._servos = [_ServoInfo() for _ in range(max_servos)]

    def _check_id(self, servo_id: int) -> None:
        if not 0 <= servo_id < self.max_servos:
            raise ValueError(f"servo id {servo_id} outside 0..{self.max_servos - 1}")

    def send_str(self, text: str | bytes) -> bytes:
        """Send a command string on the bus and return the bytes written."""
        data = text.encode("ascii") if isinstance(text, str) else bytes(text)
        self._write(data)
        return data

    def reset_gripper(self) -> None:
        """Open the gripper to its rest position."""
        self.send_str(GRIPPER_RELEASE_CMD)
        self._sleep(RESET_DELAY_S)

    def pick_up(self) -> None:
        """Close the gripper."""
        self.send_str(GRIPPER_PICK_UP_CMD)
        self._sleep(PICK_UP_DELAY_S)

    def request_angle(self, servo_id: int) -> bytes:
        """Ask servo ``servo_id`` to report its angle; return the command sent."""
        self._check_id(servo_id)
        return self.send_str(f"#{servo_id:03d}PRAD!")

    def feed(self, data: Iterable[int] | bytes) -> None:
        """Queue received bytes; the oldest are dropped if the buffer overflows."""
        self._rx.extend(bytes(data))

    def parse_angles(self) -> list[int]:
        """Consume queued bytes and return the ids whose angle was updated."""
        updated: list[int] = []
        frame = self._frame
        while self._rx:
            byte = self._rx.popleft()
            if byte == _FRAME_START:
                frame.clear()
                frame.append(byte)
                continue
            if 0 < len(frame) < ANGLE_RESPONSE_LEN:
                frame.append(byte)
            if byte == _FRAME_END and len(frame) == ANGLE_RESPONSE_LEN:
                if frame[4] == _ANGLE_MARK:
                    servo_id = _digits(bytes(frame[1:4]))
                    angle = _digits(bytes(frame[5:9]))
                    if (
                        servo_id is not None
                        and angle is not None
                        and servo_id < self.max_servos
                    ):
                        info = self._servos[servo_id]
                        info.angle = angle
                        info.updated = True
                        updated.append(servo_id)
                frame.clear()
        return updated

    def get_angle(self, servo_id: int) -> int | None:
        """Return a freshly reported angle for ``servo_id``, or None.

        A reported angle is returned only once, and only when it lies
        strictly between 500 and 2500.
        """
        self._check_id(servo_id)
        info = self._servos[servo_id]
        if not info.updated:
            return None
        info.updated = False
        if ANGLE_MIN_EXCLUSIVE < info.angle < ANGLE_MAX_EXCLUSIVE:
            return info.angle
        return None