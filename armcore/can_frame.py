"""Transmit headers for classic CAN frames sent to the joint motors."""

from __future__ import annotations

from dataclasses import dataclass

MAX_STANDARD_ID = 0x7FF

# Payload sizes above eight bytes and their data length codes.
_LONG_DLC = {12: 9, 16: 10, 20: 11, 24: 12, 48: 14, 64: 15}

# Feedback (master) identifiers of the six joint motors, mapped to joint index.
FEEDBACK_JOINT_INDEX = {0x11: 0, 0x12: 1, 0x13: 2, 0x14: 3, 0x15: 4, 0x16: 5}


def dlc_for_length(length: int) -> int:
    """Return the data length code for a payload of ``length`` bytes.

    Lengths 0 to 8 map to themselves; 12, 16, 20, 24, 48 and 64 map to
    their CAN FD codes. Any other length raises ValueError.
    """
    if 0 <= length <= 8:
        return length
    try:
        return _LONG_DLC[length]
    except KeyError:
        raise ValueError(f"unsupported payload length: {length}") from None


@dataclass(frozen=True)
class TxHeader:
    """Header of a frame queued for transmission."""

    identifier: int
    dlc: int
    extended_id: bool = False
    remote_frame: bool = False
    error_passive: bool = False
    bit_rate_switch: bool = False
    fd_format: bool = False
    store_tx_events: bool = False
    message_marker: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.identifier <= MAX_STANDARD_ID:
            raise ValueError(f"standard identifier out of range: {self.identifier}")
        if not 0 <= self.dlc <= 15:
            raise ValueError(f"data length code out of range: {self.dlc}")

    @property
    def hal_data_length(self) -> int:
        """The data length code as placed in the controller's length field."""
        return self.dlc << 16


def build_tx_header(identifier: int, length: int) -> TxHeader:
    """Return the header for a classic data frame with a standard identifier."""
    return TxHeader(identifier=identifier, dlc=dlc_for_length(length))