"""Checksums, remote decoding, ring buffers, CAN headers, timing, PID control,
device monitoring, servo commands and USB descriptors for a robot arm controller."""

__version__ = "0.1.0"

__all__ = [
    "bytefifo",
    "can_frame",
    "crc",
    "detect",
    "dwt",
    "fuzzy_pid",
    "observers",
    "pwm",
    "remote",
    "servo",
    "usb_descriptors",
]