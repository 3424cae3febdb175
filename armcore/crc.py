"""Table-driven CRC8 and CRC16 checksums used by the serial frame protocol.

CRC8 uses the reflected polynomial x^8 + x^5 + x^4 + 1 and CRC16 the
reflected CCITT polynomial, both without a final XOR.
"""

from __future__ import annotations

CRC8_INIT = 0xFF
CRC16_INIT = 0xFFFF

_CRC8_POLY_REFLECTED = 0x8C
_CRC16_POLY_REFLECTED = 0x8408


def _reflected_table(poly: int) -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ poly if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CRC8_TABLE = _reflected_table(_CRC8_POLY_REFLECTED)
_CRC16_TABLE = _reflected_table(_CRC16_POLY_REFLECTED)


def crc8(data: bytes, init: int = CRC8_INIT) -> int:
    """Return the CRC8 of ``data`` starting from ``init``."""
    crc = init & 0xFF
    for byte in data:
        crc = _CRC8_TABLE[crc ^ byte]
    return crc


def verify_crc8(data: bytes) -> bool:
    """Check that the last byte of ``data`` is the CRC8 of the bytes before it."""
    if len(data) <= 2:
        return False
    return crc8(data[:-1]) == data[-1]


def append_crc8(data: bytes) -> bytes:
    """Return ``data`` with its last byte replaced by the CRC8 of the rest."""
    if len(data) <= 2:
        raise ValueError("data is too short to carry a CRC8")
    body = bytes(data[:-1])
    return body + bytes([crc8(body)])


def crc16(data: bytes, init: int = CRC16_INIT) -> int:
    """Return the CRC16 of ``data`` starting from ``init``."""
    crc = init & 0xFFFF
    for byte in data:
        crc = (crc >> 8) ^ _CRC16_TABLE[(crc ^ byte) & 0xFF]
    return crc


def verify_crc16(data: bytes) -> bool:
    """Check that the last two bytes of ``data`` are its little-endian CRC16."""
    if len(data) <= 2:
        return False
    expected = crc16(data[:-2])
    return data[-2] == expected & 0xFF and data[-1] == (expected >> 8) & 0xFF


def append_crc16(data: bytes) -> bytes:
    """Return ``data`` with its last two bytes replaced by the CRC16 of the rest."""
    if len(data) <= 2:
        raise ValueError("data is too short to carry a CRC16")
    body = bytes(data[:-2])
    return body + crc16(body).to_bytes(2, "little")