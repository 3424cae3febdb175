"""USB descriptors of the virtual COM port device."""

from __future__ import annotations

VENDOR_ID = 1155
PRODUCT_ID = 22336
LANGID = 1033
MANUFACTURER_STRING = "STMicroelectronics"
PRODUCT_STRING = "STM32 Virtual ComPort"
CONFIGURATION_STRING = "CDC Config"
INTERFACE_STRING = "CDC Interface"

DESC_TYPE_DEVICE = 0x01
DESC_TYPE_STRING = 0x03
DESC_TYPE_BOS = 0x0F
DEVICE_CAPABILITY_TYPE = 0x10

DEVICE_DESC_LEN = 0x12
LANGID_DESC_LEN = 4
BOS_DESC_LEN = 0x0C
SERIAL_DESC_LEN = 0x1A

MAX_EP0_SIZE = 64
IDX_MANUFACTURER_STR = 1
IDX_PRODUCT_STR = 2
IDX_SERIAL_STR = 3
NUM_CONFIGURATIONS = 1

_UINT32_MASK = 0xFFFFFFFF


def device_descriptor() -> bytes:
    """Return the standard device descriptor (USB 2.0, CDC class)."""
    return bytes(
        [
            DEVICE_DESC_LEN,
            DESC_TYPE_DEVICE,
            0x00,
            0x02,
            0x02,
            0x02,
            0x00,
            MAX_EP0_SIZE,
            *VENDOR_ID.to_bytes(2, "little"),
            *PRODUCT_ID.to_bytes(2, "little"),
            0x00,
            0x02,
            IDX_MANUFACTURER_STR,
            IDX_PRODUCT_STR,
            IDX_SERIAL_STR,
            NUM_CONFIGURATIONS,
        ]
    )


def langid_descriptor() -> bytes:
    """Return the language-id string descriptor."""
    return bytes([LANGID_DESC_LEN, DESC_TYPE_STRING, *LANGID.to_bytes(2, "little")])


def bos_descriptor() -> bytes:
    """Return the BOS descriptor announcing link power management."""
    return bytes(
        [
            0x05,
            DESC_TYPE_BOS,
            BOS_DESC_LEN,
            0x00,
            0x01,
            0x07,
            DEVICE_CAPABILITY_TYPE,
            0x02,
            0x02,
            0x00,
            0x00,
            0x00,
        ]
    )


def string_descriptor(text: str) -> bytes:
    """Return a string descriptor holding ``text`` in UTF-16LE."""
    body = text.encode("utf-16-le")
    length = len(body) + 2
    if length > 0xFF:
        raise ValueError(f"string too long for a descriptor: {len(text)} characters")
    return bytes([length, DESC_TYPE_STRING]) + body


def int_to_unicode(value: int, length: int) -> bytes:
    """Return the top ``length`` hex digits of 32-bit ``value`` as UTF-16LE."""
    if not 0 <= length <= 8:
        raise ValueError(f"length must be between 0 and 8, got {length}")
    value &= _UINT32_MASK
    out = bytearray()
    for _ in range(length):
        nibble = value >> 28
        out += bytes([ord("0") + nibble if nibble < 0xA else ord("A") + nibble - 10, 0])
        value = (value << 4) & _UINT32_MASK
    return bytes(out)


def serial_descriptor(uid0: int, uid1: int, uid2: int) -> bytes:
    """Return the serial-number string descriptor built from the unique id words.

    The serial is left blank when ``uid0 + uid2`` wraps to zero.
    """
    buffer = bytearray(SERIAL_DESC_LEN)
    buffer[0] = SERIAL_DESC_LEN
    buffer[1] = DESC_TYPE_STRING
    serial0 = (uid0 + uid2) & _UINT32_MASK
    if serial0 != 0:
        buffer[2:18] = int_to_unicode(serial0, 8)
        buffer[18:26] = int_to_unicode(uid1, 4)
    return bytes(buffer)