import pytest
from hypothesis import given
from hypothesis import strategies as st

from armcore.usb_descriptors import (
    CONFIGURATION_STRING,
    DESC_TYPE_STRING,
    INTERFACE_STRING,
    LANGID,
    MANUFACTURER_STRING,
    PRODUCT_ID,
    PRODUCT_STRING,
    SERIAL_DESC_LEN,
    VENDOR_ID,
    bos_descriptor,
    device_descriptor,
    int_to_unicode,
    langid_descriptor,
    serial_descriptor,
    string_descriptor,
)


def test_device_descriptor_layout():
    desc = device_descriptor()
    assert len(desc) == desc[0] == 0x12
    assert int.from_bytes(desc[8:10], "little") == VENDOR_ID == 1155
    assert int.from_bytes(desc[10:12], "little") == PRODUCT_ID == 22336


def test_langid_descriptor():
    desc = langid_descriptor()
    assert len(desc) == desc[0]
    assert desc[1] == DESC_TYPE_STRING
    assert int.from_bytes(desc[2:4], "little") == LANGID == 1033


def test_bos_descriptor_total_length():
    desc = bos_descriptor()
    assert len(desc) == desc[2] == 0x0C


@pytest.mark.parametrize(
    "text",
    [MANUFACTURER_STRING, PRODUCT_STRING, CONFIGURATION_STRING, INTERFACE_STRING],
)
def test_string_descriptor_round_trip(text):
    desc = string_descriptor(text)
    assert desc[0] == len(desc)
    assert desc[1] == DESC_TYPE_STRING
    assert desc[2:].decode("utf-16-le") == text


def test_string_descriptor_too_long():
    with pytest.raises(ValueError):
        string_descriptor("x" * 200)


def test_int_to_unicode_hex_digits():
    assert int_to_unicode(0x12345678, 8) == "12345678".encode("utf-16-le")
    assert int_to_unicode(0xABCDEF01, 4) == "ABCD".encode("utf-16-le")


@given(st.integers(min_value=0, max_value=0xFFFFFFFF))
def test_int_to_unicode_matches_hex_format(value):
    assert int_to_unicode(value, 8).decode("utf-16-le") == format(value, "08X")


def test_int_to_unicode_rejects_bad_length():
    with pytest.raises(ValueError):
        int_to_unicode(1, 9)


def test_serial_descriptor_uses_unique_id_words():
    desc = serial_descriptor(0x11111111, 0xCAFE0000, 0x22222222)
    assert len(desc) == desc[0] == SERIAL_DESC_LEN
    assert desc[1] == DESC_TYPE_STRING
    assert desc[2:18] == int_to_unicode(0x33333333, 8)
    assert desc[18:] == int_to_unicode(0xCAFE0000, 4)


def test_serial_descriptor_blank_when_sum_wraps_to_zero():
    desc = serial_descriptor(0xFFFFFFFF, 0x1234, 1)
    assert desc[2:] == bytes(len(desc) - 2)
    assert desc[0] == SERIAL_DESC_LEN