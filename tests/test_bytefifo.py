import pytest
from hypothesis import given
from hypothesis import strategies as st

from armcore.bytefifo import ByteFifo, FifoEmptyError, FifoFullError


def test_new_fifo_is_empty():
    fifo = ByteFifo(8)
    assert fifo.is_empty()
    assert not fifo.is_full()
    assert fifo.used() == 0
    assert fifo.free() == 8


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        ByteFifo(0)


def test_put_get_order():
    fifo = ByteFifo(4)
    for value in (10, 20, 30):
        fifo.put(value)
    assert [fifo.get(), fifo.get(), fifo.get()] == [10, 20, 30]
    assert fifo.is_empty()


def test_put_when_full_raises():
    fifo = ByteFifo(2)
    fifo.put(1)
    fifo.put(2)
    assert fifo.is_full()
    with pytest.raises(FifoFullError):
        fifo.put(3)


def test_put_rejects_out_of_range_byte():
    fifo = ByteFifo(2)
    with pytest.raises(ValueError):
        fifo.put(256)


def test_get_when_empty_raises():
    with pytest.raises(FifoEmptyError):
        ByteFifo(3).get()


def test_puts_truncates_to_free_room():
    fifo = ByteFifo(4)
    assert fifo.puts(b"abcdef") == 4
    assert fifo.is_full()
    assert fifo.gets(10) == b"abcd"


def test_puts_when_full_raises():
    fifo = ByteFifo(2)
    fifo.puts(b"xy")
    with pytest.raises(FifoFullError):
        fifo.puts(b"z")


def test_gets_when_empty_raises():
    with pytest.raises(FifoEmptyError):
        ByteFifo(4).gets(1)


def test_wraparound_bulk():
    fifo = ByteFifo(5)
    fifo.puts(b"abcd")
    assert fifo.gets(3) == b"abc"
    assert fifo.puts(b"efgh") == 4
    assert fifo.used() == 5
    assert fifo.gets(5) == b"defgh"


def test_preread_does_not_consume():
    fifo = ByteFifo(4)
    fifo.puts(b"\x01\x02\x03")
    assert fifo.preread(0) == 1
    assert fifo.preread(2) == 3
    assert fifo.used() == 3


def test_preread_out_of_range():
    fifo = ByteFifo(4)
    fifo.puts(b"\x01")
    with pytest.raises(IndexError):
        fifo.preread(1)


def test_prereads_across_wrap():
    fifo = ByteFifo(4)
    fifo.puts(b"abc")
    fifo.discard(2)
    fifo.puts(b"def")
    assert fifo.prereads(1, 10) == b"def"
    assert fifo.used() == 4


def test_prereads_errors():
    fifo = ByteFifo(4)
    with pytest.raises(FifoEmptyError):
        fifo.prereads(0, 1)
    fifo.puts(b"ab")
    with pytest.raises(IndexError):
        fifo.prereads(2, 1)


def test_discard_clamps():
    fifo = ByteFifo(4)
    fifo.puts(b"abc")
    assert fifo.discard(10) == 3
    assert fifo.is_empty()


def test_flush_restores_free_room():
    fifo = ByteFifo(3)
    fifo.puts(b"abc")
    fifo.flush()
    assert fifo.free() == 3
    assert fifo.is_empty()
    assert fifo.puts(b"xyz") == 3
    assert fifo.gets(3) == b"xyz"


@given(
    capacity=st.integers(min_value=1, max_value=32),
    first=st.binary(max_size=40),
    second=st.binary(max_size=40),
    take=st.integers(min_value=0, max_value=40),
)
def test_round_trip_keeps_order(capacity, first, second, take):
    fifo = ByteFifo(capacity)
    written = fifo.puts(first) if first else 0
    assert written == min(len(first), capacity)
    taken = fifo.gets(take) if not fifo.is_empty() else b""
    assert taken == first[: min(take, written)]
    more = fifo.puts(second) if second and not fifo.is_full() else 0
    rest = fifo.gets(capacity) if not fifo.is_empty() else b""
    assert rest == first[len(taken) : written] + second[:more]
    assert fifo.used() + fifo.free() == capacity
    assert fifo.is_empty()