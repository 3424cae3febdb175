"""Fixed-capacity byte ring buffer."""

from __future__ import annotations

from collections.abc import Iterable


class FifoFullError(Exception):
    """Raised when writing to a FIFO that has no free room."""


class FifoEmptyError(Exception):
    """Raised when reading from a FIFO that holds no data."""


class ByteFifo:
    """A ring buffer of bytes with a fixed capacity.

    Bulk writes store as much as fits and report how many bytes went in;
    bulk reads return at most as many bytes as are held.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._buffer = bytearray(capacity)
        self._read = 0
        self._used = 0

    @property
    def capacity(self) -> int:
        """Total number of bytes the FIFO can hold."""
        return len(self._buffer)

    def __len__(self) -> int:
        return self._used

    def __repr__(self) -> str:
        return f"ByteFifo(capacity={self.capacity}, used={self._used})"

    def _write_index(self) -> int:
        return (self._read + self._used) % self.capacity

    def _copy_out(self, start: int, size: int) -> bytes:
        end = start + size
        if end <= self.capacity:
            return bytes(self._buffer[start:end])
        first = self.capacity - start
        return bytes(self._buffer[start:]) + bytes(self._buffer[: size - first])

    def put(self, byte: int) -> None:
        """Append one byte; raise FifoFullError when there is no room."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte out of range: {byte}")
        if self.is_full():
            raise FifoFullError("FIFO is full")
        self._buffer[self._write_index()] = byte
        self._used += 1

    def puts(self, data: Iterable[int] | bytes) -> int:
        """Append as much of ``data`` as fits and return the count written.

        Raises FifoFullError when the FIFO has no room at all.
        """
        chunk = bytes(data)
        if self.is_full():
            raise FifoFullError("FIFO is full")
        size = min(len(chunk), self.free())
        start = self._write_index()
        first = min(size, self.capacity - start)
        self._buffer[start : start + first] = chunk[:first]
        self._buffer[: size - first] = chunk[first:size]
        self._used += size
        return size

    def get(self) -> int:
        """Remove and return the oldest byte; raise FifoEmptyError when empty."""
        if self.is_empty():
            raise FifoEmptyError("FIFO is empty")
        value = self._buffer[self._read]
        self._read = (self._read + 1) % self.capacity
        self._used -= 1
        return value

    def gets(self, size: int) -> bytes:
        """Remove and return up to ``size`` of the oldest bytes.

        Raises FifoEmptyError when the FIFO holds nothing.
        """
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        if self.is_empty():
            raise FifoEmptyError("FIFO is empty")
        size = min(size, self._used)
        data = self._copy_out(self._read, size)
        self._read = (self._read + size) % self.capacity
        self._used -= size
        return data

    def preread(self, offset: int) -> int:
        """Return the byte ``offset`` places after the oldest, without removing it."""
        if not 0 <= offset < self._used:
            raise IndexError(f"offset {offset} outside 0..{self._used - 1}")
        return self._buffer[(self._read + offset) % self.capacity]

    def prereads(self, offset: int, size: int) -> bytes:
        """Return up to ``size`` bytes starting ``offset`` after the oldest.

        Nothing is removed. Raises FifoEmptyError when empty and IndexError
        when ``offset`` is not below the number of bytes held.
        """
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        if self.is_empty():
            raise FifoEmptyError("FIFO is empty")
        if not 0 <= offset < self._used:
            raise IndexError(f"offset {offset} outside 0..{self._used - 1}")
        size = min(size, self._used - offset)
        return self._copy_out((self._read + offset) % self.capacity, size)

    def discard(self, size: int) -> int:
        """Drop up to ``size`` of the oldest bytes and return how many were dropped."""
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        size = min(size, self._used)
        self._read = (self._read + size) % self.capacity
        self._used -= size
        return size

    def flush(self) -> None:
        """Empty the FIFO."""
        self._read = 0
        self._used = 0

    def is_empty(self) -> bool:
        """True when no bytes are held."""
        return self._used == 0

    def is_full(self) -> bool:
        """True when no room is left."""
        return self._used == self.capacity

    def used(self) -> int:
        """Number of bytes held."""
        return self._used

    def free(self) -> int:
        """Number of bytes that can still be written."""
        return self.capacity - self._used