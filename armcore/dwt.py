"""Cycle-counter timebase: elapsed-time stopwatches, system time and delays.

The counter is a free-running 32-bit cycle count. Rollovers are tracked
whenever the counter is read through a stopwatch or a time query.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

COUNTER_MASK = 0xFFFFFFFF
UINT32_MAX = 0xFFFFFFFF
DEFAULT_CPU_FREQ_MHZ = 480


@dataclass(frozen=True)
class SysTime:
    """Time since the counter started, split into seconds, ms and us."""

    s: int
    ms: int
    us: int


class CycleClock:
    """A 32-bit cycle counter running at ``cpu_freq_mhz`` MHz.

    ``counter`` is a callable returning the raw counter value; by default it
    is derived from the host's monotonic performance counter.
    """

    def __init__(
        self,
        cpu_freq_mhz: int = DEFAULT_CPU_FREQ_MHZ,
        counter: Callable[[], int] | None = None,
    ) -> None:
        if cpu_freq_mhz <= 0:
            raise ValueError(f"CPU frequency must be positive, got {cpu_freq_mhz}")
        self.cpu_freq_hz = cpu_freq_mhz * 1_000_000
        self._freq_ms = self.cpu_freq_hz // 1000
        self._freq_us = self.cpu_freq_hz // 1_000_000
        self._counter = counter if counter is not None else _host_counter(cpu_freq_mhz)
        self.rollovers = 0
        self._last = 0

    def read(self) -> int:
        """Return the raw 32-bit counter value."""
        return self._counter() & COUNTER_MASK

    def _track(self, now: int) -> None:
        if now < self._last:
            self.rollovers += 1
        self._last = now

    def stopwatch(self) -> Stopwatch:
        """Return a stopwatch whose first lap is measured from now."""
        return Stopwatch(self)

    def sys_time(self) -> SysTime:
        """Return the time elapsed since the counter started."""
        now = self.read()
        self._track(now)
        cycles = self.rollovers * UINT32_MAX + now
        seconds = cycles // self.cpu_freq_hz
        rest = cycles - seconds * self.cpu_freq_hz
        ms = rest // self._freq_ms
        us = (rest - ms * self._freq_ms) // self._freq_us
        return SysTime(s=seconds, ms=ms, us=us)

    def timeline_s(self) -> float:
        """Elapsed time in seconds."""
        t = self.sys_time()
        return t.s + t.ms * 0.001 + t.us * 0.000001

    def timeline_ms(self) -> float:
        """Elapsed time in milliseconds."""
        t = self.sys_time()
        return t.s * 1000 + t.ms + t.us * 0.001

    def timeline_us(self) -> int:
        """Elapsed time in whole microseconds."""
        t = self.sys_time()
        return t.s * 1_000_000 + t.ms * 1000 + t.us

    def delay(self, seconds: float) -> None:
        """Busy-wait until ``seconds`` worth of cycles have passed."""
        start = self.read()
        target = seconds * self.cpu_freq_hz
        while ((self.read() - start) & COUNTER_MASK) < target:
            pass


class Stopwatch:
    """Measures the time between successive laps on a ``CycleClock``."""

    def __init__(self, clock: CycleClock, start: int | None = None) -> None:
        self._clock = clock
        self.last = clock.read() if start is None else start & COUNTER_MASK

    def lap(self) -> float:
        """Return seconds since the previous lap and start a new one."""
        now = self._clock.read()
        dt = ((now - self.last) & COUNTER_MASK) / self._clock.cpu_freq_hz
        self.last = now
        self._clock._track(now)
        return dt


def _host_counter(cpu_freq_mhz: int) -> Callable[[], int]:
    def read() -> int:
        return (time.perf_counter_ns() * cpu_freq_mhz // 1000) & COUNTER_MASK

    return read