"""Feed-forward control, a linear disturbance observer and a tracking differentiator.

Derivatives are taken as finite differences over the interval reported by
each block's ``dt_source``, which returns the seconds since the last update.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from armcore.dwt import CycleClock

DtSource = Callable[[], float]

_MAX_TD_STEP = 0.5


def _default_dt_source() -> DtSource:
    return CycleClock().stopwatch().lap


def _coefficients(c: Sequence[float] | None) -> tuple[float, float, float]:
    if c is None:
        return (0.0, 0.0, 0.0)
    values = tuple(float(v) for v in c)
    if len(values) != 3:
        raise ValueError(f"expected 3 coefficients, got {len(values)}")
    return values


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(value, limit))


def _low_pass(new: float, old: float, rc: float, dt: float) -> float:
    return new * dt / (rc + dt) + old * rc / (rc + dt)


def _sign(value: float) -> float:
    """Return -1.0 for negative values and 1.0 otherwise, zero included."""
    if value < 0:
        return -1.0
    return 1.0


@dataclass
class Feedforward:
    """Feed-forward for a plant G(s) = 1 / (c2 s^2 + c1 s + c0).

    The reference is low-pass filtered with time constant ``lpf_rc``. When
    ``c`` is None every coefficient and the output limit are zero.
    """

    max_out: float
    c: Sequence[float] | None = None
    lpf_rc: float = 0.0
    dt_source: DtSource | None = None

    ref: float = field(default=0.0, init=False)
    last_ref: float = field(default=0.0, init=False)
    ref_dot: float = field(default=0.0, init=False)
    ref_ddot: float = field(default=0.0, init=False)
    last_ref_dot: float = field(default=0.0, init=False)
    output: float = field(default=0.0, init=False)
    dt: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.c is None:
            self.max_out = 0.0
        self.c = _coefficients(self.c)
        if self.dt_source is None:
            self.dt_source = _default_dt_source()

    def calculate(self, ref: float) -> float:
        """Run one update for reference ``ref`` and return the output."""
        self.dt = dt = self.dt_source()
        self.ref = _low_pass(ref, self.ref, self.lpf_rc, dt)
        self.ref_dot = (self.ref - self.last_ref) / dt
        self.ref_ddot = (self.ref_dot - self.last_ref_dot) / dt

        c0, c1, c2 = self.c
        raw = c0 * self.ref + c1 * self.ref_dot + c2 * self.ref_ddot
        self.output = _clamp(raw, self.max_out)

        self.last_ref = self.ref
        self.last_ref_dot = self.ref_dot
        return self.output


@dataclass
class DisturbanceObserver:
    """Linear disturbance observer for G(s) = 1 / (c2 s^2 + c1 s + c0).

    The estimate passes through a first-order Q(s) with time constant
    ``lpf_rc``, is clamped to ``max_disturbance`` and is reported only when
    its size exceeds ``deadband * max_disturbance``. When ``c`` is None
    every coefficient and the limit are zero.
    """

    max_disturbance: float
    deadband: float = 0.0
    c: Sequence[float] | None = None
    lpf_rc: float = 0.0
    dt_source: DtSource | None = None

    measure: float = field(default=0.0, init=False)
    last_measure: float = field(default=0.0, init=False)
    u: float = field(default=0.0, init=False)
    measure_dot: float = field(default=0.0, init=False)
    measure_ddot: float = field(default=0.0, init=False)
    last_measure_dot: float = field(default=0.0, init=False)
    disturbance: float = field(default=0.0, init=False)
    last_disturbance: float = field(default=0.0, init=False)
    output: float = field(default=0.0, init=False)
    dt: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.c is None:
            self.max_disturbance = 0.0
        self.c = _coefficients(self.c)
        if self.dt_source is None:
            self.dt_source = _default_dt_source()

    def calculate(self, measure: float, u: float) -> float:
        """Estimate the disturbance from ``measure`` and input ``u``; return it."""
        self.dt = dt = self.dt_source()
        self.measure = measure
        self.u = u
        self.measure_dot = (measure - self.last_measure) / dt
        self.measure_ddot = (self.measure_dot - self.last_measure_dot) / dt

        c0, c1, c2 = self.c
        raw = c0 * measure + c1 * self.measure_dot + c2 * self.measure_ddot - u
        filtered = _low_pass(raw, self.last_disturbance, self.lpf_rc, dt)
        self.disturbance = _clamp(filtered, self.max_disturbance)

        if abs(self.disturbance) > self.deadband * self.max_disturbance:
            self.output = self.disturbance
        else:
            self.output = 0.0

        self.last_measure = self.measure
        self.last_measure_dot = self.measure_dot
        self.last_disturbance = self.disturbance
        return self.output


@dataclass
class TrackingDifferentiator:
    """Time-optimal tracking differentiator with speed factor ``r`` and filter
    factor ``h0``; ``x`` tracks the input and ``dx`` its derivative.

    A step longer than half a second is ignored and yields 0.
    """

    r: float
    h0: float
    dt_source: DtSource | None = None

    input: float = field(default=0.0, init=False)
    x: float = field(default=0.0, init=False)
    dx: float = field(default=0.0, init=False)
    ddx: float = field(default=0.0, init=False)
    last_dx: float = field(default=0.0, init=False)
    last_ddx: float = field(default=0.0, init=False)
    dt: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.dt_source is None:
            self.dt_source = _default_dt_source()

    def calculate(self, value: float) -> float:
        """Advance the tracker toward ``value`` and return the tracked value."""
        self.dt = dt = self.dt_source()
        if dt > _MAX_TD_STEP:
            return 0.0

        self.input = value
        r = self.r
        d = r * self.h0 * self.h0
        a0 = self.dx * self.h0
        y = self.x - value + a0
        a1 = math.sqrt(d * (d + 8 * abs(y)))
        a2 = a0 + _sign(y) * (a1 - d) / 2
        sy = (_sign(y + d) - _sign(y - d)) / 2
        a = (a0 + y) * sy + a2 * (1 - sy)
        sa = (_sign(a + d) - _sign(a - d)) / 2
        fhan = -r * a / d * sa - r * _sign(a) * (1 - sa)

        self.ddx = fhan
        self.dx += (self.ddx + self.last_ddx) * dt / 2
        self.x += (self.dx + self.last_dx) * dt / 2

        self.last_ddx = self.ddx
        self.last_dx = self.dx
        return self.x