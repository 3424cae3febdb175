"""PID controller with optional refinements and fuzzy gain scheduling."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

from armcore.dwt import CycleClock

NB, NM, NS, ZE, PS, PM, PB = -3, -2, -1, 0, 1, 2, 3

DEFAULT_KP_RULES = (
    (PB, PB, PM, PM, PS, ZE, ZE),
    (PB, PB, PM, PS, PS, ZE, PS),
    (PM, PM, PM, PS, ZE, PS, PS),
    (PM, PM, PS, ZE, PS, PM, PM),
    (PS, PS, ZE, PS, PS, PM, PM),
    (PS, ZE, PS, PM, PM, PM, PB),
    (ZE, ZE, PM, PM, PM, PB, PB),
)

DEFAULT_KI_RULES = (
    (PB, PB, PM, PM, PS, ZE, ZE),
    (PB, PB, PM, PS, PS, ZE, ZE),
    (PB, PM, PM, PS, ZE, PS, PS),
    (PM, PM, PS, ZE, PS, PM, PM),
    (PS, PS, ZE, PS, PS, PM, PB),
    (ZE, ZE, PS, PS, PM, PB, PB),
    (ZE, ZE, PS, PM, PM, PB, PB),
)

DEFAULT_KD_RULES = (
    (PS, PS, PB, PB, PB, PM, PS),
    (PS, PS, PB, PM, PM, PS, ZE),
    (ZE, PS, PM, PM, PS, PS, ZE),
    (ZE, PS, PS, PS, PS, PS, ZE),
    (ZE, ZE, ZE, ZE, ZE, ZE, ZE),
    (PB, PS, PS, PS, PS, PS, PB),
    (PB, PM, PM, PM, PS, PS, PB),
)

_MIN_STEP = 0.00001
_BLOCKED_LIMIT = 500

DtSource = Callable[[], float]


def _default_dt_source() -> DtSource:
    return CycleClock().stopwatch().lap


def _check_table(table: Sequence[Sequence[float]], name: str) -> tuple:
    rows = tuple(tuple(float(v) for v in row) for row in table)
    if len(rows) != 7 or any(len(row) != 7 for row in rows):
        raise ValueError(f"{name} must be a 7x7 table")
    return rows


def _membership(value: float, step: float) -> tuple[int, int, float, float]:
    """Return left/right rule indices and their weights for ``value``."""
    if value >= 3 * step:
        return 6, 6, 0.0, 1.0
    if value <= -3 * step:
        return 0, 0, 1.0, 0.0
    q = value / step
    left = int(q) + (3 if value >= 0 else 2)
    right = left + 1
    return left, right, right - q - 3, q - left + 3


class Improvement(IntFlag):
    """Optional refinements applied during a PID update."""

    NONE = 0x00
    INTEGRAL_LIMIT = 0x01
    DERIVATIVE_ON_MEASUREMENT = 0x02
    TRAPEZOID_INTEGRAL = 0x04
    PROPORTIONAL_ON_MEASUREMENT = 0x08
    OUTPUT_FILTER = 0x10
    CHANGING_INTEGRATION_RATE = 0x20
    DERIVATIVE_FILTER = 0x40
    ERROR_HANDLE = 0x80


class PidError(IntEnum):
    """Fault detected by the PID error handler."""

    NONE = 0x00
    MOTOR_BLOCKED = 0x01


@dataclass
class FuzzyRule:
    """Fuzzy scheduler producing gain offsets from the error and its rate.

    Rule tables left as None use the built-in tables; steps below 1e-5
    are replaced with 1.
    """

    kp_rules: Sequence[Sequence[float]] | None = None
    ki_rules: Sequence[Sequence[float]] | None = None
    kd_rules: Sequence[Sequence[float]] | None = None
    kp_ratio: float = 1.0
    ki_ratio: float = 1.0
    kd_ratio: float = 1.0
    e_step: float = 1.0
    ec_step: float = 1.0
    dt_source: DtSource | None = None

    kp_fuzzy: float = field(default=0.0, init=False)
    ki_fuzzy: float = field(default=0.0, init=False)
    kd_fuzzy: float = field(default=0.0, init=False)
    e: float = field(default=0.0, init=False)
    ec: float = field(default=0.0, init=False)
    e_last: float = field(default=0.0, init=False)
    dt: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        self.kp_rules = _check_table(
            DEFAULT_KP_RULES if self.kp_rules is None else self.kp_rules, "kp_rules"
        )
        self.ki_rules = _check_table(
            DEFAULT_KI_RULES if self.ki_rules is None else self.ki_rules, "ki_rules"
        )
        self.kd_rules = _check_table(
            DEFAULT_KD_RULES if self.kd_rules is None else self.kd_rules, "kd_rules"
        )
        if self.e_step < _MIN_STEP:
            self.e_step = 1.0
        if self.ec_step < _MIN_STEP:
            self.ec_step = 1.0
        if self.dt_source is None:
            self.dt_source = _default_dt_source()

    def implement(self, measure: float, ref: float) -> tuple[float, float, float]:
        """Update the fuzzy gain offsets and return (kp, ki, kd) offsets."""
        self.dt = self.dt_source()
        self.e = ref - measure
        self.ec = (self.e - self.e_last) / self.dt
        self.e_last = self.e

        e_left, e_right, e_lw, e_rw = _membership(self.e, self.e_step)
        ec_left, ec_right, ec_lw, ec_rw = _membership(self.ec, self.ec_step)

        def blend(table: Sequence[Sequence[float]]) -> float:
            return (
                e_lw * ec_lw * table[e_left][ec_left]
                + e_lw * ec_rw * table[e_right][ec_left]
                + e_rw * ec_lw * table[e_left][ec_right]
                + e_rw * ec_rw * table[e_right][ec_right]
            )

        self.kp_fuzzy = blend(self.kp_rules)
        self.ki_fuzzy = blend(self.ki_rules)
        self.kd_fuzzy = blend(self.kd_rules)
        return self.kp_fuzzy, self.ki_fuzzy, self.kd_fuzzy


@dataclass
class PID:
    """PID controller with deadband, output limit and optional refinements.

    The derivative is a finite difference of the error (or of the
    measurement when ``DERIVATIVE_ON_MEASUREMENT`` is set). ``dt_source``
    returns the seconds since the previous update.
    """

    max_out: float
    integral_limit: float
    deadband: float
    kp: float
    ki: float
    kd: float
    coef_a: float = 0.0
    coef_b: float = 0.0
    output_lpf_rc: float = 0.0
    derivative_lpf_rc: float = 0.0
    improve: Improvement = Improvement.NONE
    fuzzy_rule: FuzzyRule | None = None
    dt_source: DtSource | None = None
    user_func1: Callable[[PID], object] | None = None
    user_func2: Callable[[PID], object] | None = None

    ref: float = field(default=0.0, init=False)
    measure: float = field(default=0.0, init=False)
    last_measure: float = field(default=0.0, init=False)
    err: float = field(default=0.0, init=False)
    last_err: float = field(default=0.0, init=False)
    pout: float = field(default=0.0, init=False)
    iout: float = field(default=0.0, init=False)
    dout: float = field(default=0.0, init=False)
    iterm: float = field(default=0.0, init=False)
    last_iterm: float = field(default=0.0, init=False)
    output: float = field(default=0.0, init=False)
    last_output: float = field(default=0.0, init=False)
    last_dout: float = field(default=0.0, init=False)
    dt: float = field(default=0.0, init=False)
    error_count: int = field(default=0, init=False)
    error_type: PidError = field(default=PidError.NONE, init=False)

    def __post_init__(self) -> None:
        self.improve = Improvement(self.improve)
        if self.dt_source is None:
            self.dt_source = _default_dt_source()

    def _kp(self) -> float:
        return self.kp + (self.fuzzy_rule.kp_fuzzy if self.fuzzy_rule else 0.0)

    def _ki(self) -> float:
        return self.ki + (self.fuzzy_rule.ki_fuzzy if self.fuzzy_rule else 0.0)

    def _kd(self) -> float:
        return self.kd + (self.fuzzy_rule.kd_fuzzy if self.fuzzy_rule else 0.0)

    def calculate(self, measure: float, ref: float) -> float:
        """Run one control update and return the new output."""
        flags = self.improve
        if flags & Improvement.ERROR_HANDLE:
            self._handle_error()

        self.dt = self.dt_source()
        self.measure = measure
        self.ref = ref
        self.err = ref - measure

        if self.user_func1 is not None:
            self.user_func1(self)

        if abs(self.err) > self.deadband:
            self.pout = self._kp() * self.err
            self.iterm = self._ki() * self.err * self.dt
            self.dout = self._kd() * (self.err - self.last_err) / self.dt

            if self.user_func2 is not None:
                self.user_func2(self)

            if flags & Improvement.TRAPEZOID_INTEGRAL:
                self.iterm = self._ki() * ((self.err + self.last_err) / 2) * self.dt
            if flags & Improvement.CHANGING_INTEGRATION_RATE:
                self._change_integration_rate()
            if flags & Improvement.DERIVATIVE_ON_MEASUREMENT:
                self.dout = self._kd() * (self.last_measure - self.measure) / self.dt
            if flags & Improvement.DERIVATIVE_FILTER:
                rc = self.derivative_lpf_rc
                self.dout = (
                    self.dout * self.dt / (rc + self.dt)
                    + self.last_dout * rc / (rc + self.dt)
                )
            if flags & Improvement.INTEGRAL_LIMIT:
                self._limit_integral()

            self.iout += self.iterm
            self.output = self.pout + self.iout + self.dout

            if flags & Improvement.OUTPUT_FILTER:
                rc = self.output_lpf_rc
                self.output = (
                    self.output * self.dt / (rc + self.dt)
                    + self.last_output * rc / (rc + self.dt)
                )

            self.output = max(-self.max_out, min(self.output, self.max_out))
            self.pout = max(-self.max_out, min(self.pout, self.max_out))

        self.last_measure = self.measure
        self.last_output = self.output
        self.last_dout = self.dout
        self.last_err = self.err
        self.last_iterm = self.iterm
        return self.output

    def _change_integration_rate(self) -> None:
        if self.err * self.iout > 0:
            size = abs(self.err)
            if size <= self.coef_b:
                return
            if size <= self.coef_a + self.coef_b:
                self.iterm *= (self.coef_a - size + self.coef_b) / self.coef_a
            else:
                self.iterm = 0.0

    def _limit_integral(self) -> None:
        next_iout = self.iout + self.iterm
        next_output = self.pout + self.iout + self.dout
        if abs(next_output) > self.max_out and self.err * self.iout > 0:
            self.iterm = 0.0
        if next_iout > self.integral_limit:
            self.iterm = 0.0
            self.iout = self.integral_limit
        if next_iout < -self.integral_limit:
            self.iterm = 0.0
            self.iout = -self.integral_limit

    def _handle_error(self) -> None:
        if self.output < self.max_out * 0.001 or abs(self.ref) < 0.0001:
            return
        if abs(self.ref - self.measure) / abs(self.ref) > 0.95:
            self.error_count += 1
        else:
            self.error_count = 0
        if self.error_count > _BLOCKED_LIMIT:
            self.error_type = PidError.MOTOR_BLOCKED