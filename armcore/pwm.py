"""Compare-register model of a four-channel PWM timer."""

from __future__ import annotations

from dataclasses import dataclass, field

CHANNELS = (1, 2, 3, 4)


@dataclass
class PwmTimer:
    """A timer with auto-reload value ``period`` and four compare registers."""

    period: int
    compare: dict[int, int] = field(
        default_factory=lambda: {channel: 0 for channel in CHANNELS}
    )

    def __post_init__(self) -> None:
        if self.period < 0:
            raise ValueError(f"period must not be negative, got {self.period}")

    def set_pwm(self, channel: int, value: int) -> int:
        """Set ``channel``'s compare value, clamped to the period; return it."""
        if channel not in CHANNELS:
            raise ValueError(f"unknown channel: {channel}")
        if not 0 <= value <= 0xFFFF:
            raise ValueError(f"compare value out of range: {value}")
        value = min(value, self.period)
        self.compare[channel] = value
        return value