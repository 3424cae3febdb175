"""Device liveness monitor driven by data-arrival hooks and periodic scans."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

_TICK_MASK = 0xFFFFFFFF
DEFAULT_TICK_RATE_HZ = 1000
REFEREE_INDEX = 9

# (offline time, online settle time, priority) in ticks for each device:
# remote receiver, motors 1-4, yaw, board gyro, board accel, board mag,
# referee, IMU, spare.
DEFAULT_SETTINGS: tuple[tuple[int, int, int], ...] = (
    (30, 40, 15),
    (10, 10, 11),
    (10, 10, 10),
    (10, 10, 9),
    (10, 10, 8),
    (2, 3, 13),
    (2, 3, 7),
    (5, 5, 7),
    (40, 200, 7),
    (100, 100, 5),
    (10, 10, 7),
    (100, 100, 5),
)


def _elapsed(now: int, then: int) -> int:
    return (now - then) & _TICK_MASK


@dataclass
class DeviceStatus:
    """Liveness and data-error state of one monitored device."""

    offline_time: int
    online_time: int
    priority: int
    enable: bool = True
    error_exist: bool = False
    is_lost: bool = False
    data_is_error: bool = False
    frequency: float = 0.0
    new_time: int = 0
    last_time: int = 0
    lost_time: int = 0
    work_time: int = 0
    data_is_error_fun: Callable[[], bool] | None = None
    solve_lost_fun: Callable[[], object] | None = None
    solve_data_error_fun: Callable[[], object] | None = None


class DetectMonitor:
    """Tracks when each device last delivered data and flags lost devices.

    Call ``hook`` whenever a device's data arrives and ``scan`` periodically.
    Times are tick counts that wrap at 32 bits.
    """

    def __init__(
        self,
        now: int = 0,
        settings: Iterable[Sequence[int]] = DEFAULT_SETTINGS,
        tick_rate_hz: float = DEFAULT_TICK_RATE_HZ,
    ) -> None:
        self.tick_rate_hz = tick_rate_hz
        self.devices: list[DeviceStatus] = []
        for entry in settings:
            if len(entry) != 3:
                raise ValueError(f"expected (offline, online, priority), got {entry!r}")
            offline, online, priority = entry
            self.devices.append(
                DeviceStatus(
                    offline_time=offline,
                    online_time=online,
                    priority=priority,
                    new_time=now,
                    last_time=now,
                    lost_time=now,
                    work_time=now,
                )
            )
        self.any_lost = False
        self.display_index: int | None = None

    def __len__(self) -> int:
        return len(self.devices)

    def __getitem__(self, index: int) -> DeviceStatus:
        return self.devices[index]

    @property
    def referee(self) -> DeviceStatus:
        """Status of the referee link."""
        return self.devices[REFEREE_INDEX]

    def hook(self, index: int, now: int) -> None:
        """Record that device ``index`` delivered data at tick ``now``."""
        device = self.devices[index]
        device.last_time = device.new_time
        device.new_time = now
        if device.is_lost:
            device.work_time = now

        if device.data_is_error_fun is not None and device.data_is_error_fun():
            device.error_exist = True
            device.data_is_error = True
            if device.solve_data_error_fun is not None:
                device.solve_data_error_fun()
        else:
            device.data_is_error = False

    def scan(self, now: int) -> int | None:
        """Update every enabled device at tick ``now``.

        Returns the index of the highest-priority lost device, or None.
        """
        display: int | None = None
        best_priority = 0
        self.any_lost = False

        for index, device in enumerate(self.devices):
            if not device.enable:
                continue

            if _elapsed(now, device.new_time) > device.offline_time:
                device.is_lost = True
                device.error_exist = True
                device.lost_time = now
                if device.priority > best_priority:
                    best_priority = device.priority
                    display = index
                self.any_lost = True
                if device.solve_lost_fun is not None:
                    device.solve_lost_fun()
            elif _elapsed(now, device.work_time) < device.online_time:
                device.is_lost = False
                device.error_exist = True
            else:
                device.is_lost = False
                device.error_exist = device.data_is_error
                if device.new_time > device.last_time:
                    device.frequency = self.tick_rate_hz / (
                        device.new_time - device.last_time
                    )

        self.display_index = display
        return display

    def is_lost(self, index: int) -> bool:
        """True when device ``index`` was found lost by the last scan."""
        return self.devices[index].is_lost