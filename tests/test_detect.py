import pytest

from armcore.detect import DEFAULT_SETTINGS, DetectMonitor


def test_default_table_loaded():
    monitor = DetectMonitor(now=0)
    assert len(monitor) == len(DEFAULT_SETTINGS)
    assert monitor[5].offline_time == 2
    assert monitor.referee.offline_time == 100


def test_fresh_devices_are_not_lost():
    monitor = DetectMonitor(now=0)
    assert not any(monitor.is_lost(i) for i in range(len(monitor)))


def test_scan_reports_highest_priority_lost_device():
    monitor = DetectMonitor(now=0)
    monitor.hook(1, 5)
    result = monitor.scan(12)
    assert result == 5
    assert monitor.is_lost(5)
    assert monitor.is_lost(2)
    assert not monitor.is_lost(1)
    assert not monitor.is_lost(0)
    assert monitor.any_lost


def test_scan_with_nothing_lost_returns_none():
    monitor = DetectMonitor(now=0, settings=[(10, 0, 3)])
    assert monitor.scan(5) is None
    assert not monitor.any_lost


def test_frequency_from_hook_interval():
    monitor = DetectMonitor(now=0, settings=[(10, 10, 1)], tick_rate_hz=1000)
    monitor.hook(0, 5)
    monitor.hook(0, 7)
    monitor.scan(15)
    assert not monitor.is_lost(0)
    assert monitor[0].frequency == pytest.approx(1000 / (7 - 5))


def test_recovered_device_settles_before_error_clears():
    monitor = DetectMonitor(now=0, settings=[(10, 10, 1)])
    monitor.scan(20)
    assert monitor.is_lost(0)
    assert monitor[0].lost_time == 20
    monitor.hook(0, 21)
    assert monitor[0].work_time == 21
    monitor.scan(25)
    assert not monitor.is_lost(0)
    assert monitor[0].error_exist
    monitor.hook(0, 30)
    monitor.scan(32)
    assert not monitor[0].error_exist


def test_lost_handler_called():
    calls = []
    monitor = DetectMonitor(now=0, settings=[(5, 5, 1)])
    monitor[0].solve_lost_fun = lambda: calls.append("lost")
    monitor.scan(10)
    assert calls == ["lost"]


def test_data_error_detected_on_hook():
    calls = []
    monitor = DetectMonitor(now=0, settings=[(5, 5, 1)])
    monitor[0].data_is_error_fun = lambda: True
    monitor[0].solve_data_error_fun = lambda: calls.append("fix")
    monitor.hook(0, 1)
    assert monitor[0].data_is_error
    assert monitor[0].error_exist
    assert calls == ["fix"]


def test_data_error_clears_when_check_passes():
    monitor = DetectMonitor(now=0, settings=[(5, 5, 1)])
    monitor[0].data_is_error_fun = lambda: True
    monitor.hook(0, 1)
    monitor[0].data_is_error_fun = lambda: False
    monitor.hook(0, 2)
    assert not monitor[0].data_is_error


def test_disabled_device_is_skipped():
    monitor = DetectMonitor(now=0, settings=[(5, 5, 1)])
    monitor[0].enable = False
    assert monitor.scan(100) is None
    assert not monitor.is_lost(0)


def test_tick_wraparound_is_not_loss():
    start = 0xFFFFFFFE
    monitor = DetectMonitor(now=start, settings=[(10, 0, 1)])
    monitor.scan(3)
    assert not monitor.is_lost(0)


def test_unknown_index_raises():
    monitor = DetectMonitor(now=0)
    with pytest.raises(IndexError):
        monitor.is_lost(len(monitor))


def test_bad_settings_rejected():
    with pytest.raises(ValueError):
        DetectMonitor(now=0, settings=[(1, 2)])