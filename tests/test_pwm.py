import pytest

from armcore.pwm import PwmTimer


def test_value_within_period_is_stored():
    timer = PwmTimer(period=1000)
    assert timer.set_pwm(2, 400) == 400
    assert timer.compare[2] == 400
    assert timer.compare[1] == 0


def test_value_above_period_is_clamped():
    timer = PwmTimer(period=1000)
    assert timer.set_pwm(3, 5000) == 1000
    assert timer.compare[3] == 1000


@pytest.mark.parametrize("channel", [1, 2, 3, 4])
def test_each_channel_is_independent(channel):
    timer = PwmTimer(period=500)
    timer.set_pwm(channel, 123)
    assert timer.compare[channel] == 123
    assert sum(timer.compare.values()) == 123


@pytest.mark.parametrize("channel", [0, 5, -1])
def test_unknown_channel_raises(channel):
    with pytest.raises(ValueError):
        PwmTimer(period=100).set_pwm(channel, 10)


@pytest.mark.parametrize("value", [-1, 0x10000])
def test_out_of_range_value_raises(value):
    timer = PwmTimer(period=100)
    with pytest.raises(ValueError):
        timer.set_pwm(1, value)
    assert timer.compare[1] == 0


def test_negative_period_rejected():
    with pytest.raises(ValueError):
        PwmTimer(period=-5)