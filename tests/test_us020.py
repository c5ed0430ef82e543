import pytest

from embd.pin import DigitalPin, Direction, Level
from embd.us020 import NullThermometer, Thermometer, US020


class FakePin(DigitalPin):
    def __init__(self, pulse=0.0):
        self.pulse = pulse
        self.directions = []
        self.writes = []
        self.pulse_levels = []

    def set_direction(self, direction):
        self.directions.append(direction)

    def read(self):
        return Level.LOW

    def write(self, level):
        self.writes.append(level)

    def time_pulse(self, level):
        self.pulse_levels.append(level)
        return self.pulse

    def pull_up(self):
        pass

    def close(self):
        pass


class FixedThermometer(Thermometer):
    def __init__(self, temp):
        self.temp = temp
        self.reads = 0

    def temperature(self):
        self.reads += 1
        return self.temp


class BrokenThermometer(Thermometer):
    def temperature(self):
        raise OSError("no sensor")


def test_null_thermometer_reports_default():
    assert NullThermometer().temperature() == 25


def test_fallback_speed_when_thermometer_fails():
    rf = US020(FakePin(pulse=0.02), FakePin(), BrokenThermometer())
    assert rf.distance() == pytest.approx(340.0)


def test_default_thermometer_matches_explicit_25_degrees():
    default = US020(FakePin(pulse=0.01), FakePin()).distance()
    explicit = US020(FakePin(pulse=0.01), FakePin(), FixedThermometer(25)).distance()
    assert default == pytest.approx(explicit)


def test_distance_scales_with_pulse_length():
    short = US020(FakePin(pulse=0.01), FakePin(), FixedThermometer(20)).distance()
    long = US020(FakePin(pulse=0.03), FakePin(), FixedThermometer(20)).distance()
    assert long == pytest.approx(3 * short)


def test_warmer_air_gives_longer_distance():
    cold = US020(FakePin(pulse=0.01), FakePin(), FixedThermometer(0)).distance()
    warm = US020(FakePin(pulse=0.01), FakePin(), FixedThermometer(30)).distance()
    assert warm > cold


def test_trigger_pulse_and_pin_setup():
    echo, trigger = FakePin(pulse=0.01), FakePin()
    rf = US020(echo, trigger)
    rf.distance()
    assert trigger.directions == [Direction.OUT]
    assert echo.directions == [Direction.IN]
    assert trigger.writes == [Level.HIGH, Level.LOW]
    assert echo.pulse_levels == [Level.HIGH]


def test_setup_runs_once():
    thermometer = FixedThermometer(20)
    trigger = FakePin()
    rf = US020(FakePin(pulse=0.01), trigger, thermometer)
    rf.distance()
    rf.distance()
    assert thermometer.reads == 1
    assert trigger.directions == [Direction.OUT]


def test_close_sets_echo_to_output():
    echo = FakePin()
    US020(echo, FakePin()).close()
    assert echo.directions == [Direction.OUT]