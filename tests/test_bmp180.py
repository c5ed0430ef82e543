import threading
import time

import pytest

from embd.bmp180 import ADDRESS, BMP180
from embd.bus import I2CBus

# Worked example from the sensor datasheet.
CALIBRATION = {
    0xAA: 408,
    0xAC: -72,
    0xAE: -14383,
    0xB0: 32741,
    0xB2: 32757,
    0xB4: 23153,
    0xB6: 6190,
    0xB8: 4,
    0xBA: -32768,
    0xBC: -8711,
    0xBE: 2868,
}
UT = 27898
UP = 23843


class FakeBus(I2CBus):
    def __init__(self):
        self.fail = False
        self.reads = []
        self.temp_commands = 0
        self.lock = threading.Lock()

    def _check(self):
        if self.fail:
            raise OSError("bus failure")

    def write_byte(self, addr, value):
        self._check()

    def read_byte_from_reg(self, addr, reg):
        self._check()
        return 0

    def read_word_from_reg(self, addr, reg):
        self._check()
        assert addr == ADDRESS
        with self.lock:
            self.reads.append(reg)
        if reg in CALIBRATION:
            return CALIBRATION[reg] & 0xFFFF
        if reg == 0xF6:
            return UT
        raise AssertionError(f"unexpected register {reg:#x}")

    def read_from_reg(self, addr, reg, length):
        self._check()
        assert reg == 0xF6 and length == 3
        return (UP << 8).to_bytes(3, "big")

    def write_byte_to_reg(self, addr, reg, value):
        self._check()
        if reg == 0xF4 and value == 0x2E:
            with self.lock:
                self.temp_commands += 1

    def write_word_to_reg(self, addr, reg, value):
        self._check()

    def close(self):
        pass


def test_temperature_datasheet_example():
    sensor = BMP180(FakeBus())
    assert sensor.temperature() == pytest.approx(15.0)


def test_pressure_datasheet_example():
    sensor = BMP180(FakeBus())
    sensor.temperature()
    assert sensor.pressure() == 69964


def test_altitude_is_positive_below_sea_level_pressure():
    sensor = BMP180(FakeBus())
    sensor.temperature()
    altitude = sensor.altitude()
    assert 0 < altitude < 44330


def test_calibration_is_read_once():
    bus = FakeBus()
    sensor = BMP180(bus)
    sensor.temperature()
    sensor.temperature()
    sensor.pressure()
    assert bus.reads.count(0xAA) == 1


def test_bus_error_propagates():
    bus = FakeBus()
    bus.fail = True
    sensor = BMP180(bus)
    with pytest.raises(OSError):
        sensor.temperature()
    with pytest.raises(OSError):
        sensor.pressure()


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_run_caches_readings_until_close():
    bus = FakeBus()
    sensor = BMP180(bus, poll=1)
    sensor.run()
    try:
        assert _wait_for(lambda: bus.temp_commands >= 2)
        bus.fail = True
        assert sensor.temperature() == pytest.approx(15.0)
        with bus.lock:
            pass
    finally:
        sensor.close()
    with pytest.raises(OSError):
        sensor.temperature()


def test_close_without_run_is_harmless_and_reading_still_measured():
    sensor = BMP180(FakeBus())
    sensor.close()
    assert sensor.temperature() == pytest.approx(15.0)