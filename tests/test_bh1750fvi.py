import time
from unittest.mock import Mock

import pytest

from embd.bh1750fvi import (
    BH1750FVI,
    HIGH,
    HIGH2,
    SENSOR_ADDRESS,
    new_high2_mode,
    new_high_mode,
)
from embd.bus import I2CBus


def make_bus(word=120):
    bus = Mock(spec=I2CBus)
    bus.read_word_from_reg.return_value = word
    return bus


def _wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.mark.parametrize(
    "make_sensor, opcode, mode",
    [
        (new_high_mode, 0x10, HIGH),
        (new_high2_mode, 0x11, HIGH2),
        (lambda bus: BH1750FVI(bus, "bogus"), 0x10, HIGH),
    ],
)
def test_mode_selects_opcode(make_sensor, opcode, mode):
    bus = make_bus()
    sensor = make_sensor(bus)
    sensor.lighting()
    assert sensor.mode == mode
    bus.write_byte.assert_called_once_with(SENSOR_ADDRESS, opcode)
    bus.read_word_from_reg.assert_called_once_with(SENSOR_ADDRESS, 0x00)


@pytest.mark.parametrize(
    "word, lux",
    [(120, 100.0), (0xFF88, -100.0), (600, 500.0)],
)
def test_lighting_value(word, lux):
    assert BH1750FVI(make_bus(word)).lighting() == pytest.approx(lux)


def test_lighting_bus_error_propagates():
    bus = make_bus()
    bus.write_byte.side_effect = OSError("bus failure")
    with pytest.raises(OSError):
        BH1750FVI(bus).lighting()


def test_run_caches_reading_and_close_clears_it():
    bus = make_bus()
    sensor = BH1750FVI(bus, poll=5)
    sensor.run()
    try:
        assert _wait_for(lambda: bus.write_byte.call_count >= 2)
        bus.write_byte.side_effect = OSError("bus failure")
        assert sensor.lighting() == pytest.approx(100.0)
    finally:
        sensor.close()
    with pytest.raises(OSError):
        sensor.lighting()


def test_close_stops_polling():
    bus = make_bus()
    with BH1750FVI(bus, poll=5) as sensor:
        sensor.run()
        assert _wait_for(lambda: bus.write_byte.call_count >= 1)
    count = bus.write_byte.call_count
    time.sleep(0.05)
    assert bus.write_byte.call_count == count