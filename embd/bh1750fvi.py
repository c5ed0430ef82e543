"""BH1750FVI ambient light sensor on an I2C bus."""

from __future__ import annotations

import logging
import struct
import threading
import time

from .bus import I2CBus

logger = logging.getLogger(__name__)

HIGH = "H"
"""High resolution mode (1 lx resolution)."""
HIGH2 = "H2"
"""High resolution mode 2 (0.5 lx resolution)."""

SENSOR_ADDRESS = 0x23
DEFAULT_POLL = 150
"""Default delay between background measurements, in milliseconds."""

# sensorValue / actualValue: min 0.96, typical 1.2, max 1.44
_MEASUREMENT_ACCURACY = 1.2
_DEFAULT_READ_REG = 0x00
_OPCODES = {HIGH: 0x10, HIGH2: 0x11}
_MEASUREMENT_DELAY = 0.18


class _Sampler(threading.Thread):
    """Background thread that keeps the sensor's latest reading fresh."""

    def __init__(self, sensor: BH1750FVI) -> None:
        super().__init__(daemon=True, name="bh1750fvi-sampler")
        self._sensor = sensor
        self._halt = threading.Event()

    def run(self) -> None:
        while not self._halt.wait(self._sensor.poll / 1000):
            try:
                value = self._sensor._measure()
            except Exception as exc:  # a failed poll keeps the previous reading
                logger.debug("bh1750fvi: measurement failed: %s", exc)
            else:
                self._sensor._store(value)

    def stop(self) -> None:
        self._halt.set()
        self.join()


class BH1750FVI:
    """A BH1750FVI ambient light sensor.

    Unknown modes fall back to the high resolution mode.
    """

    def __init__(self, bus: I2CBus, mode: str = HIGH, poll: int = DEFAULT_POLL) -> None:
        self.bus = bus
        self.poll = poll
        self.mode = mode if mode in _OPCODES else HIGH
        self.address = SENSOR_ADDRESS
        self._opcode = _OPCODES[self.mode]
        self._reading_lock = threading.Lock()
        self._reading: float | None = None
        self._sampler: _Sampler | None = None

    def _measure(self) -> float:
        self.bus.write_byte(self.address, self._opcode)
        time.sleep(_MEASUREMENT_DELAY)
        raw = self.bus.read_word_from_reg(self.address, _DEFAULT_READ_REG)
        (signed,) = struct.unpack("<h", struct.pack("<H", raw & 0xFFFF))
        return signed / _MEASUREMENT_ACCURACY

    def _store(self, value: float | None) -> None:
        with self._reading_lock:
            self._reading = value

    def lighting(self) -> float:
        """Return the ambient lighting in lx.

        While the acquisition loop runs, the latest background reading is
        returned; otherwise the sensor is measured directly.
        """
        with self._reading_lock:
            reading = self._reading
        return self._measure() if reading is None else reading

    def run(self) -> None:
        """Start the continuous acquisition loop in the background."""
        if self._sampler is None:
            self._sampler = _Sampler(self)
            self._sampler.start()

    def close(self) -> None:
        """Stop the acquisition loop, if running, and drop its readings."""
        sampler, self._sampler = self._sampler, None
        if sampler is None:
            return
        sampler.stop()
        self._store(None)

    def __enter__(self) -> BH1750FVI:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def new_high_mode(bus: I2CBus) -> BH1750FVI:
    """Return a sensor in high resolution mode (1 lx resolution)."""
    return BH1750FVI(bus, HIGH)


def new_high2_mode(bus: I2CBus) -> BH1750FVI:
    """Return a sensor in high resolution mode 2 (0.5 lx resolution)."""
    return BH1750FVI(bus, HIGH2)