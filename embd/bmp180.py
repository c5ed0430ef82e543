"""Bosch BMP180 barometric pressure and temperature sensor."""

from __future__ import annotations

import logging
import threading
import time

from .bmp085 import (
    _CALIBRATION_REGISTERS,
    _Calibration,
    _div_trunc,
    _int16,
    _int32,
    _uint32,
)
from .bus import I2CBus

logger = logging.getLogger(__name__)

ADDRESS = 0x77
SEA_LEVEL_PRESSURE = 101325
DEFAULT_POLL = 250
"""Default delay between background measurements, in milliseconds."""

_CONTROL = 0xF4
_TEMP_DATA = 0xF6
_PRESSURE_DATA = 0xF6
_READ_TEMP_CMD = 0x2E
_READ_PRESSURE_CMD = 0x34
_TEMP_READ_DELAY = 0.005


class BMP180:
    """A BMP180 barometric sensor giving compensated readings."""

    def __init__(self, bus: I2CBus, poll: int = DEFAULT_POLL) -> None:
        self.bus = bus
        self.poll = poll
        self._oss = 0
        self._b5 = 0
        self._calibration: _Calibration | None = None
        self._cal_lock = threading.Lock()
        self._lock = threading.Lock()
        self._temp: float | None = None
        self._pressure: int | None = None
        self._altitude: float | None = None
        self._stop: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def _calibrate(self) -> _Calibration:
        with self._cal_lock:
            if self._calibration is not None:
                return self._calibration
            values = {}
            for name, reg, signed in _CALIBRATION_REGISTERS:
                word = self.bus.read_word_from_reg(ADDRESS, reg)
                values[name] = _int16(word) if signed else word & 0xFFFF
            self._calibration = _Calibration(**values)
            logger.debug("bmp180: calibration data retrieved: %s", self._calibration)
            return self._calibration

    def _read_uncompensated_temp(self) -> int:
        self.bus.write_byte_to_reg(ADDRESS, _CONTROL, _READ_TEMP_CMD)
        time.sleep(_TEMP_READ_DELAY)
        return self.bus.read_word_from_reg(ADDRESS, _TEMP_DATA) & 0xFFFF

    def _calc_temp(self, utemp: int) -> int:
        cal = self._calibration
        x1 = ((utemp - cal.ac6) * cal.ac5) >> 15
        x2 = _div_trunc(cal.mc << 11, x1 + cal.md)
        self._b5 = _int32(x1 + x2)
        return (_int32(self._b5 + 8) >> 4) & 0xFFFF

    def _measure_temp(self) -> int:
        self._calibrate()
        utemp = self._read_uncompensated_temp()
        logger.debug("bmp180: uncompensated temp: %s", utemp)
        temp = self._calc_temp(utemp)
        logger.debug("bmp180: compensated temp %s", temp)
        return temp

    def temperature(self) -> float:
        """Return the temperature in degrees Celsius."""
        with self._lock:
            cached = self._temp
        if cached is not None:
            return cached
        logger.debug("bmp180: no temps available... measuring")
        return self._measure_temp() / 10

    def _read_uncompensated_pressure(self) -> int:
        oss = self._oss
        command = (_READ_PRESSURE_CMD + (oss << 6)) & 0xFF
        self.bus.write_byte_to_reg(ADDRESS, _CONTROL, command)
        time.sleep((2 + (3 << oss)) / 1000)
        data = self.bus.read_from_reg(ADDRESS, _PRESSURE_DATA, 3)
        return ((data[0] << 16) | (data[1] << 8) | data[2]) >> (8 - oss)

    def _calc_pressure(self, upressure: int) -> int:
        cal = self._calibration
        oss = self._oss

        b6 = _int32(self._b5 - 4000)
        b6_sq = _int32(b6 * b6)

        x1 = (_int32(cal.b2 * b6_sq) >> 12) >> 11
        x2 = _int32(cal.ac2 * b6) >> 11
        x3 = _int32(x1 + x2)
        b3 = _int32(_int32(_int32(cal.ac1 * 4 + x3) << oss) + 2) >> 2

        x1 = _int32(cal.ac3 * b6) >> 13
        x2 = _int32(cal.b1 * (b6_sq >> 12)) >> 16
        x3 = _int32(x1 + x2 + 2) >> 2
        b4 = _uint32(cal.ac4 * _uint32(x3 + 32768)) >> 15

        b7 = _uint32(_uint32(upressure - _uint32(b3)) * (50000 >> oss))
        if b7 < 0x80000000:
            p = _int32(_uint32(b7 << 1) // b4)
        else:
            p = _int32(_uint32((b7 // b4) << 1))
        logger.debug("bmp180: b3=%s b4=%s b7=%s p=%s", b3, b4, b7, p)

        x1 = _int32((p >> 8) * (p >> 8))
        x1 = _int32(x1 * 3038) >> 16
        x2 = _int32(-7357 * p) >> 16
        return _int32(p + (_int32(x1 + x2 + 3791) >> 4))

    @staticmethod
    def _calc_altitude(pressure: int) -> float:
        return 44330 * (1 - (pressure / SEA_LEVEL_PRESSURE) ** 0.190295)

    def _measure_pressure_and_altitude(self) -> tuple[int, float]:
        self._calibrate()
        upressure = self._read_uncompensated_pressure()
        logger.debug("bmp180: uncompensated pressure: %s", upressure)
        pressure = self._calc_pressure(upressure)
        altitude = self._calc_altitude(pressure)
        logger.debug("bmp180: pressure %s, altitude %s", pressure, altitude)
        return pressure, altitude

    def pressure(self) -> int:
        """Return the pressure in pascals."""
        self._calibrate()
        with self._lock:
            cached = self._pressure
        if cached is not None:
            return cached
        logger.debug("bmp180: no pressures available... measuring")
        return self._measure_pressure_and_altitude()[0]

    def altitude(self) -> float:
        """Return the altitude in metres above sea level."""
        self._calibrate()
        with self._lock:
            cached = self._altitude
        if cached is not None:
            return cached
        logger.debug("bmp180: no altitudes available... measuring")
        return self._measure_pressure_and_altitude()[1]

    def _poll_loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.poll / 1000):
            try:
                temp = self._measure_temp()
            except Exception as exc:  # a failed poll keeps the previous reading
                logger.debug("bmp180: temperature measurement failed: %s", exc)
            else:
                with self._lock:
                    self._temp = temp / 10
            try:
                pressure, altitude = self._measure_pressure_and_altitude()
            except Exception as exc:  # a failed poll keeps the previous reading
                logger.debug("bmp180: pressure measurement failed: %s", exc)
            else:
                with self._lock:
                    self._pressure = pressure
                    self._altitude = altitude

    def run(self) -> None:
        """Start the sensor data acquisition loop in the background."""
        if self._thread is not None:
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._poll_loop, args=(self._stop,), daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        """Stop the acquisition loop, if running, and drop its readings."""
        if self._thread is None or self._stop is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self._stop = None
        with self._lock:
            self._temp = None
            self._pressure = None
            self._altitude = None

    def __enter__(self) -> BMP180:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()