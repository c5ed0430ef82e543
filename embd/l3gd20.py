"""L3GD20 three-axis gyroscope on an I2C bus."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from .bus import I2CBus

logger = logging.getLogger(__name__)

ADDRESS = 0x6B
DEVICE_ID = 0xD4
DPS_TO_RPS = 0.017453293

_WHO_AM_I = 0x0F
_CTRL_REG1 = 0x20
_CTRL_REG2 = 0x21
_CTRL_REG3 = 0x22
_CTRL_REG4 = 0x23
_CTRL_REG5 = 0x24
_TEMP_DATA = 0x26
_STATUS_REG = 0x27

_X_ENABLED = 0x01
_Y_ENABLED = 0x02
_Z_ENABLED = 0x04
_POWER_ON = 0x08
_POWER_OFF = 0x00

_CTRL_REG1_DEFAULT = _POWER_ON | _X_ENABLED | _Y_ENABLED | _Z_ENABLED
_CTRL_REG1_FINISHED = _POWER_OFF | _X_ENABLED | _Y_ENABLED | _Z_ENABLED

_ZYX_AVAILABLE = 0x08

_ODR = 95
_MULT = 1.0 / _ODR
_POLL_DELAY = math.floor(_MULT * 1_000_000) / 1_000_000
_CALIBRATION_SAMPLES = 20
_STATUS_RETRY_DELAY = 100e-6

T = TypeVar("T")


class _Mailbox(Generic[T]):
    """Holds the latest value produced by a background loop until taken."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._value: T | None = None
        self._has_value = False
        self._open = False

    def open(self) -> None:
        with self._cond:
            self._open = True
            self._has_value = False
            self._value = None

    def put(self, value: T) -> None:
        with self._cond:
            self._value = value
            self._has_value = True
            self._cond.notify_all()

    def take_nowait(self) -> tuple[bool, T | None]:
        with self._cond:
            if not self._has_value:
                return False, None
            self._has_value = False
            return True, self._value

    def close(self) -> None:
        with self._cond:
            self._open = False
            self._has_value = False
            self._value = None
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._has_value or not self._open)
                if not self._has_value:
                    return
                value = self._value
                self._has_value = False
            yield value


@dataclass(frozen=True)
class Range:
    """A full-scale range setting of the gyroscope."""

    sensitivity: float
    value: int


R250DPS = Range(sensitivity=0.00875, value=0x00)
R500DPS = Range(sensitivity=0.0175, value=0x10)
R2000DPS = Range(sensitivity=0.070, value=0x20)


@dataclass(frozen=True)
class _Axis:
    name: str
    low_reg: int
    high_reg: int
    available_mask: int

    def __str__(self) -> str:
        return self.name


_AX = _Axis("X", 0x28, 0x29, 0x01)
_AY = _Axis("Y", 0x2A, 0x2B, 0x02)
_AZ = _Axis("Z", 0x2C, 0x2D, 0x04)
_AXES = (_AX, _AY, _AZ)


@dataclass(frozen=True)
class _AxisCalibration:
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0

    def adjust(self, value: float) -> float:
        if self.min <= value <= self.max:
            return 0.0
        return value - self.mean


@dataclass(frozen=True)
class Orientation:
    """Accumulated rotation around each axis, in degrees."""

    x: float
    y: float
    z: float


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _int8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


class L3GD20:
    """An L3GD20 three-axis gyroscope."""

    def __init__(self, bus: I2CBus, dps_range: Range = R250DPS) -> None:
        self.bus = bus
        self.dps_range = dps_range
        self._initialized = False
        self._setup_lock = threading.Lock()
        self._calibrations: dict[_Axis, _AxisCalibration] = {}
        self._orientations: _Mailbox[Orientation] = _Mailbox()
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def _axis_status(self, axis: _Axis) -> bool:
        data = self.bus.read_byte_from_reg(ADDRESS, _STATUS_REG)
        if not data & _ZYX_AVAILABLE:
            return False
        return bool(data & axis.available_mask)

    def _read_orientation_delta(self, axis: _Axis) -> float:
        low = self.bus.read_byte_from_reg(ADDRESS, axis.low_reg)
        high = self.bus.read_byte_from_reg(ADDRESS, axis.high_reg)
        raw = _int16(((high & 0xFF) << 8) | (low & 0xFF))
        return raw * self.dps_range.sensitivity

    def _calibrate(self, axis: _Axis) -> _AxisCalibration:
        logger.debug("l3gd20: calibrating %s axis", axis)
        values = []
        while len(values) < _CALIBRATION_SAMPLES:
            if not self._axis_status(axis):
                time.sleep(_STATUS_RETRY_DELAY)
                continue
            values.append(self._read_orientation_delta(axis))
        calibration = _AxisCalibration(
            min=min(values), max=max(values), mean=sum(values) / len(values)
        )
        logger.debug("l3gd20: %s axis calibration (%s)", axis, calibration)
        return calibration

    def _setup(self) -> None:
        with self._setup_lock:
            if self._initialized:
                return
            self.bus.write_byte_to_reg(ADDRESS, _CTRL_REG1, _CTRL_REG1_DEFAULT)
            self.bus.write_byte_to_reg(ADDRESS, _CTRL_REG4, self.dps_range.value)
            self._calibrations = {axis: self._calibrate(axis) for axis in _AXES}
            self._initialized = True

    def _calibrated_orientation_delta(self, axis: _Axis) -> float:
        value = self._read_orientation_delta(axis)
        return self._calibrations[axis].adjust(value)

    def _measure_orientation_delta(self) -> tuple[float, float, float]:
        self._setup()
        dx, dy, dz = (self._calibrated_orientation_delta(axis) for axis in _AXES)
        return dx, dy, dz

    def orientation_delta(self) -> tuple[float, float, float]:
        """Return the calibrated angular rate around X, Y and Z in degrees/s."""
        return self._measure_orientation_delta()

    def temperature(self) -> int:
        """Return the raw die temperature reading."""
        self._setup()
        return _int8(self.bus.read_byte_from_reg(ADDRESS, _TEMP_DATA))

    def orientations(self) -> Iterator[Orientation]:
        """Iterate over accumulated orientations produced by the running loop.

        The iteration ends once the acquisition loop stops.
        """
        self._setup()
        return iter(self._orientations)

    def _loop(self, stop: threading.Event) -> None:
        x = y = z = 0.0
        while not stop.wait(_POLL_DELAY):
            try:
                dx, dy, dz = self._measure_orientation_delta()
            except Exception as exc:  # keep polling after a failed read
                logger.error("l3gd20: %s", exc)
                continue
            x += dx * _MULT
            y += dy * _MULT
            z += dz * _MULT
            self._orientations.put(Orientation(x, y, z))

    def start(self) -> None:
        """Start the data acquisition loop in the background."""
        self._setup()
        if self._thread is not None:
            return
        self._orientations.open()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._loop, args=(self._stop_event,), daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the acquisition loop and power the sensor down."""
        if self._thread is not None and self._stop_event is not None:
            self._stop_event.set()
            self._thread.join()
            self._thread = None
            self._stop_event = None
            self._orientations.close()
        self.bus.write_byte_to_reg(ADDRESS, _CTRL_REG1, _CTRL_REG1_FINISHED)
        with self._setup_lock:
            self._initialized = False

    def close(self) -> None:
        """Stop the sensor."""
        self.stop()

    def __enter__(self) -> L3GD20:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()