"""LSM303 magnetometer giving a compass heading."""

from __future__ import annotations

import logging
import math
import threading

from .bus import I2CBus

logger = logging.getLogger(__name__)

MAG_ADDRESS = 0x1E

MAG_HZ75 = 0x00  # ODR = 0.75 Hz
MAG_1HZ5 = 0x04  # ODR = 1.5 Hz
MAG_3HZ = 0x08  # ODR = 3 Hz
MAG_7HZ5 = 0x0C  # ODR = 7.5 Hz
MAG_15HZ = 0x10  # ODR = 15 Hz
MAG_30HZ = 0x14  # ODR = 30 Hz
MAG_75HZ = 0x18  # ODR = 75 Hz
MAG_NORMAL = 0x00
MAG_POSITIVE_BIAS = 0x01
MAG_NEGATIVE_BIAS = 0x02

MAG_CRA_DEFAULT = MAG_15HZ | MAG_NORMAL

MAG_CONTINUOUS = 0x00
MAG_SINGLE = 0x01
MAG_SLEEP = 0x03

MAG_MR_DEFAULT = MAG_CONTINUOUS

DEFAULT_POLL = 250
"""Default delay between background measurements, in milliseconds."""

_MAG_CONFIG_REG_A = 0x00
_MAG_MODE_REG = 0x02
_MAG_DATA_SIGNAL = 0x02
_MAG_DATA = 0x03


class LSM303:
    """An LSM303 magnetometer."""

    def __init__(self, bus: I2CBus, poll: int = DEFAULT_POLL) -> None:
        self.bus = bus
        self.poll = poll
        self._initialized = False
        self._setup_lock = threading.Lock()
        self._lock = threading.Lock()
        self._heading: float | None = None
        self._stop: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def _setup(self) -> None:
        with self._setup_lock:
            if self._initialized:
                return
            self.bus.write_byte_to_reg(MAG_ADDRESS, _MAG_CONFIG_REG_A, MAG_CRA_DEFAULT)
            self.bus.write_byte_to_reg(MAG_ADDRESS, _MAG_MODE_REG, MAG_MR_DEFAULT)
            self._initialized = True

    def _measure_heading(self) -> float:
        self._setup()
        self.bus.read_byte_from_reg(MAG_ADDRESS, _MAG_DATA_SIGNAL)
        data = self.bus.read_from_reg(MAG_ADDRESS, _MAG_DATA, 6)
        x = int.from_bytes(data[0:2], "big", signed=True)
        y = int.from_bytes(data[2:4], "big", signed=True)
        heading = math.degrees(math.atan2(y, x))
        if heading < 0:
            heading += 360
        return heading

    def heading(self) -> float:
        """Return the current heading in degrees, in [0, 360)."""
        with self._lock:
            cached = self._heading
        if cached is not None:
            return cached
        logger.debug("lsm303: no headings available... measuring")
        return self._measure_heading()

    def _poll_loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.poll / 1000):
            try:
                value = self._measure_heading()
            except Exception as exc:  # a failed poll keeps the previous reading
                logger.debug("lsm303: measurement failed: %s", exc)
                continue
            with self._lock:
                self._heading = value

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
        """Stop the acquisition loop and put the magnetometer to sleep."""
        if self._thread is not None and self._stop is not None:
            self._stop.set()
            self._thread.join()
            self._thread = None
            self._stop = None
            with self._lock:
                self._heading = None
        self.bus.write_byte_to_reg(MAG_ADDRESS, _MAG_MODE_REG, MAG_SLEEP)

    def __enter__(self) -> LSM303:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()