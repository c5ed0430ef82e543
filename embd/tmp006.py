"""TMP006 infrared thermopile sensor on an I2C bus."""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterator
from dataclasses import dataclass

from .bmp085 import _int16
from .bus import I2CBus
from .l3gd20 import _Mailbox

logger = logging.getLogger(__name__)

_B0 = -0.0000294
_B1 = -0.00000057
_B2 = 0.00000000463
_C2 = 13.4
_TREF = 298.15
_A2 = -0.00001678
_A1 = 0.00175
_S0 = 6.4

_V_OBJ_REG = 0x00
_TEMP_AMB_REG = 0x01
_CONFIG_REG = 0x02
_MAN_ID_REG = 0xFE
_DEV_ID_REG = 0xFF

MANUFACTURER_ID = 0x5449
DEVICE_ID = 0x0067

_RESET = 0x8000
_MODE_ON = 0x7000
_DRDY_EN = 0x0100
_CONFIG_REG_DEFAULT = _MODE_ON | _DRDY_EN


@dataclass(frozen=True)
class SampleRate:
    """Averaging setting: register bits, samples and seconds per reading."""

    enabler: int
    samples: int
    time_required: float


SR1 = SampleRate(0x0000, 1, 0.25)
SR2 = SampleRate(0x0200, 2, 0.5)
SR4 = SampleRate(0x0400, 4, 1)
SR8 = SampleRate(0x0600, 8, 2)
SR16 = SampleRate(0x0800, 16, 4)


class TMP006:
    """A TMP006 thermopile sensor."""

    def __init__(
        self, bus: I2CBus | None, addr: int, sample_rate: SampleRate | None = None
    ) -> None:
        self.bus = bus
        self.addr = addr
        self.sample_rate = sample_rate
        self._initialized = False
        self._setup_lock = threading.Lock()
        self._raw_die_temps: _Mailbox[float] = _Mailbox()
        self._obj_temps: _Mailbox[float] = _Mailbox()
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def _validate(self) -> None:
        if self.bus is None:
            raise ValueError("tmp006: bus is nil")
        if self.addr == 0x00:
            raise ValueError(f"tmp006: {self.addr:#x} is not a valid address")

    def present(self) -> bool:
        """Check that a TMP006 answers at the configured address.

        Raises LookupError when the identification registers do not match.
        """
        self._validate()
        mid = self.bus.read_word_from_reg(self.addr, _MAN_ID_REG)
        logger.debug("tmp006: got manufacturer id %#06x", mid)
        if mid != MANUFACTURER_ID:
            raise LookupError(
                f"tmp006: not found at {self.addr:#x}, manufacturer id mismatch"
            )
        did = self.bus.read_word_from_reg(self.addr, _DEV_ID_REG)
        logger.debug("tmp006: got device id %#06x", did)
        if did != DEVICE_ID:
            raise LookupError(f"tmp006: not found at {self.addr:#x}, device id mismatch")
        return True

    def _setup(self) -> None:
        with self._setup_lock:
            if self._initialized:
                return
            self._validate()
            if self.sample_rate is None:
                logger.debug("tmp006: sample rate not set, using SR16")
                self.sample_rate = SR16
            config = _CONFIG_REG_DEFAULT | self.sample_rate.enabler
            logger.debug("tmp006: configuring with %#06x", config)
            self.bus.write_word_to_reg(self.addr, _CONFIG_REG, config)
            self._initialized = True

    def _measure_raw_die_temp(self) -> float:
        self._setup()
        raw = (self.bus.read_word_from_reg(self.addr, _TEMP_AMB_REG) & 0xFFFF) >> 2
        logger.debug("tmp006: raw die temp %#06x", raw)
        return _int16(raw) * 0.03125

    def _measure_raw_voltage(self) -> int:
        self._setup()
        volt = _int16(self.bus.read_word_from_reg(self.addr, _V_OBJ_REG))
        logger.debug("tmp006: raw voltage %s", volt)
        return volt

    def _measure_obj_temp(self) -> float:
        self._setup()
        t_die = self._measure_raw_die_temp()
        logger.debug("tmp006: tdie = %.2f C", t_die)
        t_die += 273.15
        v_obj = self._measure_raw_voltage() * 156.25 / 1000  # nV per LSB -> uV
        logger.debug("tmp006: vObj = %.5f uV", v_obj)
        v_obj /= 1_000_000  # uV -> V

        dt = t_die - _TREF
        s = (1 + _A1 * dt + _A2 * dt * dt) * _S0 / 10_000_000 / 10_000_000
        v_os = _B0 + _B1 * dt + _B2 * dt * dt
        f_v_obj = (v_obj - v_os) + _C2 * (v_obj - v_os) ** 2

        return math.sqrt(math.sqrt(t_die**4 + f_v_obj / s)) - 273.15

    def raw_die_temp(self) -> float:
        """Return the die temperature in degrees Celsius."""
        available, value = self._raw_die_temps.take_nowait()
        if available:
            return value
        return self._measure_raw_die_temp()

    def raw_die_temps(self) -> Iterator[float]:
        """Iterate over die temperatures produced by the running loop."""
        return iter(self._raw_die_temps)

    def obj_temp(self) -> float:
        """Return the object temperature in degrees Celsius."""
        available, value = self._obj_temps.take_nowait()
        if available:
            return value
        return self._measure_obj_temp()

    def obj_temps(self) -> Iterator[float]:
        """Iterate over object temperatures produced by the running loop."""
        return iter(self._obj_temps)

    def _loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.sample_rate.time_required):
            try:
                self._raw_die_temps.put(self._measure_raw_die_temp())
            except Exception as exc:  # keep polling after a failed read
                logger.error("tmp006: %s", exc)
            try:
                self._obj_temps.put(self._measure_obj_temp())
            except Exception as exc:  # keep polling after a failed read
                logger.error("tmp006: %s", exc)

    def start(self) -> None:
        """Start the data acquisition loop in the background."""
        self._setup()
        if self._thread is not None:
            return
        self._raw_die_temps.open()
        self._obj_temps.open()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._loop, args=(self._stop_event,), daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        """Stop the acquisition loop and reset the device into low power mode."""
        self._setup()
        if self._thread is not None and self._stop_event is not None:
            self._stop_event.set()
            self._thread.join()
            self._thread = None
            self._stop_event = None
            self._raw_die_temps.close()
            self._obj_temps.close()
        logger.debug("tmp006: resetting")
        self.bus.write_word_to_reg(self.addr, _CONFIG_REG, _RESET)

    def __enter__(self) -> TMP006:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()