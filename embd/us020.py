"""US020 ultrasonic range finder."""

from __future__ import annotations

import abc
import logging
import threading
import time

from .pin import DigitalPin, Direction, Level

logger = logging.getLogger(__name__)

_PULSE_DELAY = 30e-6
_DEFAULT_TEMP = 25.0
_FALLBACK_SPEED_OF_SOUND = 340.0


class Thermometer(abc.ABC):
    """A source of ambient temperature in degrees Celsius."""

    @abc.abstractmethod
    def temperature(self) -> float:
        """Return the current temperature."""


class NullThermometer(Thermometer):
    """A thermometer that always reports the default room temperature."""

    def temperature(self) -> float:
        return _DEFAULT_TEMP


class US020:
    """A US020 range finder driven by an echo and a trigger pin."""

    def __init__(
        self,
        echo_pin: DigitalPin,
        trigger_pin: DigitalPin,
        thermometer: Thermometer | None = None,
    ) -> None:
        self.echo_pin = echo_pin
        self.trigger_pin = trigger_pin
        self.thermometer = thermometer
        self._speed_of_sound: float | None = None
        self._setup_lock = threading.Lock()

    def _speed_from_thermometer(self) -> float:
        if self.thermometer is None:
            self.thermometer = NullThermometer()
        try:
            temp = self.thermometer.temperature()
        except Exception:  # any thermometer failure falls back to a fixed speed
            return _FALLBACK_SPEED_OF_SOUND
        speed = 331.3 + 0.606 * temp
        logger.debug(
            "us020: read a temperature of %s, so speed of sound = %s", temp, speed
        )
        return speed

    def _speed(self) -> float:
        with self._setup_lock:
            if self._speed_of_sound is None:
                self.trigger_pin.set_direction(Direction.OUT)
                self.echo_pin.set_direction(Direction.IN)
                self._speed_of_sound = self._speed_from_thermometer()
            return self._speed_of_sound

    def distance(self) -> float:
        """Measure the distance to the closest obstruction."""
        speed = self._speed()
        logger.debug("us020: triggering pulse")
        self.trigger_pin.write(Level.HIGH)
        time.sleep(_PULSE_DELAY)
        self.trigger_pin.write(Level.LOW)

        logger.debug("us020: waiting for echo to go high")
        duration = self.echo_pin.time_pulse(Level.HIGH)
        nanoseconds = duration * 1e9
        return nanoseconds / 10_000_000 * (speed / 2)

    def close(self) -> None:
        """Leave the echo pin configured as an output."""
        self.echo_pin.set_direction(Direction.OUT)