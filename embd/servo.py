"""Servo control on top of a PWM output."""

from __future__ import annotations

import abc
import logging

from .util import map_range

logger = logging.getLogger(__name__)

MIN_US = 544
MAX_US = 2400

DEFAULT_FREQ = 50
"""Preferred frequency of a PWM doing servo duties."""


class PWM(abc.ABC):
    """A PWM output that accepts pulse widths in microseconds."""

    @abc.abstractmethod
    def set_microseconds(self, us: int) -> None:
        """Set the pulse width in microseconds."""


class Servo:
    """A hobby servo driven by a PWM output."""

    def __init__(self, pwm: PWM, minus: int = MIN_US, maxus: int = MAX_US) -> None:
        self.pwm = pwm
        self.minus = minus
        self.maxus = maxus

    def set_angle(self, angle: int) -> None:
        """Move the servo to ``angle`` degrees (0 to 180)."""
        us = map_range(angle, 0, 180, self.minus, self.maxus)
        logger.debug("servo: given angle %s calculated %s us", angle, us)
        self.pwm.set_microseconds(us)