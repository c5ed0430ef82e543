"""Water presence sensor on a digital pin."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from .pin import Direction, Level

if TYPE_CHECKING:
    from .pin import DigitalPin

logger = logging.getLogger(__name__)


class WaterSensor:
    """A water sensor that reads high when wet."""

    def __init__(self, pin: DigitalPin) -> None:
        self.pin = pin
        self._configured = False
        self._configure_lock = threading.Lock()

    def _configure(self) -> None:
        if self._configured:
            return
        with self._configure_lock:
            if not self._configured:
                self.pin.set_direction(Direction.IN)
                self._configured = True

    def is_wet(self) -> bool:
        """Return True if water is present on the sensor."""
        self._configure()
        logger.debug("watersensor: reading")
        return self.pin.read() == Level.HIGH