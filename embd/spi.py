"""Generic SPI driver that hands out buses from a factory."""

from __future__ import annotations

import contextlib
import threading
from collections.abc import Callable

from .bus import SPIBus

SPIBusFactory = Callable[[int, int, int, int, int, int, Callable[[], None]], SPIBus]


class SPIDriver:
    """Creates SPI buses and closes them on shutdown."""

    def __init__(
        self,
        spi_dev_minor: int,
        bus_factory: SPIBusFactory,
        initializer: Callable[[], None],
    ) -> None:
        self.spi_dev_minor = spi_dev_minor
        self._bus_factory = bus_factory
        self._initializer = initializer
        self._buses: dict[int, SPIBus] = {}
        self._lock = threading.Lock()

    def bus(self, mode: int, channel: int, speed: int, bpw: int, delay: int) -> SPIBus:
        """Create a bus for the given settings.

        Only the most recently created bus is tracked for cleanup.
        """
        with self._lock:
            bus = self._bus_factory(
                self.spi_dev_minor, mode, channel, speed, bpw, delay, self._initializer
            )
            self._buses = {channel: bus}
            return bus

    def close(self) -> None:
        """Close the tracked bus, ignoring errors from closing it."""
        for bus in self._buses.values():
            with contextlib.suppress(OSError):
                bus.close()

    def __enter__(self) -> SPIDriver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()