"""LED interface and a generic LED driver keyed by aliases."""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping, Sequence

from .pin import _key_string


class LED(abc.ABC):
    """An LED on the board."""

    @abc.abstractmethod
    def on(self) -> None:
        """Switch the LED on."""

    @abc.abstractmethod
    def off(self) -> None:
        """Switch the LED off."""

    @abc.abstractmethod
    def toggle(self) -> None:
        """Toggle the LED."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release resources held by the LED."""


class LEDDriver:
    """Creates LEDs by id or alias and tracks them for cleanup."""

    def __init__(
        self,
        led_map: Mapping[str, Sequence[str]],
        factory: Callable[[str], LED],
    ) -> None:
        self.led_map = led_map
        self._factory = factory
        self._leds: dict[str, LED] = {}

    def _lookup(self, key: object) -> str:
        name = _key_string(key)
        if name is None:
            raise TypeError("led: invalid key type")
        for led_id, aliases in self.led_map.items():
            if name in aliases:
                return led_id
        raise LookupError(f"led: no match found for {key!r}")

    def led(self, key: object) -> LED:
        """Return the LED whose aliases include ``key``."""
        led_id = self._lookup(key)
        led = self._factory(led_id)
        self._leds[led_id] = led
        return led

    def close(self) -> None:
        """Close every LED handed out so far."""
        for led in self._leds.values():
            led.close()

    def __enter__(self) -> LEDDriver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()