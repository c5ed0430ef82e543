"""Pin descriptors, capabilities and the digital pin interface."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field


class Capability(enum.IntFlag):
    """Capabilities a physical pin may offer."""

    DIGITAL = 1 << 0
    I2C = 1 << 1
    UART = 1 << 2
    SPI = 1 << 3
    GPMC = 1 << 4
    LCD = 1 << 5
    PWM = 1 << 6
    ANALOG = 1 << 7


class Direction(enum.IntEnum):
    """Direction of a digital pin."""

    IN = 0
    OUT = 1


class Level(enum.IntEnum):
    """Logic level of a digital pin."""

    LOW = 0
    HIGH = 1


class DigitalPin(abc.ABC):
    """A digital GPIO pin."""

    @abc.abstractmethod
    def set_direction(self, direction: Direction) -> None:
        """Configure the pin as input or output."""

    @abc.abstractmethod
    def read(self) -> Level:
        """Read the current level of the pin."""

    @abc.abstractmethod
    def write(self, level: Level) -> None:
        """Drive the pin to the given level."""

    @abc.abstractmethod
    def time_pulse(self, level: Level) -> float:
        """Return the length in seconds of the next pulse at the given level."""

    @abc.abstractmethod
    def pull_up(self) -> None:
        """Enable the internal pull-up resistor."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the pin."""

    def __enter__(self) -> DigitalPin:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _key_string(key: object) -> str | None:
    """Turn a lookup key into its string form, or None if the type is unsupported."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return str(int(key))
    if isinstance(key, str):
        return key
    if type(key).__str__ is not object.__str__:
        return str(key)
    return None


@dataclass
class PinDesc:
    """Describes one physical pin."""

    id: str
    aliases: list[str] = field(default_factory=list)
    caps: Capability | int = 0
    digital_logical: int = 0
    analog_logical: int = 0


class PinMap(list):
    """An ordered collection of pin descriptors."""

    def lookup(self, key: object, cap: Capability | int) -> PinDesc | None:
        """Find the pin matching ``key`` for the given capability.

        A pin whose id equals the key always matches.  An alias only matches
        when the pin has the requested capability, so one alias may name
        different pins for different capabilities.
        """
        name = _key_string(key)
        if name is None:
            return None
        for desc in self:
            if desc.id == name:
                return desc
            if name in desc.aliases and desc.caps & cap:
                return desc
        return None