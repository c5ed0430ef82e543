"""Bus interfaces for SPI and I2C communication."""

from __future__ import annotations

import abc
import enum

_CPHA = 0x01
_CPOL = 0x02


class SPIMode(enum.IntEnum):
    """SPI clock polarity and phase combinations."""

    MODE0 = 0
    MODE1 = _CPHA
    MODE2 = _CPOL
    MODE3 = _CPOL | _CPHA

    @property
    def cpol(self) -> bool:
        """Clock polarity bit."""
        return bool(self & _CPOL)

    @property
    def cpha(self) -> bool:
        """Clock phase bit."""
        return bool(self & _CPHA)


class SPIBus(abc.ABC):
    """An SPI bus."""

    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Write data to the bus and return the number of bytes written."""

    @abc.abstractmethod
    def transfer_and_receive_data(self, data: bytes) -> bytes:
        """Transmit data and return the bytes received in exchange."""

    @abc.abstractmethod
    def receive_data(self, length: int) -> bytes:
        """Receive ``length`` bytes."""

    @abc.abstractmethod
    def transfer_and_receive_byte(self, value: int) -> int:
        """Transmit one byte and return the byte received."""

    @abc.abstractmethod
    def receive_byte(self) -> int:
        """Receive one byte."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the bus."""

    def __enter__(self) -> SPIBus:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class I2CBus(abc.ABC):
    """An I2C bus."""

    @abc.abstractmethod
    def write_byte(self, addr: int, value: int) -> None:
        """Write a single byte to a device."""

    @abc.abstractmethod
    def read_byte_from_reg(self, addr: int, reg: int) -> int:
        """Read one byte from a device register."""

    @abc.abstractmethod
    def read_word_from_reg(self, addr: int, reg: int) -> int:
        """Read a 16-bit word from a device register."""

    @abc.abstractmethod
    def read_from_reg(self, addr: int, reg: int, length: int) -> bytes:
        """Read ``length`` bytes starting at a device register."""

    @abc.abstractmethod
    def write_byte_to_reg(self, addr: int, reg: int, value: int) -> None:
        """Write one byte to a device register."""

    @abc.abstractmethod
    def write_word_to_reg(self, addr: int, reg: int, value: int) -> None:
        """Write a 16-bit word to a device register."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the bus."""

    def __enter__(self) -> I2CBus:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()