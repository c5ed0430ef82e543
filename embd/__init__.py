"""Drivers and helpers for sensors, character displays, keypads, servos, LEDs and SPI buses."""

__version__ = "0.1.0"