[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "embd"
version = "0.1.0"
description = "Drivers and helpers for sensors, character displays, keypads, servos, LEDs and SPI buses on embedded boards"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "embedded",
    "gpio",
    "i2c",
    "spi",
    "sensor",
    "servo",
    "led",
    "keypad",
    "lcd",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
    "Topic :: Software Development :: Embedded Systems",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["embd"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
