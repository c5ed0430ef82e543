# embd

Python building blocks for embedded boards: pin maps, an LED driver, an
SPI driver, a servo helper, a character-display layer, a 4x3 keypad
scanner and drivers for several I2C and GPIO sensors.

Every driver talks to the hardware through small objects that you supply:
implementations of `embd.bus.I2CBus`, `embd.bus.SPIBus`,
`embd.pin.DigitalPin`, `embd.led.LED`, `embd.servo.PWM` or
`embd.characterdisplay.Controller`. The drivers work the same with real
back-ends and with test doubles.

## Installation

    pip install embd

To run the tests:

    pip install "embd[test]"
    pytest

The package has no runtime dependencies.

## Modules

- `embd.util`
  - `map_range(x, inmin, inmax, outmin, outmax)` re-maps an integer from one
    range to another. It uses integer arithmetic and truncates toward zero.
  - `find_first_matching_file(pattern)` returns the first path, in sorted
    order, that matches a glob pattern, or `None` if nothing matches.
- `embd.pin`
  - `Capability` is a flag enum with `DIGITAL`, `I2C`, `UART`, `SPI`, `GPMC`,
    `LCD`, `PWM` and `ANALOG`.
  - `Direction` has `IN` and `OUT`. `Level` has `LOW` and `HIGH`.
  - `DigitalPin` is the abstract pin interface. It has `set_direction`, `read`,
    `write`, `time_pulse` (returns seconds), `pull_up` and `close`, and it
    works as a context manager.
  - `PinDesc` describes one pin. `PinMap` is a list of descriptors with
    `lookup(key, cap)`. A key may be a string, an int, or any object with its
    own `__str__`. A pin whose id equals the key always matches. An alias
    matches only when the pin has the requested capability. `lookup` returns
    `None` when nothing matches.
- `embd.bus`
  - `SPIMode` has `MODE0` to `MODE3`, with `cpol` and `cpha` properties.
  - `SPIBus` and `I2CBus` are abstract bus interfaces.
- `embd.led`
  - `LED` is the abstract interface, with `on`, `off`, `toggle` and `close`.
  - `LEDDriver(led_map, factory)` resolves a key against each id's aliases
    and creates the LED with `factory(id)`. `led(key)` raises `TypeError` for
    an unsupported key type and `LookupError` when no alias matches. `close()`
    closes every LED handed out.
- `embd.spi`
  - `SPIDriver(spi_dev_minor, bus_factory, initializer)` creates buses with
    `bus(mode, channel, speed, bpw, delay)`. Only the most recently created
    bus is tracked. `close()` closes it and ignores `OSError` from closing.
- `embd.servo`
  - `PWM` is an abstract output with `set_microseconds(us)`.
  - `Servo(pwm, minus=544, maxus=2400)` has `set_angle(angle)`, which maps
    0–180 degrees onto the pulse-width range. `DEFAULT_FREQ` is 50.
- `embd.characterdisplay`
  - `Controller` is the abstract character-display controller.
  - `Display(controller, cols, rows)` tracks the cursor. `message(text)`
    writes the text as bytes, moves to the next line on `"\n"`, and wraps at
    the end of a line. `set_cursor` clamps the row to the last line.
    `newline`, `home` and `clear` also update the tracked position. All other
    operations are passed to the controller unchanged.
- `embd.matrix4x3`
  - `Key` has `NONE`, `K0` to `K9`, `STAR` and `HASH`. Its `str()` gives the
    key label.
  - `Matrix4x3(row_pins, col_pins, poll=150)` takes `DigitalPin` objects. It
    raises `ValueError` if fewer than 4 row pins or 3 column pins are given.
    `pressed_key()` scans the keypad with a 20 ms debounce. `run()` and
    `close()` start and stop a background scan loop.
- Sensors
  - `embd.watersensor.WaterSensor(pin)`: `is_wet()`.
  - `embd.us020.US020(echo_pin, trigger_pin, thermometer=None)`: `distance()`
    and `close()`.
    - Without a thermometer, `NullThermometer` is used, which reports 25 °C.
    - If the thermometer raises, the speed of sound falls back to 340 m/s.
  - `embd.bh1750fvi.BH1750FVI(bus, mode=HIGH, poll=150)`, plus
    `new_high_mode(bus)` and `new_high2_mode(bus)`: `lighting()` in lx,
    `run()` and `close()`.
  - `embd.bmp085.BMP085(bus, poll=250)` and `embd.bmp180.BMP180(bus, poll=250)`:
    `temperature()` in °C, `pressure()` in Pa and `altitude()` in metres,
    plus `run()` and `close()`.
  - `embd.lsm303.LSM303(bus, poll=250)`: `heading()` in degrees [0, 360),
    `run()`, and `close()`, which also puts the magnetometer to sleep.
  - `embd.l3gd20.L3GD20(bus, dps_range=R250DPS)`, with ranges `R250DPS`,
    `R500DPS` and `R2000DPS`.
    - `orientation_delta()` and `temperature()` read the sensor.
    - `start()` runs a loop that accumulates `Orientation(x, y, z)` values.
    - `orientations()` iterates over those values until `stop()` or `close()`.
  - `embd.tmp006.TMP006(bus, addr, sample_rate=None)`, with rates `SR1` to
    `SR16` (default `SR16`).
    - `present()` raises `LookupError` when the identification registers do
      not match.
    - `raw_die_temp()` and `obj_temp()` read temperatures.
    - `start()` feeds `raw_die_temps()` and `obj_temps()`.
    - `close()` resets the device.

When a sensor's `run()` or `start()` loop is active, its reading methods
return the latest background value. Otherwise they measure directly.

## Example

    from embd.util import map_range
    from embd.pin import Capability, PinDesc, PinMap

    pins = PinMap([
        PinDesc(id="P1_1", aliases=["AN1", "10"], caps=Capability.ANALOG),
        PinDesc(id="P1_2", aliases=["10", "GPIO10"], caps=Capability.DIGITAL),
    ])
    print(pins.lookup("10", Capability.DIGITAL).id)   # P1_2

    print(map_range(90, 0, 180, 1000, 2000))          # 1500

A servo driven by any `PWM` implementation:

    from embd.servo import Servo

    servo = Servo(pwm)
    servo.set_angle(90)

A barometer on an I2C bus:

    from embd.bmp085 import BMP085

    baro = BMP085(bus)
    print(baro.temperature(), baro.pressure(), baro.altitude())

## What the package does not do

- It does not detect the board it runs on.
- It has no module-level setup functions.
- It includes no concrete GPIO, I2C, SPI, PWM or LED back-ends (for example
  sysfs or `/dev` access). You provide these as implementations of the
  interfaces above.
- It has no display controller implementation. `Display` needs a
  `Controller` you supply.
- There is no command-line tool.