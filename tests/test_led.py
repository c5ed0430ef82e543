from unittest.mock import Mock

import pytest

from embd.led import LED, LEDDriver

LED_MAP = {"led0": ["0", "LED0"], "led1": ["1", "LED1"]}


class _Named:
    def __init__(self, text):
        self._text = text

    def __str__(self):
        return self._text


def make_driver():
    factory = Mock(side_effect=lambda led_id: Mock(spec=LED))
    return LEDDriver(LED_MAP, factory), factory


@pytest.mark.parametrize(
    "key, led_id",
    [(0, "led0"), ("LED1", "led1"), (_Named("1"), "led1")],
)
def test_led_lookup_passes_id_to_factory(key, led_id):
    driver, factory = make_driver()
    led = driver.led(key)
    factory.assert_called_once_with(led_id)
    led.on()
    led.on.assert_called_once_with()


def test_unknown_key_raises_lookup_error():
    driver, factory = make_driver()
    with pytest.raises(LookupError):
        driver.led("LED9")
    factory.assert_not_called()


def test_invalid_key_type_raises_type_error():
    driver, _ = make_driver()
    with pytest.raises(TypeError):
        driver.led(object())


def test_close_closes_created_leds():
    driver, _ = make_driver()
    leds = [driver.led(0), driver.led(1)]
    driver.close()
    assert [led.close.call_count for led in leds] == [1, 1]


def test_context_manager_closes():
    driver, _ = make_driver()
    with driver:
        led = driver.led("LED0")
    led.close.assert_called_once_with()


def test_close_propagates_error():
    driver, _ = make_driver()
    led = driver.led(0)
    led.close.side_effect = OSError("close failed")
    with pytest.raises(OSError):
        driver.close()