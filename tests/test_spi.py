from unittest.mock import Mock

from embd.bus import SPIBus, SPIMode
from embd.spi import SPIDriver


def make_driver():
    factory = Mock(side_effect=lambda *settings: Mock(spec=SPIBus))
    init = Mock()
    return SPIDriver(5, factory, init), factory, init


def test_bus_passes_settings_to_factory():
    driver, factory, init = make_driver()
    bus = driver.bus(SPIMode.MODE0, 1, 1000000, 8, 0)
    factory.assert_called_once_with(5, SPIMode.MODE0, 1, 1000000, 8, 0, init)
    bus.receive_byte.return_value = 7
    assert bus.receive_byte() == 7


def test_close_closes_bus():
    driver, _, _ = make_driver()
    bus = driver.bus(SPIMode.MODE0, 0, 1000000, 8, 0)
    driver.close()
    bus.close.assert_called_once_with()


def test_only_latest_bus_is_tracked():
    driver, _, _ = make_driver()
    first = driver.bus(SPIMode.MODE0, 0, 1000000, 8, 0)
    second = driver.bus(SPIMode.MODE0, 1, 1000000, 8, 0)
    driver.close()
    assert (first.close.call_count, second.close.call_count) == (0, 1)


def test_close_ignores_bus_errors():
    driver, _, _ = make_driver()
    bus = driver.bus(SPIMode.MODE0, 0, 1000000, 8, 0)
    bus.close.side_effect = OSError("busy")
    driver.close()
    assert bus.close.call_count == 1


def test_context_manager_closes():
    driver, _, _ = make_driver()
    with driver:
        bus = driver.bus(SPIMode.MODE3, 0, 500000, 8, 0)
    bus.close.assert_called_once_with()