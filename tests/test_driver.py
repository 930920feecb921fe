import logging
from unittest.mock import MagicMock, patch

import pytest

from device_random import (
    CommandRequest,
    CommandValue,
    DeviceRegistry,
    DriverConfig,
    OutOfRange,
    RandomDriver,
    STATUS_RESPONSE,
    UnknownField,
    UnsupportedType,
    ValueType,
    WidthLimits,
    default_limits,
    status_handler,
)


@patch('device_random.driver.time.time', return_value=1700000000.123)
def test_read_unseen_device(mock_time, driver):
    reading = driver.read("Random-Device-01", "Int16")

    assert isinstance(reading, CommandValue)
    assert reading.value_type is ValueType.INT16
    assert reading.resource == "RandomValue_Int16"
    assert reading.origin == 1700000000123
    assert -32768 <= reading.value <= 32767
    assert "Random-Device-01" in driver.registry


def test_read_accepts_enum_and_resource_name(driver):
    reading = driver.read("dev", ValueType.INT8, resource="Temperature")
    assert reading.resource == "Temperature"
    assert reading.value_type is ValueType.INT8


@pytest.mark.parametrize("value_type", ["Float32", "int8", "", None, 8])
def test_read_unsupported_type_does_not_create_device(driver, value_type):
    with pytest.raises(UnsupportedType):
        driver.read("Random-Device-01", value_type)
    assert len(driver.registry) == 0


def test_read_always_within_written_bounds(driver):
    driver.write("dev", [("Min_Int8", -2), ("Max_Int8", 2)])
    driver.write("dev", {"Max_Int32": 1000, "Min_Int32": 999})

    for _ in range(200):
        assert -2 <= driver.read("dev", "Int8").value <= 2
        assert driver.read("dev", "Int32").value in (999, 1000)
        assert -32768 <= driver.read("dev", "Int16").value <= 32767


def test_handle_read_commands_shares_timestamp(driver):
    requests = [
        CommandRequest("RandomValue_Int8", ValueType.INT8),
        CommandRequest("RandomValue_Int16", ValueType.INT16),
        CommandRequest("RandomValue_Int32", ValueType.INT32),
    ]

    readings = driver.handle_read_commands("dev", requests)

    assert [r.resource for r in readings] == [
        "RandomValue_Int8", "RandomValue_Int16", "RandomValue_Int32",
    ]
    assert len({r.origin for r in readings}) == 1


def test_handle_read_commands_rejects_batch_before_mutation(driver):
    requests = [
        CommandRequest("RandomValue_Int8", ValueType.INT8),
        CommandRequest("RandomValue_Float", "Float32"),
    ]
    with pytest.raises(UnsupportedType):
        driver.handle_read_commands("dev", requests)
    assert "dev" not in driver.registry


def test_read_uses_registry_rng():
    rng = MagicMock()
    rng.randint.return_value = 42
    driver = RandomDriver(registry=DeviceRegistry(rng=rng))

    assert driver.read("dev", "Int8").value == 42
    rng.randint.assert_called_once_with(-128, 127)


def test_same_seed_same_readings():
    first = RandomDriver(DriverConfig(seed=7))
    second = RandomDriver(DriverConfig(seed=7))

    assert [first.read("d", "Int32").value for _ in range(10)] == \
        [second.read("d", "Int32").value for _ in range(10)]


def test_write_limits(driver):
    driver.write("dev", [("Min_Int8", -128)])
    driver.write("dev", [("Max_Int8", 127)])

    with pytest.raises(OutOfRange):
        driver.write("dev", [("Min_Int8", -129)])
    with pytest.raises(OutOfRange):
        driver.write("dev", [("Max_Int16", 32768)])
    driver.write("dev", [("Max_Int16", 32767)])


def test_write_fail_fast_batch(driver):
    with pytest.raises(OutOfRange):
        driver.write("dev", [("Min_Int8", 1), ("Max_Int8", 128), ("Max_Int16", 5)])

    device = driver.registry.get("dev")
    assert device.bounds(ValueType.INT8) == (1, 127)
    assert device.bounds(ValueType.INT16) == (-32768, 32767)


def test_write_atomic_batch():
    driver = RandomDriver(DriverConfig(atomic_writes=True))

    with pytest.raises(OutOfRange):
        driver.write("dev", [("Min_Int8", 1), ("Max_Int8", 128)])

    assert driver.registry.get("dev").bounds(ValueType.INT8) == (-128, 127)


def test_write_unknown_field_is_logged(driver, caplog):
    with caplog.at_level(logging.WARNING, logger="device_random.driver"):
        with pytest.raises(UnknownField):
            driver.write("dev", [("Average_Int8", 0)])

    assert "Average_Int8" in caplog.text


def test_handle_write_commands(driver):
    params = [
        CommandValue("Max_Int16", ValueType.INT16, 20, 0),
        CommandValue("Min_Int16", ValueType.INT16, 10, 0),
    ]
    driver.handle_write_commands("dev", params)

    assert driver.registry.get("dev").bounds(ValueType.INT16) == (10, 20)


def test_configured_limits():
    limits = default_limits()
    limits[ValueType.INT8] = WidthLimits(-10, 10)
    driver = RandomDriver(DriverConfig(limits=limits, seed=3))

    for _ in range(200):
        assert -10 <= driver.read("dev", "Int8").value <= 10
    with pytest.raises(OutOfRange) as exc_info:
        driver.write("dev", [("Max_Int8", 11)])
    assert exc_info.value.ceiling == 10


def test_lifecycle_calls_are_no_ops(driver):
    driver.write("dev", [("Min_Int8", 0)])

    assert driver.add_device("dev", {"other": {}}) is None
    assert driver.update_device("dev") is None
    assert driver.remove_device("dev") is None
    assert driver.stop(force=True) is None

    # State is held until the process ends
    assert driver.registry.get("dev").bounds(ValueType.INT8) == (0, 127)


def test_status_handler():
    assert status_handler() == STATUS_RESPONSE == "pong"


def test_partial_registry_limits_read_every_type():
    driver = RandomDriver(registry=DeviceRegistry(limits={ValueType.INT8: WidthLimits(-1, 1)}))

    assert -1 <= driver.read("dev", "Int8").value <= 1
    assert -32768 <= driver.read("dev", "Int16").value <= 32767


def test_reading_to_dict(driver):
    driver.write("dev", [("Min_Int16", 4), ("Max_Int16", 4)])
    reading = driver.read("dev", "Int16")

    assert reading.to_dict() == {
        "resource": "RandomValue_Int16",
        "type": "Int16",
        "value": 4,
        "origin": reading.origin,
    }


def test_error_codes():
    from device_random import ErrorCode, InvalidValue

    assert UnsupportedType("x").code is ErrorCode.UNSUPPORTED_TYPE
    assert UnknownField("x").code is ErrorCode.UNKNOWN_FIELD
    assert OutOfRange("Max_Int8", 200, -128, 127).code is ErrorCode.OUT_OF_RANGE
    assert InvalidValue("Max_Int8", "x").code is ErrorCode.INVALID_VALUE
