#!/usr/bin/env python3
"""AW Gateway - Test the sensor value decoders."""

from collections.abc import Callable

import pytest

from awgateway_tx import exceptions as exc
from awgateway_tx.const import ValueKind
from awgateway_tx.parsers import (
    parse_co2,
    parse_count,
    parse_datetime,
    parse_direction,
    parse_distance,
    parse_gain,
    parse_humidity,
    parse_leak,
    parse_light,
    parse_moisture,
    parse_pm10,
    parse_pm25,
    parse_pressure,
    parse_rain,
    parse_rain_gain,
    parse_rain_large,
    parse_skip,
    parse_speed,
    parse_temp,
    parse_utc,
    parse_uv,
    parse_uv_index,
    parse_wh45,
)
from awgateway_tx.values import SensorValue

from .helpers import assert_raises

# decoder: ((hex, expected value), ...), incl. the min/max of each encoding
TESTS: dict[Callable, tuple[tuple[str, float | int], ...]] = {
    parse_temp: (("00C8", 20.0), ("FF9C", -10.0), ("7FFF", 3276.7), ("8000", -3276.8)),
    parse_pressure: (("2713", 1000.3), ("0000", 0.0)),
    parse_speed: (("0015", 2.1), ("0000", 0.0)),
    parse_rain: (("0064", 10.0), ("7FFF", 3276.7)),
    parse_uv: (("01F4", 50.0),),
    parse_pm10: (("0096", 15.0),),
    parse_pm25: (("0023", 3.5),),
    parse_humidity: (("37", 55.0), ("00", 0.0), ("FF", 255.0)),
    parse_moisture: (("2D", 45.0),),
    parse_uv_index: (("0B", 11.0),),
    parse_leak: (("01", 1.0),),
    parse_rain_large: (("000004D2", 123.4), ("FFFFFFFF", 429496729.5)),
    parse_gain: (("00000064", 1.0), ("FFFFFFFF", 42949672.95)),
    parse_light: (("00015F90", 900.0),),
    parse_rain_gain: (("0064", 1.0), ("FFFF", 655.35)),
    parse_distance: (("0F", 15), ("FF", -1), ("80", -128), ("7F", 127)),
    parse_direction: (("010E", 270), ("0000", 0)),
    parse_co2: (("01A4", 420), ("FFFF", -1)),
    parse_utc: (("5F5E1000", 1600000000), ("FFFFFFFF", -1)),
    parse_count: (("0000000A", 10), ("FFFFFFFF", 4294967295)),
}

KINDS: dict[Callable, ValueKind] = {
    parse_temp: ValueKind.TEMPERATURE,
    parse_pressure: ValueKind.PRESSURE,
    parse_speed: ValueKind.SPEED,
    parse_rain: ValueKind.RAIN,
    parse_uv: ValueKind.UV,
    parse_pm10: ValueKind.PM10,
    parse_pm25: ValueKind.PM25,
    parse_humidity: ValueKind.HUMIDITY,
    parse_moisture: ValueKind.MOISTURE,
    parse_uv_index: ValueKind.UV_INDEX,
    parse_leak: ValueKind.LEAK,
    parse_rain_large: ValueKind.RAIN_LARGE,
    parse_gain: ValueKind.GAIN,
    parse_light: ValueKind.LIGHT,
    parse_rain_gain: ValueKind.GAIN,
    parse_distance: ValueKind.DISTANCE,
    parse_direction: ValueKind.DIRECTION,
    parse_co2: ValueKind.CO2,
    parse_utc: ValueKind.UTC_TIME,
    parse_count: ValueKind.COUNT,
}


@pytest.mark.parametrize("fnc", TESTS, ids=lambda f: f.__name__)
def test_decoders(fnc: Callable) -> None:
    for data, expected in TESTS[fnc]:
        result = fnc(bytes.fromhex(data))

        assert len(result) == 1
        assert result[0].kind == KINDS[fnc]
        assert result[0].value == pytest.approx(expected), f"{fnc.__name__}({data})"


@pytest.mark.parametrize("fnc", TESTS, ids=lambda f: f.__name__)
def test_decoders_length(fnc: Callable) -> None:
    size = len(bytes.fromhex(TESTS[fnc][0][0]))

    for data in (b"", b"\x00" * (size - 1), b"\x00" * (size + 1)):
        try:
            fnc(data)
        except exc.DecodeLength as err:
            assert err.expected == size
            assert err.actual == len(data)
        else:
            assert False, f"{fnc.__name__}({data!r}) did not raise"


def test_parse_datetime() -> None:
    data = bytes.fromhex("1A0B0C0D0E0F")

    assert parse_datetime(data) == [SensorValue(ValueKind.DATETIME, data)]
    assert_raises(exc.DecodeLength, parse_datetime, data[:5])
    assert_raises(exc.DecodeLength, parse_datetime, data + b"\x00")


def test_parse_skip() -> None:
    for data in (b"", b"\x00" * 16, b"\xff" * 3):
        assert parse_skip(data) == [SensorValue.empty()]


def test_parse_wh45() -> None:
    data = bytes.fromhex(
        "00D2"  # temp: 21.0
        "30"  # humidity: 48
        "0014"  # pm10: 2.0
        "001E"  # pm10 24h: 3.0
        "000A"  # pm2.5: 1.0
        "000F"  # pm2.5 24h: 1.5
        "01C2"  # co2: 450
        "01F4"  # co2 24h: 500
        "05"  # battery, ignored
    )

    result = parse_wh45(data)

    assert [v.kind for v in result] == [
        ValueKind.TEMPERATURE,
        ValueKind.HUMIDITY,
        ValueKind.PM10,
        ValueKind.PM10,
        ValueKind.PM25,
        ValueKind.PM25,
        ValueKind.CO2,
        ValueKind.CO2,
    ]
    assert [v.value for v in result] == pytest.approx(
        [21.0, 48.0, 2.0, 3.0, 1.0, 1.5, 450, 500]
    )

    assert_raises(exc.DecodeLength, parse_wh45, data[:15])
    assert_raises(exc.DecodeLength, parse_wh45, data + b"\x00")
