#!/usr/bin/env python3
"""AW Gateway - the live-data sensor registry, and its dispatcher.

The live-data response is a concatenation of records, each is a one-byte type id,
followed by a fixed number of bytes (which depends upon the type id):

  01 00C8 06 37 0A 010E ...
  ^^ ^^^^ ^^ ^^ ^^ ^^^^
  |  |    |  |  |  +-- wind_dir: 270
  |  |    |  +--+-- in_humidity: 55
  +--+-- indoor_temp: 20.0
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from . import exceptions as exc
from .parsers import (
    WH45_SIZE,
    ParserT,
    parse_count,
    parse_datetime,
    parse_direction,
    parse_distance,
    parse_humidity,
    parse_leak,
    parse_light,
    parse_moisture,
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
from .values import SensorReading

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SensorTypeDescriptor:
    """How to decode one type of live-data record."""

    type_id: int
    name: str
    description: str
    parser: ParserT
    field_names: tuple[str, ...]
    size: int

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(0x{self.type_id:02X}, {self.name})"

    def decode(self, data: bytes) -> list[SensorReading]:
        """Decode the record's bytes (sans type id) into named readings.

        Raise a ParserError if the record cannot be decoded.
        """

        values = self.parser(data)
        if len(values) != len(self.field_names):  # should never happen
            raise exc.ParserError(
                f"{self!r}: decoded {len(values)} values, "
                f"expected {len(self.field_names)}"
            )
        return [SensorReading(f, v) for f, v in zip(self.field_names, values)]


def _sensor(
    type_id: int,
    name: str,
    description: str,
    parser: ParserT,
    size: int,
    field_names: tuple[str, ...] | None = None,
) -> SensorTypeDescriptor:
    return SensorTypeDescriptor(
        type_id, name, description, parser, field_names or (name,), size
    )


def _build_registry() -> dict[int, SensorTypeDescriptor]:
    sensors = [
        _sensor(0x01, "indoor_temp", "Indoor temperature", parse_temp, 2),
        _sensor(0x02, "outdoor_temp", "Outdoor temperature", parse_temp, 2),
        _sensor(0x03, "dewpoint", "Dew point", parse_temp, 2),
        _sensor(0x04, "windchill", "Wind chill", parse_temp, 2),
        _sensor(0x05, "heat_index", "Heat index", parse_temp, 2),
        _sensor(0x06, "in_humidity", "Indoor humidity", parse_humidity, 1),
        _sensor(0x07, "out_humidity", "Outdoor humidity", parse_humidity, 1),
        _sensor(0x08, "abs_barometer", "Absolute pressure", parse_pressure, 2),
        _sensor(0x09, "rel_barometer", "Relative pressure", parse_pressure, 2),
        _sensor(0x0A, "wind_dir", "Wind direction", parse_direction, 2),
        _sensor(0x0B, "wind_speed", "Wind speed", parse_speed, 2),
        _sensor(0x0C, "gust_speed", "Gust speed", parse_speed, 2),
        _sensor(0x0D, "rain_event", "Rain event", parse_rain, 2),
        _sensor(0x0E, "rain_rate", "Rain rate", parse_rain, 2),
        _sensor(0x0F, "rain_gain", "Rain gain", parse_rain_gain, 2),
        _sensor(0x10, "rain_day", "Rain day", parse_rain, 2),
        _sensor(0x11, "rain_week", "Rain week", parse_rain, 2),
        _sensor(0x12, "rain_month", "Rain month", parse_rain_large, 4),
        _sensor(0x13, "rain_year", "Rain year", parse_rain_large, 4),
        _sensor(0x14, "rain_totals", "Rain totals", parse_rain_large, 4),
        _sensor(0x15, "light", "Light", parse_light, 4),
        _sensor(0x16, "uv", "UV", parse_uv, 2),
        _sensor(0x17, "uv_index", "UV index", parse_uv_index, 1),
        _sensor(0x18, "datetime", "Gateway datetime", parse_datetime, 6),
        _sensor(0x19, "day_maxwind", "Day max wind", parse_speed, 2),
        _sensor(0x2A, "pm25_1", "PM2.5 ch 1", parse_pm25, 2),
        # skip old battery info (old firmware)
        _sensor(0x4C, "legacy_battery", "Legacy battery block", parse_skip, 16),
        _sensor(0x60, "lightning_distance", "Lightning distance", parse_distance, 1),
        _sensor(0x61, "lightning_datetime", "Lightning time", parse_utc, 4),
        _sensor(0x62, "lightning_count", "Lightning count", parse_count, 4),
        _sensor(
            0x70,
            "wh45",
            "Air quality (WH45)",
            parse_wh45,
            WH45_SIZE,
            field_names=(
                "temp_wh45",
                "humid_wh45",
                "pm10_wh45",
                "pm10_avg_24h_wh45",
                "pm25_wh45",
                "pm25_avg_24h_wh45",
                "co2_wh45",
                "co2_avg_24h_wh45",
            ),
        ),
    ]

    for ch in range(1, 9):  # WH31, 8 channels
        sensors += [
            _sensor(0x19 + ch, f"temp_{ch}", f"Temp ch {ch}", parse_temp, 2),
            _sensor(0x21 + ch, f"humidity_{ch}", f"Humid ch {ch}", parse_humidity, 1),
        ]

    for ch in range(1, 9):  # WH51, 8 channels, interleaved
        sensors += [
            _sensor(
                0x29 + ch * 2, f"soil_temp_{ch}", f"Soil temp ch {ch}", parse_temp, 2
            ),
            _sensor(
                0x2A + ch * 2,
                f"soil_moist_{ch}",
                f"Soil moisture ch {ch}",
                parse_moisture,
                1,
            ),
        ]

    for ch in range(1, 5):  # WH41/WH43, 4 channels (ch 1 is 0x2A)
        sensors.append(
            _sensor(
                0x4C + ch, f"pm25_{ch}_avg_24h", f"PM2.5 ch {ch} 24h avg", parse_pm25, 2
            )
        )
        if ch > 1:
            sensors.append(
                _sensor(0x4F + ch, f"pm25_{ch}", f"PM2.5 ch {ch}", parse_pm25, 2)
            )

    for ch in range(1, 5):  # WH55, 4 channels
        sensors.append(_sensor(0x57 + ch, f"leak{ch}", f"Leak ch {ch}", parse_leak, 1))

    return {s.type_id: s for s in sorted(sensors, key=lambda s: s.type_id)}


SENSOR_REGISTRY: Final[Mapping[int, SensorTypeDescriptor]] = MappingProxyType(
    _build_registry()
)


def parse_live_data(
    data: bytes,
    registry: Mapping[int, SensorTypeDescriptor] = SENSOR_REGISTRY,
) -> list[list[SensorReading]]:
    """Decode a buffer of type-tagged records into groups of readings.

    Raise UnknownSensorType if any type id is not in the registry (the whole buffer
    is rejected, as the size of the unknown record, and so where the next record
    starts, is unknown). Records that can't be decoded are dropped.
    """

    result: list[list[SensorReading]] = []

    idx = 0
    while idx < len(data):
        type_id = data[idx]

        if (descriptor := registry.get(type_id)) is None:
            raise exc.UnknownSensorType(type_id, offset=idx)

        record = data[idx + 1 : idx + 1 + descriptor.size]  # may be short, if at end
        try:
            readings = descriptor.decode(record)
        except exc.ParserError as err:
            _LOGGER.debug("Dropped record %r at offset %s: %s", descriptor, idx, err)
        else:
            _LOGGER.debug("Decoded record at offset %s: %s", idx, readings)
            result.append(readings)

        idx += 1 + descriptor.size

    return result


def extract_live_data(response: bytes) -> bytes:
    """Return the concatenated records from a (validated) live-data response.

    The response is: FF FF 27 <size:2> <records> <checksum>, where size counts the
    command, size & checksum bytes (4) as well as the records.
    """

    if len(response) < 5:
        raise exc.ShortResponse(5, len(response))

    size = int.from_bytes(response[3:5], "big")
    if size < 4:
        raise exc.ProtocolError(f"Invalid size field in live data response: {size}")
    if len(response) < 5 + size - 4:
        raise exc.ShortResponse(5 + size - 4, len(response))

    return response[5 : 5 + size - 4]
