#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder."""

from __future__ import annotations

from enum import EnumCheck, IntEnum, StrEnum, verify
from typing import Final

__dev_mode__ = False  # NOTE: this is const.py
DEV_MODE = __dev_mode__

# used by frame...
HEADER: Final[bytes] = b"\xff\xff"
MAX_PAYLOAD_SIZE: Final[int] = 0xFF - 3  # the size byte also counts cmd, size & csum

# used by transport...
DEFAULT_PORT: Final[int] = 45000
DEFAULT_SOCKET_TIMEOUT: Final[float] = 2.0  # seconds, for each of connect/read/write
DEFAULT_MAX_TRIES: Final[int] = 3  # incl. the 1st attempt
DEFAULT_RETRY_WAIT: Final[float] = 2.0  # seconds, not after the final attempt
DEFAULT_BUFFER_SIZE: Final[int] = 1024  # bytes, per recv()

# used by the upper layer / CLI...
DEFAULT_POLL_INTERVAL: Final[int] = 60  # seconds

SZ_HOST: Final = "host"
SZ_PORT: Final = "port"
SZ_SOCKET_TIMEOUT: Final = "socket_timeout"
SZ_CONNECT_TIMEOUT: Final = "connect_timeout"
SZ_READ_TIMEOUT: Final = "read_timeout"
SZ_WRITE_TIMEOUT: Final = "write_timeout"
SZ_MAX_TRIES: Final = "max_tries"
SZ_RETRY_WAIT: Final = "retry_wait"

SZ_GATEWAYS: Final = "gateways"
SZ_POLL_INTERVAL: Final = "poll_interval"

# used by metadata...
SZ_TYPE_ID: Final = "type_id"
SZ_NAME: Final = "name"
SZ_DESCRIPTION: Final = "description"
SZ_ADDRESS: Final = "address"
SZ_BATTERY: Final = "battery"
SZ_BATTERY_STATUS: Final = "battery_status"
SZ_SIGNAL: Final = "signal"

SZ_UNKNOWN: Final = "unknown"

UNPOPULATED_ADDRESS: Final[int] = 0xFFFFFFFF  # an empty sensor slot
METADATA_RECORD_SIZE: Final[int] = 7  # type(1) + address(4) + battery(1) + signal(1)


@verify(EnumCheck.UNIQUE)
class Command(IntEnum):
    """The (subset of) gateway API commands used by this library."""

    READ_STATION_MAC = 0x26
    LIVE_DATA = 0x27
    READ_SENSOR_ID_NEW = 0x3C
    READ_FIRMWARE_VERSION = 0x50


# these responses have a 2-byte (big-endian) size field, the others have 1 byte
COMMANDS_WITH_LARGE_SIZE: Final[frozenset[Command]] = frozenset(
    (Command.LIVE_DATA, Command.READ_SENSOR_ID_NEW)
)


@verify(EnumCheck.UNIQUE)
class BatteryState(StrEnum):
    OK = "ok"
    LOW = "low"
    CONNECTED = "connected"
    UNKNOWN = "unknown"


@verify(EnumCheck.UNIQUE)
class ValueKind(StrEnum):
    """The closed set of value encodings a sensor reading can take."""

    EMPTY = "empty"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    PRESSURE = "pressure"
    SPEED = "speed"
    RAIN = "rain"
    RAIN_LARGE = "rain_large"
    DISTANCE = "distance"
    DIRECTION = "direction"
    UTC_TIME = "utc_time"
    COUNT = "count"
    GAIN = "gain"
    DATETIME = "datetime"
    PM10 = "pm10"
    PM25 = "pm25"
    CO2 = "co2"
    LIGHT = "light"
    UV = "uv"
    UV_INDEX = "uv_index"
    LEAK = "leak"
    MOISTURE = "moisture"
    BATTERY = "battery"


# these kinds are projected as-is, all other numeric kinds are rounded
INTEGER_KINDS: Final[frozenset[ValueKind]] = frozenset(
    (
        ValueKind.DISTANCE,
        ValueKind.DIRECTION,
        ValueKind.UTC_TIME,
        ValueKind.COUNT,
        ValueKind.CO2,
    )
)
