#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder."""

from __future__ import annotations

from .const import (
    DEFAULT_MAX_TRIES,
    DEFAULT_PORT,
    DEFAULT_RETRY_WAIT,
    DEFAULT_SOCKET_TIMEOUT,
    BatteryState,
    Command,
    ValueKind,
)
from .frame import (
    build_request,
    expected_length,
    parse_firmware_version,
    parse_station_mac,
    validate_response,
)
from .helpers import checksum
from .logger import FRAME_LOGGER, set_frame_logging
from .metadata import (
    SensorMetadataEntry,
    battery_state,
    metadata_to_dict,
    parse_sensor_ids,
    sensor_type_desc,
    sensor_type_name,
)
from .sensors import (
    SENSOR_REGISTRY,
    SensorTypeDescriptor,
    extract_live_data,
    parse_live_data,
)
from .transport import GatewayTransport
from .values import SensorReading, SensorValue, readings_to_dict, to_json_val
from .version import VERSION

__all__ = [
    "VERSION",
    "GatewayTransport",
    #
    "DEFAULT_MAX_TRIES",
    "DEFAULT_PORT",
    "DEFAULT_RETRY_WAIT",
    "DEFAULT_SOCKET_TIMEOUT",
    "FRAME_LOGGER",
    "SENSOR_REGISTRY",
    #
    "BatteryState",
    "Command",
    "SensorMetadataEntry",
    "SensorReading",
    "SensorTypeDescriptor",
    "SensorValue",
    "ValueKind",
    #
    "battery_state",
    "build_request",
    "checksum",
    "expected_length",
    "extract_live_data",
    "metadata_to_dict",
    "parse_firmware_version",
    "parse_live_data",
    "parse_sensor_ids",
    "parse_station_mac",
    "readings_to_dict",
    "sensor_type_desc",
    "sensor_type_name",
    "set_frame_logging",
    "to_json_val",
    "validate_response",
]
