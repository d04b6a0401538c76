#!/usr/bin/env python3
"""AW Gateway - the sensor inventory (metadata), incl. battery states.

The inventory response (CMD_READ_SENSOR_ID_NEW) is a sequence of 7-byte records:

  type_id(1) address(4, big-endian) battery(1) signal(1)

Each physical sensor (a module, e.g. a WH31 channel) has its own slot, and empty slots
have an address of FFFFFFFF. Note that the type ids of the inventory are not those of
the live data (which are for fields, not modules).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from . import exceptions as exc
from .const import (
    METADATA_RECORD_SIZE,
    SZ_ADDRESS,
    SZ_BATTERY,
    SZ_BATTERY_STATUS,
    SZ_DESCRIPTION,
    SZ_NAME,
    SZ_SIGNAL,
    SZ_TYPE_ID,
    SZ_UNKNOWN,
    UNPOPULATED_ADDRESS,
    BatteryState,
)

_LOGGER = logging.getLogger(__name__)


# type_id: (name, description)
_FIXED_TYPES: dict[int, tuple[str, str]] = {
    0x00: ("wh65", "WH-65"),
    0x01: ("wh68", "WH-68"),
    0x02: ("wh80", "WH-80"),
    0x03: ("wh40", "WH-40"),
    0x04: ("wh25", "WH-25"),
    0x05: ("wh26", "WH-26"),
    0x1A: ("wh57", "WH-57"),
    0x27: ("wh45", "WH-45"),
}

# (first, last, base): the channel number is type_id - base
_CHANNEL_TYPES: dict[str, tuple[int, int, int]] = {
    "wh31": (0x06, 0x0D, 0x05),
    "wh51": (0x0E, 0x15, 0x0D),
    "wh41": (0x16, 0x19, 0x15),
    "wh55": (0x1B, 0x1E, 0x1A),
    "wh34": (0x1F, 0x25, 0x1E),
    "wh35": (0x28, 0x2F, 0x27),
}

# battery encodings, by type_id
_BINARY_BATTERY = frozenset((0x00, 0x04, *range(0x05, 0x0E)))  # 0 ok, 1 low
_INTEGER_BATTERY = frozenset((*range(0x16, 0x1F), 0x27))  # 0-5 level, 6 on DC
_VOLTAGE_BATTERY = frozenset(
    (*range(0x01, 0x04), *range(0x0E, 0x16), *range(0x1F, 0x27), *range(0x28, 0x31))
)


def _channel_type(type_id: int) -> tuple[str, int] | None:
    for family, (first, last, base) in _CHANNEL_TYPES.items():
        if first <= type_id <= last:
            return family, type_id - base
    return None


def sensor_type_name(type_id: int) -> str:
    """Return the sensor's name, e.g. 'wh31_ch1', or 'unknown'."""

    if type_id in _FIXED_TYPES:
        return _FIXED_TYPES[type_id][0]
    if result := _channel_type(type_id):
        return f"{result[0]}_ch{result[1]}"
    return SZ_UNKNOWN


def sensor_type_desc(type_id: int) -> str:
    """Return the sensor's description, e.g. 'WH-31 channel 1', or 'unknown'."""

    if type_id in _FIXED_TYPES:
        return _FIXED_TYPES[type_id][1]
    if result := _channel_type(type_id):
        return f"WH-{result[0][2:]} channel {result[1]}"
    return SZ_UNKNOWN


def battery_state(type_id: int, battery: float) -> BatteryState:
    """Classify the raw battery value, the encoding of which depends upon the type."""

    if type_id in _BINARY_BATTERY:
        _LOGGER.debug("Binary battery: id 0x%02X, %s", type_id, battery)
        if battery == 1:
            return BatteryState.LOW
        if battery == 0:
            return BatteryState.OK
        return BatteryState.UNKNOWN

    if type_id in _INTEGER_BATTERY:
        _LOGGER.debug("Integer battery: id 0x%02X, %s", type_id, battery)
        if battery <= 1:
            return BatteryState.LOW
        if battery <= 5:
            return BatteryState.OK
        if battery == 6:
            return BatteryState.CONNECTED
        return BatteryState.UNKNOWN

    if type_id in _VOLTAGE_BATTERY:
        _LOGGER.debug("Voltage battery: id 0x%02X, %s", type_id, battery)
        return BatteryState.LOW if battery <= 1.2 else BatteryState.OK

    return BatteryState.UNKNOWN


@dataclass(frozen=True)
class SensorMetadataEntry:
    """A sensor that is paired with the gateway."""

    type_id: int
    name: str
    description: str
    address: int
    battery: int
    battery_state: BatteryState
    signal: int

    @classmethod
    def from_record(
        cls, type_id: int, address: int, battery: int, signal: int
    ) -> SensorMetadataEntry:
        return cls(
            type_id=type_id,
            name=sensor_type_name(type_id),
            description=sensor_type_desc(type_id),
            address=address,
            battery=battery,
            battery_state=battery_state(type_id, battery),
            signal=signal,
        )

    @property
    def is_unknown(self) -> bool:
        return self.name == SZ_UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        return {
            SZ_TYPE_ID: self.type_id,
            SZ_NAME: self.name,
            SZ_DESCRIPTION: self.description,
            SZ_ADDRESS: f"{self.address:08X}",
            SZ_BATTERY: self.battery,
            SZ_BATTERY_STATUS: self.battery_state.value,
            SZ_SIGNAL: self.signal,
        }


def metadata_to_dict(entry: SensorMetadataEntry) -> dict[str, Any]:
    return entry.to_dict()


def parse_sensor_ids(response: bytes) -> dict[int, SensorMetadataEntry]:
    """Decode a (validated) sensor inventory response into entries, by address.

    The response is: FF FF 3C <size:2> <records> <checksum>. Unpopulated slots are
    omitted, as are the trailing bytes of an incomplete record.
    """

    result: dict[int, SensorMetadataEntry] = {}

    if not response:
        return result

    if len(response) < 5:
        raise exc.ShortResponse(5, len(response))

    size = int.from_bytes(response[3:5], "big")
    if size < 4:
        raise exc.ProtocolError(f"Invalid size field in sensor id response: {size}")
    if len(response) < 5 + size - 4:
        raise exc.ShortResponse(5 + size - 4, len(response))

    data = response[5 : 5 + size - 4]

    if extra := len(data) % METADATA_RECORD_SIZE:
        _LOGGER.warning("Sensor id data has %s trailing bytes, ignored", extra)

    for idx in range(0, len(data) - extra, METADATA_RECORD_SIZE):
        type_id = data[idx]
        address = int.from_bytes(data[idx + 1 : idx + 5], "big")
        battery = data[idx + 5]
        signal = data[idx + 6]

        _LOGGER.debug(
            "Metadata: type=0x%02X, address=%08X, battery=%s, signal=%s",
            type_id,
            address,
            battery,
            signal,
        )

        if address == UNPOPULATED_ADDRESS:  # the sensor slot is empty
            continue

        entry = SensorMetadataEntry.from_record(type_id, address, battery, signal)
        if entry.is_unknown:
            _LOGGER.warning("Found unknown sensor: %s", entry)

        result[address] = entry

    return result
