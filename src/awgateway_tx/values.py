#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder.

The typed values produced by the decoders, and their canonical projection to
JSON-compatible scalars.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeAlias

from .const import INTEGER_KINDS, BatteryState, ValueKind
from .helpers import round_half_away

_LOGGER = logging.getLogger(__name__)


JsonScalarT: TypeAlias = float | int | str | None
RawValueT: TypeAlias = float | int | bytes | BatteryState | None


@dataclass(frozen=True)
class SensorValue:
    """A value, tagged with its kind (i.e. how it was encoded)."""

    kind: ValueKind
    value: RawValueT = None

    def __repr__(self) -> str:
        if self.kind == ValueKind.EMPTY:
            return "SensorValue(empty)"
        return f"SensorValue({self.kind}={self.value!r})"

    @classmethod
    def empty(cls) -> SensorValue:
        return cls(ValueKind.EMPTY)


@dataclass(frozen=True)
class SensorReading:
    """A value with the name of the field it was decoded for."""

    field: str
    value: SensorValue

    @property
    def name(self) -> str:
        return self.field

    def to_json_val(self) -> JsonScalarT:
        return to_json_val(self.value)


def _datetime_str(value: bytes) -> str:
    return "dt:" + " ".join(f"{b:02x}" for b in value)


def to_json_val(value: SensorValue) -> JsonScalarT:
    """Project a value to the scalar used when publishing it.

    Floats are rounded to 2 decimal places (ties away from zero), integers are
    left unchanged, a datetime becomes 'dt:xx xx xx xx xx xx' and a battery state
    becomes its name. An empty (placeholder) value becomes None.
    """

    match value.kind:
        case ValueKind.EMPTY:
            return None
        case ValueKind.DATETIME:
            return _datetime_str(value.value)  # type: ignore[arg-type]
        case ValueKind.BATTERY:
            return BatteryState(value.value).value  # type: ignore[arg-type]
        case kind if kind in INTEGER_KINDS:
            return value.value  # type: ignore[return-value]
        case _:
            return round_half_away(value.value)  # type: ignore[arg-type]


def readings_to_dict(groups: Iterable[Iterable[SensorReading]]) -> dict[str, Any]:
    """Flatten reading groups into a single {field: projected value} dict.

    Placeholder readings (e.g. of legacy blocks) are omitted.
    """

    result: dict[str, Any] = {}
    for group in groups:
        for reading in group:
            if reading.value.kind == ValueKind.EMPTY:
                continue
            if reading.field in result:
                _LOGGER.debug("Field %s is duplicated, last value kept", reading.field)
            result[reading.field] = to_json_val(reading.value)
    return result
