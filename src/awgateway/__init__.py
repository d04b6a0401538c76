#!/usr/bin/env python3
"""AW Gateway - a client for Ecowitt-style weather station gateways.

Works with the GW1000/GW1100/WH2650 (and compatible) gateways, via their LAN API.
"""

from __future__ import annotations

from awgateway_tx import (
    VERSION,
    BatteryState,
    SensorMetadataEntry,
    SensorReading,
    SensorValue,
    metadata_to_dict,
    readings_to_dict,
    set_frame_logging,
    to_json_val,
)

from .gateway import GatewayClient, GatewayEndpoint, connect, connect_endpoint

__all__ = [
    "VERSION",
    "GatewayClient",
    "GatewayEndpoint",
    "connect",
    "connect_endpoint",
    #
    "BatteryState",
    "SensorMetadataEntry",
    "SensorReading",
    "SensorValue",
    #
    "metadata_to_dict",
    "readings_to_dict",
    "set_frame_logging",
    "to_json_val",
]
