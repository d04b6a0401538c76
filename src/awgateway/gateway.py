#!/usr/bin/env python3
"""AW Gateway - the client (i.e. the gateway API, as used by a poller/publisher)."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from awgateway_tx import (
    SENSOR_REGISTRY,
    Command,
    GatewayTransport,
    SensorMetadataEntry,
    SensorReading,
    extract_live_data,
    parse_firmware_version,
    parse_live_data,
    parse_sensor_ids,
    parse_station_mac,
)
from awgateway_tx import exceptions as exc
from awgateway_tx.const import (
    DEFAULT_MAX_TRIES,
    DEFAULT_PORT,
    DEFAULT_RETRY_WAIT,
    DEFAULT_SOCKET_TIMEOUT,
    SZ_CONNECT_TIMEOUT,
    SZ_HOST,
    SZ_MAX_TRIES,
    SZ_PORT,
    SZ_READ_TIMEOUT,
    SZ_RETRY_WAIT,
    SZ_SOCKET_TIMEOUT,
    SZ_WRITE_TIMEOUT,
)
from awgateway_tx.schemas import SCH_ENDPOINT_CONFIG

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayEndpoint:
    """The address of a gateway, and how to talk to it."""

    host: str
    port: int = DEFAULT_PORT
    connect_timeout: float = DEFAULT_SOCKET_TIMEOUT
    read_timeout: float = DEFAULT_SOCKET_TIMEOUT
    write_timeout: float = DEFAULT_SOCKET_TIMEOUT
    max_tries: int = DEFAULT_MAX_TRIES
    retry_wait: float = DEFAULT_RETRY_WAIT

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> GatewayEndpoint:
        """Create an endpoint from a config dict (will raise vol.Invalid if bad).

        Any of the connect/read/write timeouts that are not set use socket_timeout.
        """

        config = SCH_ENDPOINT_CONFIG(config)
        timeout = config[SZ_SOCKET_TIMEOUT]

        return cls(
            host=config[SZ_HOST],
            port=config[SZ_PORT],
            connect_timeout=config[SZ_CONNECT_TIMEOUT] or timeout,
            read_timeout=config[SZ_READ_TIMEOUT] or timeout,
            write_timeout=config[SZ_WRITE_TIMEOUT] or timeout,
            max_tries=config[SZ_MAX_TRIES],
            retry_wait=config[SZ_RETRY_WAIT],
        )

    def transport(self) -> GatewayTransport:
        return GatewayTransport(
            self.host,
            self.port,
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            write_timeout=self.write_timeout,
            max_tries=self.max_tries,
            retry_wait=self.retry_wait,
        )


class GatewayClient:
    """The client of a single gateway, exposing its (read-only) API commands.

    Commands are sent one at a time. The identity of the gateway (its firmware version
    and MAC address) is fetched once, and then cached.
    """

    def __init__(self, endpoint: GatewayEndpoint) -> None:
        self.endpoint = endpoint
        self._transport = endpoint.transport()

        self._lock = threading.Lock()  # serialise the cache writes
        self._firmware: str | None = None
        self._mac: str | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.endpoint})"

    def firmware_version(self) -> str:
        """Return the firmware version, e.g. 'GW1000B_V1.7.3'."""
        response = self._transport.send_cmd(Command.READ_FIRMWARE_VERSION)
        return parse_firmware_version(response)

    def station_identifier(self) -> str:
        """Return the station identifier (a MAC), e.g. '09:27:EC:FA:BC:7B:9E'."""
        response = self._transport.send_cmd(Command.READ_STATION_MAC)
        return parse_station_mac(response)

    def fetch_metadata(self) -> dict[int, SensorMetadataEntry]:
        """Return the paired sensors, by address."""
        response = self._transport.send_cmd(Command.READ_SENSOR_ID_NEW)
        return parse_sensor_ids(response)

    def fetch_live_data(self) -> list[list[SensorReading]]:
        """Return the current readings, as groups (one per sensor record).

        Raise UnknownSensorType (and return nothing) if any record is of a type not
        in the registry.
        """
        response = self._transport.send_cmd(Command.LIVE_DATA)
        return parse_live_data(extract_live_data(response), SENSOR_REGISTRY)

    def refresh_identity(self) -> None:
        """Fetch the firmware version & station identifier, and cache them."""

        firmware = self.firmware_version()
        mac = self.station_identifier()

        with self._lock:
            self._firmware = firmware
            self._mac = mac

        _LOGGER.info("Gateway %s: %s, firmware %s", self.endpoint, mac, firmware)

    def _identity(self) -> tuple[str, str]:
        with self._lock:
            if self._firmware is not None and self._mac is not None:
                return self._firmware, self._mac
        self.refresh_identity()
        return self._firmware, self._mac  # type: ignore[return-value]

    @property
    def firmware(self) -> str:
        return self._identity()[0]

    @property
    def mac(self) -> str:
        return self._identity()[1]

    @property
    def name(self) -> str:
        """Return the gateway's stable identifier (its MAC, e.g. '0927ecfabc7b9e')."""
        return self.mac.replace(":", "").lower()


def connect(
    host: str,
    port: int = DEFAULT_PORT,
    *,
    socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
    connect_timeout: float | None = None,
    read_timeout: float | None = None,
    write_timeout: float | None = None,
    max_tries: int = DEFAULT_MAX_TRIES,
    retry_wait: float = DEFAULT_RETRY_WAIT,
) -> GatewayClient:
    """Return a client for the gateway, after fetching (and caching) its identity.

    Raise TransportConnectionError if the gateway's identity can't be fetched.
    """

    endpoint = GatewayEndpoint(
        host,
        port,
        connect_timeout=connect_timeout or socket_timeout,
        read_timeout=read_timeout or socket_timeout,
        write_timeout=write_timeout or socket_timeout,
        max_tries=max_tries,
        retry_wait=retry_wait,
    )
    return connect_endpoint(endpoint)


def connect_endpoint(endpoint: GatewayEndpoint) -> GatewayClient:
    """Return a client for the endpoint, after fetching (and caching) its identity."""

    client = GatewayClient(endpoint)
    try:
        client.refresh_identity()
    except (exc.TransportError, exc.ProtocolError) as err:
        raise exc.TransportConnectionError(
            f"Unable to fetch the identity of gateway {endpoint}: {err}"
        ) from err
    return client
