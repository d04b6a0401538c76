#!/usr/bin/env python3
"""AW Gateway - helpers for the test suite."""

import logging
import warnings
from pathlib import Path
from typing import Any

from awgateway_tx.const import COMMANDS_WITH_LARGE_SIZE, Command
from awgateway_tx.helpers import checksum

warnings.filterwarnings("ignore", category=DeprecationWarning)

logging.disable(logging.WARNING)  # usu. WARNING


TEST_DIR = Path(__file__).resolve().parent

# a gateway's identity, as used by the fake responses below
FIRMWARE = "GW1000B_V1.7.3"
MAC_BYTES = bytes.fromhex("0927ECFABC7B9E")  # incl. the size byte


def assert_raises(exception: type[Exception], fnc: Any, *args: Any) -> None:
    try:
        fnc(*args)
    except exception:
        pass
    else:
        assert False, f"{fnc.__name__}{args} did not raise {exception.__name__}"


def make_response(command: int, payload: bytes) -> bytes:
    """Return a (valid) response frame, with a 1 or 2-byte size field as required."""

    if command in COMMANDS_WITH_LARGE_SIZE:
        body = bytes((command,)) + (len(payload) + 4).to_bytes(2, "big") + payload
    else:
        body = bytes((command, len(payload) + 3)) + payload
    return b"\xff\xff" + body + bytes((checksum(body),))


def make_metadata_record(
    type_id: int, address: int, battery: int, signal: int
) -> bytes:
    return bytes((type_id,)) + address.to_bytes(4, "big") + bytes((battery, signal))


class FakeSocket:
    """A stand-in for a connected socket, that replies with the given chunks."""

    def __init__(self, *chunks: bytes, recv_exc: Exception | None = None) -> None:
        self.chunks = list(chunks)
        self.recv_exc = recv_exc

        self.sent = b""
        self.timeouts: list[float] = []
        self.is_shutdown = False
        self.is_closed = False

    def settimeout(self, value: float) -> None:
        self.timeouts.append(value)

    def sendall(self, data: bytes) -> None:
        self.sent += data

    def recv(self, bufsize: int) -> bytes:
        if self.recv_exc is not None:
            raise self.recv_exc
        if not self.chunks:
            return b""  # the peer has closed the connection
        return self.chunks.pop(0)[:bufsize]

    def shutdown(self, how: int) -> None:
        self.is_shutdown = True

    def close(self) -> None:
        self.is_closed = True


class FakeGatewaySocket(FakeSocket):
    """A socket that replies to a command with the gateway's response to it."""

    def __init__(self, gateway: "FakeGateway") -> None:
        super().__init__()
        self.gateway = gateway

    def sendall(self, data: bytes) -> None:
        super().sendall(data)
        self.gateway.commands.append(data[2])
        self.chunks = [self.gateway.responses[data[2]]]


class FakeGateway:
    """A stand-in for socket.create_connection(), that connects to a fake gateway."""

    def __init__(self, responses: dict[int, bytes] | None = None) -> None:
        self.responses = default_responses() | (responses or {})
        self.commands: list[int] = []
        self.addresses: list[tuple[str, int]] = []

    def __call__(self, address: tuple[str, int], timeout: float | None = None) -> Any:
        self.addresses.append(address)
        return FakeGatewaySocket(self)


def default_responses() -> dict[int, bytes]:
    """Return the (valid) responses of a gateway, to each of the API commands."""

    return {
        Command.READ_FIRMWARE_VERSION: make_response(
            Command.READ_FIRMWARE_VERSION,
            bytes((len(FIRMWARE),)) + FIRMWARE.encode(),
        ),
        Command.READ_STATION_MAC: make_response(
            Command.READ_STATION_MAC, MAC_BYTES[1:]
        ),
        Command.READ_SENSOR_ID_NEW: make_response(
            Command.READ_SENSOR_ID_NEW,
            make_metadata_record(0x00, 0x0000C0DE, 0, 4)  # wh65
            + make_metadata_record(0x06, 0x000000BA, 1, 3)  # wh31_ch1
            + make_metadata_record(0x0E, 0xFFFFFFFF, 0x1F, 0),  # an empty slot
        ),
        Command.LIVE_DATA: make_response(
            Command.LIVE_DATA,
            bytes.fromhex(
                "0100D7"  # indoor_temp: 21.5
                "0637"  # in_humidity: 55
                "0200C8"  # outdoor_temp: 20.0
                "0A010E"  # wind_dir: 270
                "0B0015"  # wind_speed: 2.1
            ),
        ),
    }
