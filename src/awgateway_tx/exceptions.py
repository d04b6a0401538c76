#!/usr/bin/env python3
"""AW Gateway - exceptions within the frame/transport/parser layer."""

from __future__ import annotations


class _AwGatewayBaseException(Exception):
    """Base class for all awgateway_tx exceptions."""

    pass


class AwGatewayException(_AwGatewayBaseException):
    """Base class for all awgateway_tx exceptions."""

    HINT: None | str = None

    def __init__(self, *args: object):
        super().__init__(*args)
        self.message: str | None = args[0] if args else None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


########################################################################################
# Errors at the transport layer (sockets, retries)


class TransportError(AwGatewayException):
    """An error when sending or receiving frames (bytes)."""


class TransportConnectionError(TransportError):
    """The connection to the gateway was refused, reset or is unreachable."""

    HINT = "check the gateway's address & port, and that it is powered on"


class TransportTimeout(TransportError):
    """The gateway did not connect, accept or reply in time."""


class TransportExhausted(TransportError):
    """The command failed on every attempt."""

    def __init__(self, command: int, attempts: int) -> None:
        super().__init__(
            f"Failed to obtain response to command 0x{command:02X}"
            f" after {attempts} attempts"
        )
        self.command = command
        self.attempts = attempts


########################################################################################
# Errors at the protocol layer (framing, checksums)


class ProtocolError(AwGatewayException):
    """The response frame is not internally consistent."""


class ProtocolMismatch(ProtocolError):
    """The response echoes a different command to the one that was sent."""

    def __init__(self, expected: int, actual: int | None) -> None:
        super().__init__(
            f"Invalid command code in response: expected 0x{expected:02X}, "
            + ("received nothing" if actual is None else f"received 0x{actual:02X}")
        )
        self.expected = expected
        self.actual = actual


class ChecksumMismatch(ProtocolError):
    """The response's checksum does not match its contents."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Invalid checksum in response: expected 0x{expected:02X}, "
            f"received 0x{actual:02X}"
        )
        self.expected = expected
        self.actual = actual


class ShortResponse(ProtocolError):
    """The response has fewer bytes than one of its fields declares."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Response too short: expected at least {expected} bytes, got {actual}"
        )
        self.expected = expected
        self.actual = actual


class InvalidEncoding(ProtocolError):
    """A string field of the response is not valid UTF-8."""

    def __init__(self, data: bytes) -> None:
        super().__init__(f"Invalid UTF-8 sequence: {data.hex(' ')}")
        self.data = data


########################################################################################
# Errors at the parser layer (sensor records)


class ParserError(AwGatewayException):
    """The payload cannot be parsed without error."""


class UnknownSensorType(ParserError):
    """The live data has a sensor type that is not in the registry."""

    HINT = "the gateway's firmware may be newer than this library"

    def __init__(self, type_id: int, offset: int | None = None) -> None:
        super().__init__(
            f"Failed to find parser for type id 0x{type_id:02X}"
            + ("" if offset is None else f" (at offset {offset})")
        )
        self.type_id = type_id
        self.offset = offset


class DecodeLength(ParserError):
    """A sensor record's payload is not the size its decoder expects."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Invalid data length: expected {expected} bytes, got {actual}"
        )
        self.expected = expected
        self.actual = actual
