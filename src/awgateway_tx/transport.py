#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder.

Operates at the transport layer: sends a command frame to a gateway (via TCP), and
receives its response frame.

Each attempt uses its own connection, which is closed once the attempt is complete
(whether it succeeded or not): there is no connection reuse, and no pipelining.

  Connecting -> Sending -> Receiving -> Validating -> (success)
      ^                                      |
      +---- (retry_wait, if tries remain) ---+
"""

from __future__ import annotations

import contextlib
import logging
import socket
import time

from . import exceptions as exc
from .const import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_MAX_TRIES,
    DEFAULT_PORT,
    DEFAULT_RETRY_WAIT,
    DEFAULT_SOCKET_TIMEOUT,
)
from .frame import build_request, describe, expected_length, validate_response
from .logger import SZ_RCVD, SZ_SENT, log_frame

_LOGGER = logging.getLogger(__name__)


class GatewayTransport:
    """A (synchronous) TCP transport to a single gateway."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        connect_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        read_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        write_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        max_tries: int = DEFAULT_MAX_TRIES,
        retry_wait: float = DEFAULT_RETRY_WAIT,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        if max_tries < 1:
            raise ValueError(f"max_tries must be at least 1, not {max_tries}")

        self.host = host
        self.port = port

        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.max_tries = max_tries
        self.retry_wait = retry_wait
        self._buffer_size = buffer_size

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.peer})"

    @property
    def peer(self) -> str:
        return f"{self.host}:{self.port}"

    def send_cmd(self, command: int, payload: bytes = b"") -> bytes:
        """Send a command to the gateway and return its (validated) response.

        Every failure (incl. a bad response) is retried, up to max_tries attempts.
        Raise TransportExhausted if none of the attempts succeeded.
        """

        frame = build_request(command, payload)
        last_err: exc.AwGatewayException | None = None

        for attempt in range(1, self.max_tries + 1):
            try:
                return self._exchange(command, frame)
            except (exc.TransportError, exc.ProtocolError) as err:
                last_err = err
                _LOGGER.warning(
                    "%s: attempt %s of %s failed for %s: %s",
                    self.peer,
                    attempt,
                    self.max_tries,
                    describe(frame),
                    err,
                )

            if attempt < self.max_tries:
                time.sleep(self.retry_wait)

        raise exc.TransportExhausted(command, self.max_tries) from last_err

    def _exchange(self, command: int, frame: bytes) -> bytes:
        """Make a single attempt at a command/response exchange."""

        sock = self._connect()
        try:
            self._write(sock, frame)
            response = self._read(sock, command)
        finally:
            self._close(sock)

        validate_response(response, command)
        return response

    def _connect(self) -> socket.socket:
        try:
            return socket.create_connection(
                (self.host, self.port), timeout=self.connect_timeout
            )
        except TimeoutError as err:
            raise exc.TransportTimeout(
                f"Timed out connecting to {self.peer}: {err}"
            ) from err
        except OSError as err:  # refused, unreachable, DNS failures, etc.
            raise exc.TransportConnectionError(
                f"Unable to connect to {self.peer}: {err}"
            ) from err

    def _write(self, sock: socket.socket, frame: bytes) -> None:
        try:
            sock.settimeout(self.write_timeout)
            sock.sendall(frame)
        except TimeoutError as err:
            raise exc.TransportTimeout(
                f"Timed out writing to {self.peer}: {err}"
            ) from err
        except OSError as err:
            raise exc.TransportConnectionError(
                f"Unable to write to {self.peer}: {err}"
            ) from err

        log_frame(SZ_SENT, self.peer, frame)

    def _read(self, sock: socket.socket, command: int) -> bytes:
        """Read until the response is as long as its size field says it is.

        Stop early if the gateway closes the connection (validation will then fail).
        """

        buffer = b""
        try:
            sock.settimeout(self.read_timeout)
            while True:
                size = expected_length(buffer, command)
                if size is not None and len(buffer) >= size:
                    buffer = buffer[:size]
                    break
                if not (chunk := sock.recv(self._buffer_size)):
                    break
                buffer += chunk
        except TimeoutError as err:
            raise exc.TransportTimeout(
                f"Timed out reading from {self.peer} (after {len(buffer)} bytes)"
            ) from err
        except OSError as err:
            raise exc.TransportConnectionError(
                f"Unable to read from {self.peer}: {err}"
            ) from err

        log_frame(SZ_RCVD, self.peer, buffer)
        return buffer

    def _close(self, sock: socket.socket) -> None:
        with contextlib.suppress(OSError):  # e.g. the peer has already closed it
            sock.shutdown(socket.SHUT_RDWR)
        sock.close()
