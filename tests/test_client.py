#!/usr/bin/env python3
"""AW Gateway - Test the CLI (its commands, and the poller)."""

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import call, patch

import pytest
from click.testing import CliRunner, Result

from awgateway_cli.client import cli
from awgateway_tx import FRAME_LOGGER

from .helpers import FIRMWARE, FakeGateway

CREATE_CONNECTION = "awgateway_tx.transport.socket.create_connection"
SLEEP = "awgateway_cli.client.time.sleep"  # is also the transport's (retry) sleep

HOST = "10.0.0.1"
BAD_HOST = "10.0.0.9"

NAME = "0927ecfabc7b9e"

METADATA = [
    {
        "type_id": 0x00,
        "name": "wh65",
        "description": "WH-65",
        "address": "0000C0DE",
        "battery": 0,
        "battery_status": "ok",
        "signal": 4,
    },
    {
        "type_id": 0x06,
        "name": "wh31_ch1",
        "description": "WH-31 channel 1",
        "address": "000000BA",
        "battery": 1,
        "battery_status": "low",
        "signal": 3,
    },
]

LIVE_DATA = {
    "indoor_temp": 21.5,
    "in_humidity": 55,
    "outdoor_temp": 20.0,
    "wind_dir": 270,
    "wind_speed": 2.1,
}


class FlakyGateway(FakeGateway):
    """A fake gateway that refuses any connection to BAD_HOST."""

    def __call__(self, address: tuple[str, int], timeout: float | None = None) -> Any:
        if address[0] == BAD_HOST:
            self.addresses.append(address)
            raise ConnectionRefusedError(111, "Connection refused")
        return super().__call__(address, timeout=timeout)


@pytest.fixture(autouse=True)
def reset_frame_logger() -> Generator[None, None, None]:
    yield
    for handler in list(FRAME_LOGGER.handlers):
        handler.close()
        FRAME_LOGGER.removeHandler(handler)
    FRAME_LOGGER.propagate = True
    FRAME_LOGGER.setLevel(logging.NOTSET)


def _invoke(args: list[str], gateway: FakeGateway | None = None) -> Result:
    with patch(CREATE_CONNECTION, side_effect=gateway or FakeGateway()):
        return CliRunner().invoke(cli, args)


def _json_docs(text: str) -> list[Any]:
    """Return the JSON documents that were echoed, one after the other."""

    decoder = json.JSONDecoder()
    result = []

    text = text.strip()
    while text:
        doc, idx = decoder.raw_decode(text)
        result.append(doc)
        text = text[idx:].strip()
    return result


def test_firmware() -> None:
    gateway = FakeGateway()
    result = _invoke(["firmware", HOST], gateway=gateway)

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"firmware": FIRMWARE}
    assert gateway.addresses == [(HOST, 45000)]


def test_station_id() -> None:
    result = _invoke(["station-id", HOST, "--port", "45001"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"mac": "09:27:EC:FA:BC:7B:9E", "name": NAME}


def test_metadata() -> None:
    result = _invoke(["metadata", HOST])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == METADATA


def test_live() -> None:
    result = _invoke(["live", HOST])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == LIVE_DATA


def test_command_fails() -> None:
    gateway = FlakyGateway()

    with patch(SLEEP) as sleep:
        result = _invoke(["live", BAD_HOST], gateway=gateway)

    assert result.exit_code == 1
    assert "Failed to obtain response to command 0x27 after 3 attempts" in result.stderr
    assert len(gateway.addresses) == 3
    assert sleep.call_args_list == [call(2.0)] * 2


def test_bad_port() -> None:
    result = _invoke(["firmware", HOST, "--port", "0"])

    assert result.exit_code == 2


def test_poll() -> None:
    gateway = FakeGateway()

    with patch(SLEEP) as sleep:
        result = _invoke(["poll", HOST, "-n", "2", "-i", "5"], gateway=gateway)

    assert result.exit_code == 0, result.output
    assert sleep.call_args_list == [call(5)]  # between rounds, but not after the last

    docs = _json_docs(result.stdout)
    assert len(docs) == 2
    assert docs[0] == {
        "name": NAME,
        "host": HOST,
        "firmware": FIRMWARE,
        "metadata": METADATA,
        "live_data": LIVE_DATA,
    }

    # the identity is fetched only once, the sensors & readings every round
    assert len(gateway.commands) == 2 + 2 * 2


def test_poll_skips_failed_gateway() -> None:
    gateway = FlakyGateway()

    with patch(SLEEP) as sleep:
        result = _invoke(["poll", BAD_HOST, HOST, "--count", "1"], gateway=gateway)

    assert result.exit_code == 0, result.output
    assert f"Gateway {BAD_HOST}:45000: " in result.stderr
    assert sleep.call_args_list == [call(2.0)] * 2  # only the retries

    docs = _json_docs(result.stdout)
    assert [d["host"] for d in docs] == [HOST]


def test_poll_no_gateways() -> None:
    result = _invoke(["poll"])

    assert result.exit_code == 2
    assert "No gateways" in result.stderr


def test_config_file(tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps(
            {
                "gateways": [{"host": HOST, "port": 45001, "max_tries": 1}],
                "poll_interval": 30,
            }
        )
    )

    gateway = FakeGateway()
    with patch(SLEEP) as sleep:
        result = _invoke(["-c", str(config_file), "poll", "-n", "2"], gateway=gateway)

    assert result.exit_code == 0, result.output
    assert sleep.call_args_list == [call(30)]
    assert set(gateway.addresses) == {(HOST, 45001)}

    # a host's config (in the file) is used by the single gateway commands too
    gateway = FakeGateway()
    result = _invoke(["-c", str(config_file), "firmware", HOST], gateway=gateway)

    assert result.exit_code == 0, result.output
    assert gateway.addresses == [(HOST, 45001)]


@pytest.mark.parametrize(
    "content",
    (
        "{not json",
        '{"poll_interval": 0}',
        '{"gateways": [{"port": 45000}]}',
    ),
)
def test_config_file_invalid(tmp_path: Path, content: str) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(content)

    result = _invoke(["-c", str(config_file), "firmware", HOST])

    assert result.exit_code == 2


def test_frame_log(tmp_path: Path) -> None:
    file_name = tmp_path / "frames.log"

    result = _invoke(["-o", str(file_name), "firmware", HOST])

    assert result.exit_code == 0, result.output
    assert file_name.exists()
    assert len(FRAME_LOGGER.handlers) == 1
