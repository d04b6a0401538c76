#!/usr/bin/env python3
"""A CLI for the awgateway library."""

from __future__ import annotations

import json
import logging
import sys
import time
from itertools import count
from typing import Any, Final

import click
import voluptuous as vol
from colorama import Fore, Style, init as colorama_init

from awgateway import (
    GatewayClient,
    GatewayEndpoint,
    metadata_to_dict,
    readings_to_dict,
    set_frame_logging,
)
from awgateway.helpers import deep_merge
from awgateway.schemas import SCH_GLOBAL_CONFIG
from awgateway_tx import FRAME_LOGGER, exceptions as exc
from awgateway_tx.const import SZ_GATEWAYS, SZ_HOST, SZ_POLL_INTERVAL, SZ_PORT
from awgateway_tx.logger import DEFAULT_DATEFMT, DEFAULT_FMT
from awgateway_tx.schemas import (
    SZ_FILE_NAME,
    SZ_FRAME_LOG,
    SZ_ROTATE_BACKUPS,
    SZ_ROTATE_BYTES,
)

# this is called after import colorlog to ensure its handlers wrap the correct streams
logging.basicConfig(level=logging.WARNING, format=DEFAULT_FMT, datefmt=DEFAULT_DATEFMT)

_LOGGER = logging.getLogger(__name__)


SZ_VERBOSE: Final = "verbose"

SZ_FIRMWARE: Final = "firmware"
SZ_LIVE_DATA: Final = "live_data"
SZ_MAC: Final = "mac"
SZ_METADATA: Final = "metadata"
SZ_NAME: Final = "name"

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

# the errors of a gateway that are reported, rather than raised
GATEWAY_ERRORS = (exc.TransportError, exc.ProtocolError, exc.ParserError)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def _echo_error(msg: str) -> None:
    click.echo(f"{Fore.RED}{msg}{Style.RESET_ALL}", err=True)


def _endpoint(
    lib_config: dict[str, Any], host: str, port: int | None
) -> GatewayEndpoint:
    """Return the endpoint of a host, using its config (if any) from the config file."""

    config: dict[str, Any] = next(
        (dict(g) for g in lib_config[SZ_GATEWAYS] if g[SZ_HOST] == host),
        {SZ_HOST: host},
    )
    if port is not None:
        config[SZ_PORT] = port
    return GatewayEndpoint.from_config(config)


def _start_frame_logging(lib_config: dict[str, Any], verbose: int) -> None:
    frame_log = lib_config[SZ_FRAME_LOG] or {}
    set_frame_logging(
        FRAME_LOGGER,
        cc_console=verbose > 1,
        file_name=frame_log.get(SZ_FILE_NAME),
        rotate_backups=frame_log.get(SZ_ROTATE_BACKUPS) or 0,
        rotate_bytes=frame_log.get(SZ_ROTATE_BYTES),
    )


# Args/Params for all commands
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-c", "--config-file", type=click.File("r"), help="a JSON config file")
@click.option("-o", "--frame-log", type=click.Path(), help="log frames to this file")
@click.option("-v", "--verbose", count=True, help="-v for info, -vv for frames/debug")
@click.pass_context
def cli(ctx: click.Context, config_file=None, frame_log=None, verbose: int = 0) -> None:
    """A CLI for the awgateway library."""

    if verbose:
        logging.getLogger().setLevel(logging.INFO if verbose == 1 else logging.DEBUG)

    lib_config: dict[str, Any] = {}
    if frame_log:
        lib_config[SZ_FRAME_LOG] = frame_log

    if config_file:
        try:
            file_config = json.load(config_file)
        except json.JSONDecodeError as err:
            raise click.BadParameter(f"not valid JSON: {err}", param_hint="-c") from err
        lib_config = deep_merge(lib_config, file_config)  # CLI takes precedence

    try:
        lib_config = SCH_GLOBAL_CONFIG(lib_config)
    except vol.Invalid as err:
        raise click.UsageError(f"Invalid config: {err}") from err

    _start_frame_logging(lib_config, verbose)

    ctx.obj = {SZ_VERBOSE: verbose}, lib_config


# Args/Params for a single gateway
class HostCommand(click.Command):  # client.py <command> <host> --port xxx
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.params.insert(0, click.Argument(("host",)))
        self.params.insert(
            1,
            click.Option(
                ("-p", "--port"),
                type=click.IntRange(1, 65535),
                help="the gateway's port (default is 45000)",
            ),
        )


def _client(obj: tuple[dict, dict], host: str, port: int | None) -> GatewayClient:
    _, lib_config = obj
    try:
        return GatewayClient(_endpoint(lib_config, host, port))
    except vol.Invalid as err:
        raise click.BadParameter(str(err), param_hint="HOST") from err


#
# 1/5: FIRMWARE
@click.command(cls=HostCommand)
@click.pass_obj
def firmware(obj, host: str, port: int | None = None) -> None:
    """Print the gateway's firmware version."""
    client = _client(obj, host, port)
    try:
        _echo_json({SZ_FIRMWARE: client.firmware_version()})
    except GATEWAY_ERRORS as err:
        raise click.ClickException(str(err)) from err


#
# 2/5: STATION ID
@click.command("station-id", cls=HostCommand)
@click.pass_obj
def station_id(obj, host: str, port: int | None = None) -> None:
    """Print the gateway's station identifier (its MAC address)."""
    client = _client(obj, host, port)
    try:
        mac = client.station_identifier()
    except GATEWAY_ERRORS as err:
        raise click.ClickException(str(err)) from err
    _echo_json({SZ_MAC: mac, SZ_NAME: mac.replace(":", "").lower()})


#
# 3/5: METADATA
@click.command(cls=HostCommand)
@click.pass_obj
def metadata(obj, host: str, port: int | None = None) -> None:
    """Print the gateway's paired sensors (type, battery & signal)."""
    client = _client(obj, host, port)
    try:
        sensors = client.fetch_metadata()
    except GATEWAY_ERRORS as err:
        raise click.ClickException(str(err)) from err
    _echo_json([metadata_to_dict(s) for s in sensors.values()])


#
# 4/5: LIVE DATA
@click.command(cls=HostCommand)
@click.pass_obj
def live(obj, host: str, port: int | None = None) -> None:
    """Print the gateway's current readings."""
    client = _client(obj, host, port)
    try:
        readings = client.fetch_live_data()
    except GATEWAY_ERRORS as err:
        raise click.ClickException(str(err)) from err
    _echo_json(readings_to_dict(readings))


#
# 5/5: POLL (all gateways, periodically)
def poll_gateway(client: GatewayClient) -> dict[str, Any]:
    """Return a snapshot of a gateway: its identity, sensors and readings."""

    return {
        SZ_NAME: client.name,
        SZ_HOST: client.endpoint.host,
        SZ_FIRMWARE: client.firmware,
        SZ_METADATA: [metadata_to_dict(s) for s in client.fetch_metadata().values()],
        SZ_LIVE_DATA: readings_to_dict(client.fetch_live_data()),
    }


@click.command()
@click.argument("hosts", nargs=-1)
@click.option("-n", "--count", "rounds", type=click.IntRange(min=1), help="then stop")
@click.option("-i", "--interval", type=click.IntRange(min=1), help="in seconds")
@click.pass_obj
def poll(obj, hosts: tuple[str, ...], rounds: int | None = None, interval=None) -> None:
    """Poll the gateways (or those in the config file) for sensors & readings.

    A gateway that fails is reported, then skipped until the next round.
    """

    _, lib_config = obj

    try:
        endpoints = (
            [_endpoint(lib_config, h, None) for h in hosts]
            if hosts
            else [GatewayEndpoint.from_config(g) for g in lib_config[SZ_GATEWAYS]]
        )
    except vol.Invalid as err:
        raise click.BadParameter(str(err), param_hint="HOSTS") from err

    if not endpoints:
        raise click.UsageError("No gateways: specify HOSTS, or use a config file")

    clients = [GatewayClient(e) for e in endpoints]
    interval = interval or lib_config[SZ_POLL_INTERVAL]

    for idx in count(1):
        for client in clients:
            try:
                _echo_json(poll_gateway(client))
            except GATEWAY_ERRORS as err:
                _LOGGER.debug("Gateway %s: poll failed: %r", client.endpoint, err)
                _echo_error(f"Gateway {client.endpoint}: {err}")

        if rounds is not None and idx >= rounds:
            break
        time.sleep(interval)


cli.add_command(firmware)
cli.add_command(station_id)
cli.add_command(metadata)
cli.add_command(live)
cli.add_command(poll)


def main() -> None:
    colorama_init()

    try:
        cli(standalone_mode=False)
    except click.ClickException as err:
        err.show()
        sys.exit(err.exit_code)
    except click.Abort:
        sys.exit(1)
    except KeyboardInterrupt:
        print("\r\nclient.py: stopped: ended via: KeyboardInterrupt")


if __name__ == "__main__":
    main()
