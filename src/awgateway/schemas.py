#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder.

Schema processor for the upper layer (the client & poller).
"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from awgateway_tx.const import (
    DEFAULT_POLL_INTERVAL,
    SZ_GATEWAYS,
    SZ_HOST,
    SZ_POLL_INTERVAL,
)
from awgateway_tx.schemas import (
    SCH_ENDPOINT_CONFIG,
    EndpointConfigT,
    sch_frame_log_dict_factory,
)

_LOGGER = logging.getLogger(__name__)


def _normalise_gateway(node_value: str | dict[str, Any]) -> EndpointConfigT:
    """Convert a host (str) into an endpoint dict, then validate it."""
    if isinstance(node_value, str):
        node_value = {SZ_HOST: node_value.strip()}
    return SCH_ENDPOINT_CONFIG(node_value)  # type: ignore[no-any-return]


def normalise_gateways(node_value: str | list[Any]) -> list[EndpointConfigT]:
    """Convert a comma-separated string (or list) of gateways into endpoint dicts.

    Gateways are de-duplicated by host, the first of any duplicates is kept.
    """

    if isinstance(node_value, str):
        node_value = [h for h in node_value.split(",") if h.strip()]

    result: dict[str, EndpointConfigT] = {}
    for gwy in node_value:
        config = _normalise_gateway(gwy)
        if config[SZ_HOST] in result:
            _LOGGER.warning("Gateway %s is duplicated, ignoring", config[SZ_HOST])
            continue
        result[config[SZ_HOST]] = config
    return list(result.values())


SCH_GATEWAYS = vol.All(
    vol.Any(str, [vol.Any(str, dict)]),
    normalise_gateways,
)

SCH_GLOBAL_CONFIG = vol.Schema(
    {
        vol.Required(SZ_GATEWAYS, default=list): SCH_GATEWAYS,
        vol.Required(SZ_POLL_INTERVAL, default=DEFAULT_POLL_INTERVAL): vol.All(
            int, vol.Range(min=1)
        ),
    },
    extra=vol.PREVENT_EXTRA,
).extend(sch_frame_log_dict_factory(default_backups=0))
