#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder.

Schema processor for protocol (lower) layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, TypedDict

import voluptuous as vol

from .const import (
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

_LOGGER = logging.getLogger(__name__)


#
# 1/2: Gateway (endpoint) configuration
class EndpointConfigT(TypedDict, total=False):
    host: str
    port: int
    socket_timeout: float
    connect_timeout: float | None
    read_timeout: float | None
    write_timeout: float | None
    max_tries: int
    retry_wait: float


SCH_TIMEOUT = vol.All(vol.Coerce(float), vol.Range(min=0.1, max=60))

SCH_ENDPOINT_CONFIG = vol.Schema(
    {
        vol.Required(SZ_HOST): vol.All(str, vol.Length(min=1)),
        vol.Required(SZ_PORT, default=DEFAULT_PORT): vol.All(
            int, vol.Range(min=1, max=65535)
        ),
        vol.Required(SZ_SOCKET_TIMEOUT, default=DEFAULT_SOCKET_TIMEOUT): SCH_TIMEOUT,
        vol.Optional(SZ_CONNECT_TIMEOUT, default=None): vol.Any(None, SCH_TIMEOUT),
        vol.Optional(SZ_READ_TIMEOUT, default=None): vol.Any(None, SCH_TIMEOUT),
        vol.Optional(SZ_WRITE_TIMEOUT, default=None): vol.Any(None, SCH_TIMEOUT),
        vol.Required(SZ_MAX_TRIES, default=DEFAULT_MAX_TRIES): vol.All(
            int, vol.Range(min=1, max=10)
        ),
        vol.Required(SZ_RETRY_WAIT, default=DEFAULT_RETRY_WAIT): vol.All(
            vol.Coerce(float), vol.Range(min=0, max=60)
        ),
    },
    extra=vol.PREVENT_EXTRA,
)


#
# 2/2: Frame log configuration
SZ_FILE_NAME: Final = "file_name"
SZ_FRAME_LOG: Final = "frame_log"
SZ_ROTATE_BACKUPS: Final = "rotate_backups"
SZ_ROTATE_BYTES: Final = "rotate_bytes"


class FrameLogConfigT(TypedDict):
    file_name: str
    rotate_backups: int
    rotate_bytes: int | None


def sch_frame_log_dict_factory(
    default_backups: int = 0,
) -> dict[vol.Required, vol.Any]:
    """Return a frame log dict with a configurable default rotation policy.

    usage:

    SCH_FRAME_LOG_7 = vol.Schema(
        sch_frame_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
    )
    """

    SCH_FRAME_LOG_CONFIG = vol.Schema(
        {
            vol.Optional(SZ_ROTATE_BACKUPS, default=default_backups): vol.All(
                int, vol.Range(min=0)
            ),
            vol.Optional(SZ_ROTATE_BYTES, default=None): vol.Any(
                None, vol.All(int, vol.Range(min=1))
            ),
        },
        extra=vol.PREVENT_EXTRA,
    )

    SCH_FRAME_LOG_NAME = vol.All(str, vol.Length(min=1))

    def NormaliseFrameLog(rotate_backups: int = 0) -> Callable[..., Any]:
        def normalise_frame_log(node_value: str) -> FrameLogConfigT:
            return {
                SZ_FILE_NAME: node_value,
                SZ_ROTATE_BACKUPS: rotate_backups,
                SZ_ROTATE_BYTES: None,
            }

        return normalise_frame_log

    return {  # SCH_FRAME_LOG_DICT
        vol.Required(SZ_FRAME_LOG, default=None): vol.Any(
            None,
            vol.All(
                SCH_FRAME_LOG_NAME,
                NormaliseFrameLog(rotate_backups=default_backups),
            ),
            SCH_FRAME_LOG_CONFIG.extend(
                {vol.Required(SZ_FILE_NAME): SCH_FRAME_LOG_NAME}
            ),
        )
    }


SCH_FRAME_LOG = vol.Schema(sch_frame_log_dict_factory(), extra=vol.PREVENT_EXTRA)
