#!/usr/bin/env python3
"""AW Gateway - Helper functions."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, TypeAlias

_SchemaT: TypeAlias = dict[str, Any]


def deep_merge(src: _SchemaT, dst: _SchemaT, _dc: bool = False) -> _SchemaT:
    """Deep merge a src dict (precedent) into a dst dict and return the result.

    >>> s = {'gateways': ['10.0.0.1'], 'frame_log': {'file_name': 'a.log'}}
    >>> d = {'gateways': ['10.0.0.2'], 'frame_log': {'rotate_backups': 7}}
    >>> deep_merge(s, d) == {
    ...     'gateways': ['10.0.0.1'],
    ...     'frame_log': {'file_name': 'a.log', 'rotate_backups': 7},
    ... }
    True
    """

    new_dst = dst if _dc else deepcopy(dst)  # start with copy of dst, merge src into it
    for key, value in src.items():  # values are only: dict, list, value or None
        if isinstance(value, dict) and isinstance(new_dst.get(key), dict):
            deep_merge(value, new_dst[key], _dc=True)
        else:  # a list of gateways replaces, rather than extends, the other
            new_dst[key] = deepcopy(value)

    return new_dst
