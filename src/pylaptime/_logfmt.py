"""Helpers for safe logging of inbound payloads.

Messages arrive from a network peer and may be arbitrarily large or
binary. This module clips such values before they are emitted in warning
or debug logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def clip_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a clipped copy of *value* suitable for logs."""
    if _depth > 10:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated {len(value) - max_string} chars>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {str(k): clip_for_log(v, max_string=max_string, _depth=_depth + 1) for k, v in value.items()}

    if isinstance(value, Sequence):
        return [clip_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
