"""Transponder code → display name lookup."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import aiohttp

from pylaptime.exceptions import NameMappingError

_logger = logging.getLogger(__name__)


class NameMapping(Mapping[str, str]):
    """Read-only mapping of transponder codes to human-readable names."""

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        self._names: dict[str, str] = dict(names or {})

    def __getitem__(self, code: str) -> str:
        return self._names[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def display_name(self, code: str) -> str:
        """Return the mapped name, or *code* itself when unmapped."""
        return self._names.get(code, code)

    @classmethod
    def from_json(cls, text: str) -> NameMapping:
        """Build a mapping from a JSON object ``{"code": "name", ...}``."""
        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise NameMappingError(f"Name mapping is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise NameMappingError("Name mapping must be a JSON object")
        return cls({str(code): str(name) for code, name in data.items() if name is not None})


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _fetch_text(url: str, http_session: aiohttp.ClientSession | None) -> str:
    owns_session = http_session is None
    session = http_session or aiohttp.ClientSession()
    try:
        async with session.get(url) as resp:
            if resp.status != 200:
                raise NameMappingError(f"HTTP {resp.status} fetching name mapping from {url}")
            return await resp.text()
    except (aiohttp.ClientError, TimeoutError) as exc:
        raise NameMappingError(f"Fetching name mapping from {url} failed: {exc!r}") from exc
    except UnicodeDecodeError as exc:
        raise NameMappingError(f"Name mapping from {url} is not valid text: {exc}") from exc
    finally:
        if owns_session:
            await session.close()


async def fetch_name_mapping(
    source: str | Path,
    *,
    http_session: aiohttp.ClientSession | None = None,
) -> NameMapping:
    """Load a name mapping from a file path or ``http(s)://`` URL.

    Raises
    ------
    NameMappingError
        If the source cannot be read or does not hold a JSON object.
    """
    if isinstance(source, str) and _is_url(source):
        text = await _fetch_text(source, http_session)
    else:
        path = Path(source)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise NameMappingError(f"Reading name mapping {path} failed: {exc}") from exc
    return NameMapping.from_json(text)


async def load_name_mapping(
    source: str | Path | None,
    *,
    http_session: aiohttp.ClientSession | None = None,
) -> NameMapping:
    """Best-effort variant of :func:`fetch_name_mapping`.

    A missing source or any load failure yields an empty mapping, so every
    transponder is displayed by its raw code. The load is not retried.
    """
    if source is None:
        return NameMapping()
    try:
        mapping = await fetch_name_mapping(source, http_session=http_session)
    except NameMappingError as exc:
        _logger.warning("Name mapping unavailable, showing raw codes: %s", exc)
        return NameMapping()
    _logger.info("Loaded %d transponder names from %s", len(mapping), source)
    return mapping
