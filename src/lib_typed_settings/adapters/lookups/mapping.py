"""In-memory lookup adapter.

Purpose
-------
Implement the :class:`lib_typed_settings.application.ports.ConfigLookup`
protocol over a plain mapping. This is the adapter tests, notebooks, and
callers that already parsed their configuration files reach for first.

Contents
--------
* :class:`MappingLookup` – immutable snapshot of ``key -> raw string`` pairs.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Iterator, Mapping


class MappingLookup:
    """Serve raw values from a snapshot of *mapping*.

    Why
    ----
    Resolution must not observe later mutations of the caller's dictionary, so
    the entries are copied once and wrapped read-only.

    What
    ----
    Values that are not strings are stored as ``str(value)`` so callers can
    feed numbers or booleans loaded from structured files.

    Examples
    --------
    >>> lookup = MappingLookup({"dbms.port": 7474, "dbms.host": "localhost"})
    >>> lookup.get("dbms.port")
    '7474'
    >>> lookup.get("missing") is None
    True
    >>> lookup.find(re.compile(r"dbms\\.h.*"))
    [('dbms.host', 'localhost')]
    """

    def __init__(self, mapping: Mapping[str, object] | None = None) -> None:
        entries = {key: _as_raw(value) for key, value in (mapping or {}).items() if value is not None}
        self._entries: Mapping[str, str] = MappingProxyType(entries)

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def find(self, pattern: re.Pattern[str]) -> list[tuple[str, str]]:
        compiled = re.compile(pattern)
        return [(key, value) for key, value in self._entries.items() if compiled.fullmatch(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MappingLookup({len(self._entries)} entries)"


def _as_raw(value: object) -> str:
    """Return *value* as raw configuration text."""

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
