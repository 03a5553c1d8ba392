"""Layered lookup combining several sources with precedence.

Purpose
-------
Stack lookups (for example packaged defaults, a site file already parsed into a
mapping, then environment variables) so the highest layer defining a key wins,
while remembering which layer supplied each key.

Contents
    - :class:`LayeredLookup`: the combinator.

System Role
-----------
Layers are given from lowest to highest precedence, the same order the merge
policy of layered configuration readers uses. Discovery via ``find`` merges all
layers so group instances may be split across sources.
"""

from __future__ import annotations

import re
from typing import Iterable

from ...application.ports import ConfigLookup


class LayeredLookup:
    """Resolve keys against named layers, last layer first.

    Examples
    --------
    >>> from lib_typed_settings import MappingLookup
    >>> lookup = LayeredLookup([
    ...     ("defaults", MappingLookup({"dbms.port": "7474", "dbms.host": "localhost"})),
    ...     ("env", MappingLookup({"dbms.port": "7687"})),
    ... ])
    >>> lookup.get("dbms.port"), lookup.origin("dbms.port")
    ('7687', 'env')
    >>> lookup.get("dbms.host"), lookup.origin("dbms.host")
    ('localhost', 'defaults')
    """

    def __init__(self, layers: Iterable[tuple[str, ConfigLookup]]) -> None:
        self._layers: tuple[tuple[str, ConfigLookup], ...] = tuple(layers)

    @property
    def layers(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._layers)

    def get(self, key: str) -> str | None:
        for _, layer in reversed(self._layers):
            value = layer.get(key)
            if value is not None:
                return value
        return None

    def origin(self, key: str) -> str | None:
        """Return the name of the layer supplying *key*, or ``None`` when absent."""

        for name, layer in reversed(self._layers):
            if layer.get(key) is not None:
                return name
        return None

    def find(self, pattern: re.Pattern[str]) -> list[tuple[str, str]]:
        merged: dict[str, str] = {}
        for _, layer in self._layers:
            for key, value in layer.find(pattern):
                merged[key] = value
        return list(merged.items())
