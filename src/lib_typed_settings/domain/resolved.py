"""Domain-level value object holding a resolved schema.

Purpose
-------
Carry the typed values produced by :func:`lib_typed_settings.core.read_settings`
together with provenance describing where each raw value came from. The module
contains no I/O and no resolution logic.

Contents
--------
* :class:`SourceInfo` – typed metadata describing the origin of one value.
* :class:`ResolvedSettings` – immutable ``Mapping`` from setting name to value.
* :data:`EMPTY_SETTINGS` – canonical empty instance.
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping, TypedDict


class SourceInfo(TypedDict):
    """Describe the origin of a resolved setting.

    Attributes
    ----------
    setting:
        Name of the resolved setting (or group prefix).
    source:
        ``"explicit"``, ``"inherited"``, ``"default"``, ``"unset"`` or ``"group"``.
    key:
        Lookup key or default owner that supplied the raw text, if any.
    """

    setting: str
    source: str
    key: str | None


@dataclass(frozen=True, slots=True)
class ResolvedSettings(MappingABC[str, Any]):
    """Immutable mapping of setting names to their typed values.

    Why
    ----
    Components receive one read-only object instead of resolving settings ad
    hoc, and tooling can explain each value through :meth:`origin`.

    Examples
    --------
    >>> resolved = ResolvedSettings(
    ...     {"dbms.port": 7474},
    ...     {"dbms.port": {"setting": "dbms.port", "source": "default", "key": "dbms.port"}},
    ... )
    >>> resolved["dbms.port"]
    7474
    >>> resolved.origin("dbms.port")["source"]
    'default'
    >>> resolved.origin("missing") is None
    True
    """

    _values: Mapping[str, Any]
    _meta: Mapping[str, SourceInfo]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_values", MappingProxyType(dict(self._values)))
        object.__setattr__(self, "_meta", MappingProxyType(dict(self._meta)))

    def __getitem__(self, key: Any) -> Any:
        """Return the value for a setting name or a setting object.

        Examples
        --------
        >>> from lib_typed_settings import INTEGER, setting
        >>> port = setting("dbms.port", INTEGER, "7474")
        >>> ResolvedSettings({"dbms.port": 7474}, {})[port]
        7474
        """

        return self._values[_key_of(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return _key_of(key) in self._values

    def origin(self, key: Any) -> SourceInfo | None:
        """Return provenance for a setting name (or setting) or ``None`` when unknown."""

        return self._meta.get(_key_of(key))

    def as_dict(self) -> dict[str, Any]:
        """Return a shallow mutable copy of the values."""

        return dict(self._values)


def _key_of(key: Any) -> Any:
    """Accept setting objects wherever a setting name is expected."""

    return getattr(key, "name", key)


EMPTY_SETTINGS = ResolvedSettings(MappingProxyType({}), MappingProxyType({}))
"""Canonical empty result returned when a schema declares no settings."""
