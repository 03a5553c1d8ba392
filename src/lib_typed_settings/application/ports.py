"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the resolution engine consumes so settings can
be resolved against any raw key/value source without depending on concrete
implementations.

Contents
--------
* :class:`ConfigLookup` – exact lookup plus pattern discovery over raw strings.
* :class:`Resolvable` – anything a schema can hold (settings, group settings).

System Role
-----------
These protocols enforce Dependency Inversion. Adapters in
:mod:`lib_typed_settings.adapters.lookups` implement :class:`ConfigLookup`;
the composition root only talks to :class:`Resolvable`.
"""

from __future__ import annotations

import re
from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ConfigLookup(Protocol):
    """Raw configuration source consulted while resolving settings.

    Why
    ----
    The engine performs no I/O; files, environment variables, or in-memory maps
    are materialised by the caller and exposed through this port.

    Methods
    -------
    :meth:`get`
        Exact-key lookup returning the raw string or ``None``.
    :meth:`find`
        Every ``(key, value)`` pair whose key fully matches ``pattern``.
    """

    def get(self, key: str) -> str | None:
        """Return the raw value stored under *key* or ``None`` when absent."""

    def find(self, pattern: re.Pattern[str]) -> Sequence[tuple[str, str]]:
        """Return matching pairs; an empty sequence (never ``None``) when nothing matches."""


@runtime_checkable
class Resolvable(Protocol):
    """Named unit that turns a lookup into a typed value."""

    @property
    def name(self) -> str:
        """Configuration key (or key prefix) the unit is bound to."""

    def resolve(self, lookup: ConfigLookup) -> Any:
        """Return the typed value or raise ``InvalidSettingError``."""
