"""Group extraction for repeated, numbered sub-configurations.

Purpose
-------
Discover a variable number of settings blocks sharing a key prefix, such as::

    dbms.mygroup.1.name=Bob Dylan
    dbms.mygroup.2.name=Joan Baez

and expose each block as a view that resolves ordinary settings relative to
its own namespace.

Contents
    - ``group``: declares a :class:`GroupSetting` for a prefix.
    - :class:`GroupSetting`: discovery phase, producing ordered ``ConfigGroup`` views.
    - :class:`ConfigGroup`: binding phase, one view per discovered index.
    - :class:`PrefixedLookup`: the thin delegating lookup behind each view.

System Role
-----------
Group settings sit next to plain settings in a schema and are resolved the
same way by :func:`lib_typed_settings.core.read_settings`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Sequence, TypeVar

from ..observability import log_debug, make_event
from .ports import ConfigLookup
from .setting import Setting

T = TypeVar("T")


class PrefixedLookup:
    """Expose the keys of *delegate* starting with *prefix*, with the prefix removed.

    Why
    ----
    Each group instance must see only its own namespace without copying the
    underlying configuration.

    Examples
    --------
    >>> from lib_typed_settings import MappingLookup
    >>> view = PrefixedLookup(MappingLookup({"db.1.host": "a", "db.2.host": "b"}), "db.2.")
    >>> view.get("host")
    'b'
    >>> view.find(re.compile("h.*"))
    [('host', 'b')]
    """

    def __init__(self, delegate: ConfigLookup, prefix: str) -> None:
        self._delegate = delegate
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def get(self, key: str) -> str | None:
        return self._delegate.get(self._prefix + key)

    def find(self, pattern: re.Pattern[str]) -> list[tuple[str, str]]:
        compiled = re.compile(pattern)
        scoped = re.compile(re.escape(self._prefix) + ".*", re.DOTALL)
        start = len(self._prefix)
        relative = ((key[start:], value) for key, value in self._delegate.find(scoped))
        return [(key, value) for key, value in relative if compiled.fullmatch(key)]

    def __repr__(self) -> str:
        return f"PrefixedLookup({self._prefix!r})"


@dataclass(frozen=True, slots=True)
class ConfigGroup:
    """One discovered instance of a group, e.g. ``dbms.mygroup.1000``.

    Attributes
    ----------
    prefix:
        Group prefix the instance was discovered under.
    index:
        Numeric index parsed from the key.
    key:
        Index segment exactly as written in the configuration (``"007"``).
    lookup:
        View resolving keys relative to ``<prefix>.<key>.``.
    """

    prefix: str
    index: int
    key: str
    lookup: PrefixedLookup = field(repr=False)

    def get(self, setting: Setting[T]) -> T | None:
        """Resolve *setting* inside this group's namespace."""

        return setting.resolve(self.lookup)

    def as_dict(self) -> dict[str, str]:
        """Return the raw entries of this instance keyed relative to the group."""

        return dict(self.lookup.find(re.compile(".+")))


@dataclass(frozen=True, slots=True)
class GroupSetting:
    """Setting-like declaration resolving to the ordered groups under ``name``.

    Examples
    --------
    >>> from lib_typed_settings import MANDATORY, STRING, MappingLookup, setting
    >>> players = GroupSetting("dbms.mygroup")
    >>> name = setting("name", STRING, MANDATORY)
    >>> lookup = MappingLookup({"dbms.mygroup.7.name": "Joan", "dbms.mygroup.1000.name": "Bob"})
    >>> [(g.index, g.get(name)) for g in players.resolve(lookup)]
    [(7, 'Joan'), (1000, 'Bob')]
    """

    name: str
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("group prefix must not be empty")
        object.__setattr__(self, "pattern", re.compile(re.escape(self.name) + r"\.(\d+)\.(.+)"))

    def resolve(self, lookup: ConfigLookup) -> list[ConfigGroup]:
        """Discover every group instance in *lookup*, ordered by numeric index.

        Side Effects
        ------------
        Emits a ``groups_discovered`` debug event listing the indices.
        """

        indices = _discover_indices(lookup.find(self.pattern), self.pattern)
        groups = [
            ConfigGroup(self.name, int(key), key, PrefixedLookup(lookup, f"{self.name}.{key}."))
            for key in indices
        ]
        log_debug("groups_discovered", **make_event(self.name, "group", {"indices": [g.key for g in groups]}))
        return groups

    def describe(self) -> str:
        return f"{self.name} is a group of settings keyed `{self.name}.<index>.<setting>`"


def _discover_indices(entries: Sequence[tuple[str, Any]], pattern: re.Pattern[str]) -> list[str]:
    """Return the distinct index segments in *entries* sorted numerically."""

    found: set[str] = set()
    for key, _ in entries:
        match = pattern.fullmatch(key)
        if match is not None:
            found.add(match.group(1))
    return sorted(found, key=lambda item: (int(item), item))


def group(prefix: str) -> GroupSetting:
    """Declare a group of numbered sub-configurations under *prefix*."""

    return GroupSetting(prefix)
