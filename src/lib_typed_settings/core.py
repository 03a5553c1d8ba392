"""Composition root for ``lib_typed_settings``.

Purpose
-------
Provide the single entry point that resolves a whole schema (plain settings and
group settings) against one lookup, collecting every failure before reporting.

Contents
--------
* :func:`read_settings` – resolve a schema into :class:`ResolvedSettings`.
* :func:`_resolve_with_origin` – resolves one entry together with its provenance.

System Role
-----------
This module connects the application layer (settings, groups, resolution) with
the domain value object while emitting structured observability signals. It is
the canonical place to change how schema-wide failures are aggregated.
"""

from __future__ import annotations

from typing import Any, Iterable

from .application.groups import GroupSetting
from .application.ports import ConfigLookup, Resolvable
from .application.setting import Setting
from .domain.errors import InvalidSettingError, ValidationError
from .domain.resolved import EMPTY_SETTINGS, ResolvedSettings, SourceInfo
from .observability import log_info, make_event


def read_settings(lookup: ConfigLookup, settings: Iterable[Resolvable]) -> ResolvedSettings:
    """Resolve every entry of *settings* against *lookup*.

    Why
    ----
    Applications validate their configuration once at start-up and want to see
    every misconfigured key at the same time.

    What
    ----
    Resolves each setting in declaration order. Failures are collected; if any
    occurred a single :class:`ValidationError` listing all of them is raised.

    Parameters
    ----------
    lookup:
        Raw key/value source.
    settings:
        Settings and group settings; names must be unique.

    Returns
    -------
    ResolvedSettings
        Immutable mapping from setting name to value, with provenance.

    Side Effects
    ------------
    Emits a ``settings_read`` info event with the number of resolved settings.

    Examples
    --------
    >>> from lib_typed_settings import DURATION, INTEGER, MappingLookup, setting
    >>> schema = [setting("dbms.port", INTEGER, "7474"), setting("dbms.timeout", DURATION, "3s")]
    >>> resolved = read_settings(MappingLookup({"dbms.port": "7687"}), schema)
    >>> resolved["dbms.port"], resolved["dbms.timeout"]
    (7687, 3000)
    >>> resolved.origin("dbms.timeout")["source"]
    'default'
    """

    schema = list(settings)
    if not schema:
        return EMPTY_SETTINGS

    values: dict[str, Any] = {}
    meta: dict[str, SourceInfo] = {}
    errors: list[InvalidSettingError] = []
    seen: set[str] = set()
    for item in schema:
        if item.name in seen:
            raise ValueError(f"setting '{item.name}' is declared more than once")
        seen.add(item.name)
        try:
            values[item.name], meta[item.name] = _resolve_with_origin(item, lookup)
        except InvalidSettingError as exc:
            errors.append(exc)

    if errors:
        raise ValidationError(errors)
    log_info("settings_read", **make_event("*", None, {"count": len(values)}))
    return ResolvedSettings(values, meta)


def _resolve_with_origin(item: Resolvable, lookup: ConfigLookup) -> tuple[Any, SourceInfo]:
    """Resolve *item* once and describe where its value came from."""

    if isinstance(item, Setting):
        value, resolution = item.resolve_traced(lookup)
        return value, SourceInfo(setting=item.name, source=resolution.source, key=resolution.key)
    value = item.resolve(lookup)
    if isinstance(item, GroupSetting):
        return value, SourceInfo(setting=item.name, source="group", key=None)
    return value, SourceInfo(setting=item.name, source="unknown", key=None)


__all__ = ["read_settings"]
