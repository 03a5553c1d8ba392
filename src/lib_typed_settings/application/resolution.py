"""Application-layer resolution algorithm.

Purpose
-------
Decide which raw string a setting resolves from, then parse and validate it.
The module is free of I/O so it can be reused by any composition root.

Contents
    - ``resolve``: public entry point returning the typed value.
    - ``resolve_traced``: the same, paired with the ``Resolution`` it came from.
    - ``trace``: picks the effective raw string and records where it came from.
    - ``_explicit_value`` / ``_default_value``: the two chain walks, one over
      ``inherits`` references, one over default strategies.
    - ``_parse`` / ``_constrain``: run the parser and the constraint pipeline,
      converting ``ValueError`` into ``InvalidSettingError``.

System Role
-----------
Called by :meth:`lib_typed_settings.application.setting.Setting.resolve` and
therefore, indirectly, by group views and :func:`lib_typed_settings.core.read_settings`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, Iterator

from ..domain.defaults import InheritDefault, LiteralDefault, Mandatory, NoDefault
from ..domain.errors import CyclicInheritanceError, InvalidSettingError
from ..observability import log_debug, log_error, make_event
from .ports import ConfigLookup

if TYPE_CHECKING:
    from .setting import Setting

EXPLICIT: Final[str] = "explicit"
INHERITED: Final[str] = "inherited"
DEFAULT: Final[str] = "default"
UNSET: Final[str] = "unset"


@dataclass(frozen=True, slots=True)
class Resolution:
    """The raw string a setting resolves from, with its provenance.

    Attributes
    ----------
    raw:
        Text handed to the parser, or ``None`` when nothing was produced.
    source:
        One of ``"explicit"``, ``"inherited"``, ``"default"`` or ``"unset"``.
    key:
        Lookup key that supplied the value (explicit/inherited) or the name of
        the setting owning the literal default; ``None`` when unset.
    """

    raw: str | None
    source: str
    key: str | None


def resolve(setting: "Setting[Any]", lookup: ConfigLookup) -> Any:
    """Resolve *setting* against *lookup* and return the validated value.

    Why
    ----
    Keeps the full fallback, parsing, and validation sequence in one place so
    explicit values and defaults are treated identically.

    What
    ----
    Calls :func:`trace`, parses the winning raw string, and runs every
    constraint in declaration order. Settings without any value resolve to
    ``None`` and skip the constraints.

    Side Effects
    ------------
    Emits ``setting_resolved`` debug events and ``setting_invalid`` error
    events before raising.

    Examples
    --------
    >>> from lib_typed_settings import INTEGER, MappingLookup, minimum, setting
    >>> port = setting("port", INTEGER, "7474", minimum(1))
    >>> resolve(port, MappingLookup({}))
    7474
    >>> resolve(port, MappingLookup({"port": "0"}))
    Traceback (most recent call last):
    ...
    lib_typed_settings.domain.errors.InvalidSettingError: Bad value '0' for setting 'port': minimum allowed value is 1
    """

    value, _ = resolve_traced(setting, lookup)
    return value


def resolve_traced(setting: "Setting[Any]", lookup: ConfigLookup) -> tuple[Any, Resolution]:
    """Resolve *setting* and return the value together with its :class:`Resolution`.

    Both come from a single pass over *lookup*, so the provenance always
    describes the value that was returned.
    """

    resolution = trace(setting, lookup)
    if resolution.raw is None:
        log_debug("setting_resolved", **make_event(setting.name, resolution.source))
        return None, resolution
    value = _parse(setting, resolution.raw)
    value = _constrain(setting, resolution.raw, value, lookup)
    log_debug("setting_resolved", **make_event(setting.name, resolution.source, {"key": resolution.key}))
    return value, resolution


def trace(setting: "Setting[Any]", lookup: ConfigLookup) -> Resolution:
    """Return the effective raw string for *setting* without parsing it.

    The nearest explicit value along the ``inherits`` chain wins. Without one,
    any mandatory setting on that chain is an error; otherwise the default
    strategy chain decides.
    """

    found = _explicit_value(setting, lookup)
    if found is not None:
        return found
    return _default_value(setting)


def _walk(setting: "Setting[Any]") -> Iterator["Setting[Any]"]:
    """Yield *setting* and its ``inherits`` ancestors, failing fast on cycles."""

    visited: set[int] = set()
    chain: list[str] = []
    current: Setting[Any] | None = setting
    while current is not None:
        chain.append(current.name)
        if id(current) in visited:
            raise _fail(CyclicInheritanceError(setting.name, chain))
        visited.add(id(current))
        yield current
        current = current.inherits


def _explicit_value(setting: "Setting[Any]", lookup: ConfigLookup) -> Resolution | None:
    """Return the first value found along the ``inherits`` chain or ``None``."""

    walked: list[Setting[Any]] = []
    for current in _walk(setting):
        raw = lookup.get(current.name)
        if raw is not None:
            source = EXPLICIT if current is setting else INHERITED
            return Resolution(raw, source, current.name)
        walked.append(current)

    for current in walked:
        if isinstance(current.default, Mandatory):
            if current is setting:
                reason = "mandatory setting is missing"
            else:
                reason = f"inherits from mandatory setting '{current.name}' which has no value"
            raise _fail(InvalidSettingError(setting.name, None, reason))
    return None


def _default_value(setting: "Setting[Any]") -> Resolution:
    """Follow default strategies until one produces text.

    A setting without its own default falls back to its parent's default;
    the walk ends unset only at a setting with neither.
    """

    visited: set[int] = set()
    chain: list[str] = []
    current = setting
    while True:
        chain.append(current.name)
        if id(current) in visited:
            raise _fail(CyclicInheritanceError(setting.name, chain))
        visited.add(id(current))

        strategy = current.default
        if isinstance(strategy, LiteralDefault):
            return Resolution(strategy.text, DEFAULT, current.name)
        if isinstance(strategy, NoDefault):
            if current.inherits is not None:
                current = current.inherits
                continue
            return Resolution(None, UNSET, None)
        if isinstance(strategy, InheritDefault):
            current = strategy.setting
            continue
        if isinstance(strategy, Mandatory):
            raise _fail(InvalidSettingError(setting.name, None, f"mandatory setting '{current.name}' is missing"))
        raise TypeError(f"unknown default strategy {strategy!r} on setting '{current.name}'")


def _parse(setting: "Setting[Any]", raw: str) -> Any:
    try:
        return setting.parser(raw)
    except InvalidSettingError:
        raise
    except ValueError as exc:
        raise _fail(InvalidSettingError(setting.name, raw, str(exc) or setting.parser.description)) from exc


def _constrain(setting: "Setting[Any]", raw: str, value: Any, lookup: ConfigLookup) -> Any:
    for constraint in setting.constraints:
        try:
            value = constraint(value, lookup)
        except InvalidSettingError:
            raise
        except ValueError as exc:
            raise _fail(InvalidSettingError(setting.name, raw, str(exc) or constraint.description)) from exc
    return value


def _fail(error: InvalidSettingError) -> InvalidSettingError:
    """Log *error* as a structured event and hand it back for raising."""

    log_error("setting_invalid", **make_event(error.name, None, {"value": error.value, "reason": error.reason}))
    return error
