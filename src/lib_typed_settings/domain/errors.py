"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by parsers, constraints, the resolution
algorithm, and consuming applications. The hierarchy lives in the domain layer
so every outer layer can raise and catch it without circular imports.

Contents
--------
* :class:`SettingsError` – umbrella base class for all settings-related issues.
* :class:`InvalidSettingError` – a single setting failed to parse, violated a
  constraint, or is mandatory and missing.
* :class:`CyclicInheritanceError` – a setting inherits from itself, directly or
  through intermediate settings.
* :class:`ValidationError` – aggregate raised when a whole schema is read.

System Role
-----------
Parsers and constraints raise plain :class:`ValueError`; the setting wraps those
into :class:`InvalidSettingError` so callers only ever see one failure type per
setting. Callers catch :class:`SettingsError` to handle all library failures
uniformly.
"""

from __future__ import annotations

from typing import Sequence


class SettingsError(Exception):
    """Base type for all exceptions emitted by ``lib_typed_settings``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidSettingError(SettingsError, ValueError):
    """Raised when a setting cannot produce a valid value.

    Why
    ----
    A misconfigured value is always a hard failure at resolution time. The
    error names the setting and the offending raw text so operators can find
    the line to fix.

    What
    ----
    Subclasses :class:`ValueError` as well, because an invalid setting is an
    illegal argument from the point of view of the code asking for it.

    Attributes
    ----------
    name:
        Key of the failing setting.
    value:
        Raw string that failed, or ``None`` when no value was produced.
    reason:
        Human-readable cause (parse failure, violated bound, missing value).

    Examples
    --------
    >>> str(InvalidSettingError("foo", "bar", "invalid integer value"))
    "Bad value 'bar' for setting 'foo': invalid integer value"
    >>> str(InvalidSettingError("foo", None, "mandatory setting is missing"))
    "Missing value for setting 'foo': mandatory setting is missing"
    """

    def __init__(self, name: str, value: str | None, reason: str) -> None:
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(_format_message(name, value, reason))


class CyclicInheritanceError(InvalidSettingError):
    """Signals that following ``inherits`` references loops back to a visited setting.

    Why
    ----
    Settings reference each other as a graph. A loop is a schema bug; it must
    fail fast instead of recursing forever.
    """

    def __init__(self, name: str, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(name, None, "cyclic inheritance " + " -> ".join(self.chain))


class ValidationError(SettingsError):
    """Aggregate of every :class:`InvalidSettingError` found while reading a schema.

    Why
    ----
    Reporting one failure at a time forces operators into a fix-and-retry loop.
    :func:`lib_typed_settings.core.read_settings` collects all of them first.
    """

    def __init__(self, errors: Sequence[InvalidSettingError]) -> None:
        self.errors = tuple(errors)
        lines = [f"{len(self.errors)} invalid setting(s):"]
        lines.extend(f"  - {error}" for error in self.errors)
        super().__init__("\n".join(lines))


def _format_message(name: str, value: str | None, reason: str) -> str:
    """Return the canonical message for a failing setting."""

    if value is None:
        return f"Missing value for setting '{name}': {reason}"
    return f"Bad value '{value}' for setting '{name}': {reason}"
