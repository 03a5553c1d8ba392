"""Default strategies for settings.

Purpose
-------
Model the four ways a setting can behave when the lookup holds no value for it
as a closed set of immutable variants, so the resolution algorithm can branch
over them exhaustively.

Contents
--------
* :class:`LiteralDefault` – fall back to a raw string parsed like user input.
* :class:`InheritDefault` – fall back to another setting (value and default).
* :class:`Mandatory` / :data:`MANDATORY` – a value must be supplied.
* :class:`NoDefault` / :data:`NO_DEFAULT` – resolve to ``None`` when unset.
* :data:`DefaultStrategy` – union of the variants above.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, Union

if TYPE_CHECKING:
    from ..application.setting import Setting


@dataclass(frozen=True, slots=True)
class LiteralDefault:
    """Raw default text, parsed and validated exactly like an explicit value.

    Examples
    --------
    >>> LiteralDefault("3s").text
    '3s'
    """

    text: str


@dataclass(frozen=True, slots=True, eq=False)
class InheritDefault:
    """Take the value, and failing that the default, of ``setting``."""

    setting: "Setting[Any]"


@dataclass(frozen=True, slots=True)
class Mandatory:
    """Marker variant: the setting must resolve to an explicit value."""

    def __repr__(self) -> str:
        return "MANDATORY"


@dataclass(frozen=True, slots=True)
class NoDefault:
    """Marker variant: the setting resolves to ``None`` when no value exists."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


MANDATORY: Final[Mandatory] = Mandatory()
NO_DEFAULT: Final[NoDefault] = NoDefault()

DefaultStrategy = Union[LiteralDefault, InheritDefault, Mandatory, NoDefault]
