"""Typed setting descriptors.

Purpose
-------
Declare configuration keys once, at schema definition time, and resolve them
any number of times against different lookups.

Contents
--------
* :class:`Setting` – immutable descriptor binding a key to a parser, a default
  strategy, an optional inheritance parent, and a constraint pipeline.
* :func:`setting` – the construction helper accepting the shorthand default
  forms (literal text, another setting, ``MANDATORY``, ``NO_DEFAULT``).

System Role
-----------
Application code declares settings with :func:`setting`; the resolution
algorithm in :mod:`lib_typed_settings.application.resolution` does the work.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..domain.constraints import Constraint
from ..domain.defaults import NO_DEFAULT, DefaultStrategy, InheritDefault, LiteralDefault, Mandatory, NoDefault
from ..domain.parsers import Parser
from .ports import ConfigLookup
from .resolution import Resolution, resolve, resolve_traced, trace

T = TypeVar("T")


@dataclass(frozen=True, slots=True, eq=False)
class Setting(Generic[T]):
    """Immutable description of one configuration key.

    Why
    ----
    Schemas are declared once and shared by every component reading the
    configuration, possibly from several threads. Keeping the descriptor
    immutable means resolution state can only live in the resolving call.

    Parameters
    ----------
    name:
        Key looked up in the :class:`~lib_typed_settings.application.ports.ConfigLookup`.
    parser:
        Converts the winning raw string into ``T``.
    default:
        Strategy applied when no explicit value exists along the inheritance
        chain.
    constraints:
        Pipeline run, in order, on every parsed value.
    inherits:
        Setting whose explicit value is used when this one has none. Set
        automatically for :class:`~lib_typed_settings.domain.defaults.InheritDefault`.

    Examples
    --------
    >>> from lib_typed_settings import INTEGER, MappingLookup, maximum
    >>> workers = Setting("workers", INTEGER, LiteralDefault("4"), (maximum(16),))
    >>> workers.resolve(MappingLookup({"workers": "8"}))
    8
    >>> workers.describe()
    'workers is an integer, which is maximum `16`'
    """

    name: str
    parser: Parser[T]
    default: DefaultStrategy = NO_DEFAULT
    constraints: tuple[Constraint, ...] = ()
    inherits: "Setting[T] | None" = None

    def __post_init__(self) -> None:
        """Validate the declaration and align ``inherits`` with ``InheritDefault``."""

        if not self.name:
            raise ValueError("setting name must not be empty")
        if not isinstance(self.default, (LiteralDefault, InheritDefault, Mandatory, NoDefault)):
            raise TypeError(f"unsupported default strategy {self.default!r} for setting '{self.name}'")
        object.__setattr__(self, "constraints", tuple(self.constraints))
        if isinstance(self.default, InheritDefault):
            parent = self.default.setting
            if self.inherits is None:
                object.__setattr__(self, "inherits", parent)
            elif self.inherits is not parent:
                raise ValueError(f"setting '{self.name}' inherits from '{self.inherits.name}' but defaults to '{parent.name}'")

    def resolve(self, lookup: ConfigLookup) -> T | None:
        """Return the validated value for this setting in *lookup*."""

        return resolve(self, lookup)

    def resolve_traced(self, lookup: ConfigLookup) -> tuple[T | None, Resolution]:
        """Return the validated value and the provenance it was resolved from."""

        return resolve_traced(self, lookup)

    def trace(self, lookup: ConfigLookup) -> Resolution:
        """Return the raw string this setting would resolve from, with provenance."""

        return trace(self, lookup)

    @property
    def is_mandatory(self) -> bool:
        return isinstance(self.default, Mandatory)

    def describe(self) -> str:
        """Render a one-line, human-readable description of the accepted values."""

        text = f"{self.name} is {self.parser.description}"
        if self.constraints:
            text += ", which is " + " and ".join(constraint.description for constraint in self.constraints)
        return text

    def __repr__(self) -> str:
        return f"Setting({self.name!r}, {self.parser.name}, default={self.default!r})"


def setting(
    name: str,
    parser: Parser[T],
    default: Any = NO_DEFAULT,
    *constraints: Constraint,
    inherits: Setting[T] | None = None,
) -> Setting[T]:
    """Declare a setting using the shorthand default forms.

    Parameters
    ----------
    name:
        Configuration key.
    parser:
        Value parser (see :mod:`lib_typed_settings.domain.parsers`).
    default:
        ``str`` for a literal default, another :class:`Setting` to inherit its
        value and default, :data:`MANDATORY`, :data:`NO_DEFAULT`, or an explicit
        strategy instance.
    constraints:
        Applied in order after parsing.
    inherits:
        Setting whose explicit value takes precedence over a literal default.

    Examples
    --------
    >>> from lib_typed_settings import STRING, MappingLookup
    >>> a = setting("A", STRING, "A")
    >>> b = setting("B", STRING, "B", inherits=a)
    >>> d = setting("D", STRING, b)
    >>> b.resolve(MappingLookup({})), b.resolve(MappingLookup({"A": "X"}))
    ('B', 'X')
    >>> d.resolve(MappingLookup({}))
    'B'
    """

    return Setting(name, parser, _default_strategy(default), tuple(constraints), inherits)


def _default_strategy(default: Any) -> DefaultStrategy:
    """Translate the shorthand *default* forms into a strategy variant."""

    if isinstance(default, (LiteralDefault, InheritDefault, Mandatory, NoDefault)):
        return default
    if isinstance(default, str):
        return LiteralDefault(default)
    if isinstance(default, Setting):
        return InheritDefault(default)
    raise TypeError(f"unsupported default {default!r}; use a string, a Setting, MANDATORY or NO_DEFAULT")
