"""Composable constraints applied to parsed setting values.

Purpose
-------
Validate (and occasionally convert) a value after parsing. Constraints form an
ordered pipeline on each setting; every step receives the output of the
previous one together with the lookup being resolved, so steps such as
:func:`base_path` can consult other settings.

Contents
--------
* :class:`Constraint` – described ``(value, lookup) -> value`` step.
* :func:`minimum`, :func:`maximum`, :func:`in_range` – ordering bounds.
* :func:`matches` – full regular expression match on the value's text.
* :data:`is_file`, :data:`is_directory` – filesystem kind checks.
* :func:`base_path` – resolve relative paths against another setting.

System Role
-----------
Constraints raise :class:`ValueError`; the owning setting converts that into
:class:`lib_typed_settings.domain.errors.InvalidSettingError`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from ..application.ports import ConfigLookup
    from ..application.setting import Setting


@dataclass(frozen=True, slots=True)
class Constraint:
    """One step of a setting's validation pipeline.

    Parameters
    ----------
    description:
        Phrase completing ``"<setting> is <parser>, which is ..."``.
    check:
        Callable returning the value to hand to the next step, or raising
        :class:`ValueError` naming the violated bound.

    Examples
    --------
    >>> minimum(2)(3, None)
    3
    >>> minimum(2).description
    'minimum `2`'
    """

    description: str
    check: Callable[[Any, "ConfigLookup"], Any]

    def __call__(self, value: Any, lookup: "ConfigLookup") -> Any:
        return self.check(value, lookup)

    def __str__(self) -> str:
        return self.description


def minimum(bound: Any) -> Constraint:
    """Reject values strictly below *bound*.

    Examples
    --------
    >>> minimum(2)(1, None)
    Traceback (most recent call last):
    ...
    ValueError: minimum allowed value is 2
    """

    def check(value: Any, lookup: "ConfigLookup") -> Any:
        if value < bound:
            raise ValueError(f"minimum allowed value is {bound}")
        return value

    return Constraint(f"minimum `{bound}`", check)


def maximum(bound: Any) -> Constraint:
    """Reject values strictly above *bound*."""

    def check(value: Any, lookup: "ConfigLookup") -> Any:
        if value > bound:
            raise ValueError(f"maximum allowed value is {bound}")
        return value

    return Constraint(f"maximum `{bound}`", check)


def in_range(low: Any, high: Any) -> Constraint:
    """Reject values outside the inclusive interval ``[low, high]``."""

    if high < low:
        raise ValueError(f"empty range [{low}, {high}]")

    def check(value: Any, lookup: "ConfigLookup") -> Any:
        if value < low or value > high:
            raise ValueError(f"must be in range {low} to {high}")
        return value

    return Constraint(f"in range `{low}` to `{high}`", check)


def matches(pattern: str) -> Constraint:
    """Require the textual form of the value to match *pattern* completely.

    Examples
    --------
    >>> matches("a*b*c*")("aaabbbccc", None)
    'aaabbbccc'
    """

    compiled = re.compile(pattern)

    def check(value: Any, lookup: "ConfigLookup") -> Any:
        text = value if isinstance(value, str) else str(value)
        if compiled.fullmatch(text) is None:
            raise ValueError(f"value does not match expression: {pattern}")
        return value

    return Constraint(f"a string matching `{pattern}`", check)


def _check_is_file(value: Path, lookup: "ConfigLookup") -> Path:
    if value.exists() and not value.is_file():
        raise ValueError(f"{value} must be a file")
    return value


def _check_is_directory(value: Path, lookup: "ConfigLookup") -> Path:
    if value.exists() and not value.is_dir():
        raise ValueError(f"{value} must be a directory")
    return value


is_file = Constraint("a file", _check_is_file)
is_directory = Constraint("a directory", _check_is_directory)


def base_path(base: "Setting[Any]") -> Constraint:
    """Join relative paths onto the value of *base* and make them absolute.

    The base setting is resolved against the same lookup as the setting being
    validated, so overriding the base moves every dependent path with it.
    """

    def check(value: Path, lookup: "ConfigLookup") -> Path:
        if value.is_absolute():
            return value
        root = base.resolve(lookup)
        if root is None:
            raise ValueError(f"base path setting '{base.name}' has no value")
        return (Path(root) / value).absolute()

    return Constraint(f"relative to `{base.name}`", check)
