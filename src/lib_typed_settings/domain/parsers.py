"""Value parsers turning raw configuration strings into typed values.

Purpose
-------
Hold the pure conversion functions every setting delegates to. Parsers know
nothing about setting names or lookups; they raise :class:`ValueError` on
malformed input and let :class:`lib_typed_settings.application.setting.Setting`
attach the setting name to the failure.

Contents
--------
* :class:`Parser` – named, described wrapper around a ``str -> T`` callable.
* :data:`INTEGER`, :data:`FLOAT`, :data:`BOOLEAN`, :data:`STRING` – scalars.
* :data:`DURATION` – ``"3s"`` style durations in milliseconds.
* :data:`BYTES` – ``"10M"`` style binary sizes in bytes.
* :data:`PATH`, :data:`URI`, :data:`NORMALIZED_RELATIVE_URI` – locations.
* :data:`HOSTNAME_PORT` / :class:`HostnamePort` – ``host:port[-port]``.
* :func:`options` and :func:`list_of` – parser factories.
* :data:`PARSERS` – registry of the built-in parsers keyed by name.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Final, Generic, TypeVar
from urllib.parse import urlsplit

T = TypeVar("T")

TRUE: Final[str] = "true"
FALSE: Final[str] = "false"

_INTEGER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?\d+")
_QUANTITY_PATTERN: Final[re.Pattern[str]] = re.compile(r"([+-]?\d+)\s*([a-zA-Z]*)")
_SLASH_RUNS: Final[re.Pattern[str]] = re.compile(r"/{2,}")

_DURATION_UNITS: Final[dict[str, int]] = {
    "": 1,
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
}
_BYTE_UNITS: Final[dict[str, int]] = {
    "": 1,
    "k": 1024,
    "m": 1024 * 1024,
    "g": 1024 * 1024 * 1024,
}


@dataclass(frozen=True, slots=True)
class Parser(Generic[T]):
    """Convert raw configuration text into a typed value.

    Why
    ----
    Settings need both the conversion and a human-readable description of what
    they accept. Keeping the two together lets error messages and generated
    documentation agree.

    Parameters
    ----------
    name:
        Short identifier used by :data:`PARSERS` and the CLI.
    description:
        Phrase completing ``"<setting> is ..."`` (e.g. ``"an integer"``).
    convert:
        Callable raising :class:`ValueError` on malformed input.

    Examples
    --------
    >>> DURATION("3s")
    3000
    >>> DURATION.description
    'a duration (valid units are `ms`, `s`, `m` and `h`; default unit is `ms`)'
    """

    name: str
    description: str
    convert: Callable[[str], T]

    def __call__(self, raw: str) -> T:
        return self.convert(raw)

    def __str__(self) -> str:
        return self.description


def _parse_integer(raw: str) -> int:
    text = raw.strip()
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(f"'{raw}' is not a valid integer value")
    return int(text)


def _parse_float(raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise ValueError(f"'{raw}' is not a valid float value") from None


def _parse_boolean(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered == TRUE:
        return True
    if lowered == FALSE:
        return False
    raise ValueError(f"must be '{TRUE}' or '{FALSE}'")


def _parse_string(raw: str) -> str:
    return raw.strip()


def _split_quantity(raw: str, kind: str) -> tuple[int, str]:
    """Split ``"10M"`` into ``(10, "m")``, raising ``ValueError`` on anything else."""

    match = _QUANTITY_PATTERN.fullmatch(raw.strip())
    if match is None:
        raise ValueError(f"'{raw}' is not a valid {kind}")
    return int(match.group(1)), match.group(2).lower()


def _parse_duration(raw: str) -> int:
    """Return the duration in milliseconds.

    Examples
    --------
    >>> _parse_duration("4s"), _parse_duration("250"), _parse_duration("2m")
    (4000, 250, 120000)
    """

    amount, unit = _split_quantity(raw, "duration")
    try:
        return amount * _DURATION_UNITS[unit]
    except KeyError:
        raise ValueError(f"unrecognized unit '{unit}' in duration '{raw}'") from None


def _parse_bytes(raw: str) -> int:
    """Return the size in bytes.

    Examples
    --------
    >>> _parse_bytes("10M") == 10 * 1024 * 1024
    True
    >>> _parse_bytes("512")
    512
    """

    amount, unit = _split_quantity(raw, "byte size")
    try:
        return amount * _BYTE_UNITS[unit]
    except KeyError:
        raise ValueError(f"unrecognized unit '{unit}' in byte size '{raw}'") from None


def _parse_path(raw: str) -> Path:
    text = raw.strip()
    if not text:
        raise ValueError("path must not be empty")
    return Path(text)


def _parse_uri(raw: str) -> str:
    text = raw.strip()
    try:
        urlsplit(text)
    except ValueError as exc:
        raise ValueError(f"'{raw}' is not a valid URI: {exc}") from None
    return text


def _parse_normalized_relative_uri(raw: str) -> str:
    """Keep only the normalised path component of a URI.

    Examples
    --------
    >>> _parse_normalized_relative_uri("http://localhost:7474///db///data///")
    '/db/data'
    >>> _parse_normalized_relative_uri("/db/./manage/../data/")
    '/db/data'
    """

    path = urlsplit(_parse_uri(raw)).path
    path = _SLASH_RUNS.sub("/", path)
    if path:
        path = posixpath.normpath(path)
    if path.endswith("/"):
        path = path[:-1]
    return path


@dataclass(frozen=True, slots=True)
class HostnamePort:
    """A host and an inclusive port range; an empty host means every interface.

    Examples
    --------
    >>> str(HOSTNAME_PORT("localhost:7474"))
    'localhost:7474'
    >>> HOSTNAME_PORT(":5001-5003").ports
    range(5001, 5004)
    """

    host: str
    port_from: int
    port_to: int

    @property
    def ports(self) -> range:
        return range(self.port_from, self.port_to + 1)

    def __str__(self) -> str:
        if self.port_from == self.port_to:
            return f"{self.host}:{self.port_from}"
        return f"{self.host}:{self.port_from}-{self.port_to}"


def _parse_hostname_port(raw: str) -> HostnamePort:
    text = raw.strip()
    host, separator, ports = text.rpartition(":")
    if not separator:
        raise ValueError(f"'{raw}' must be of the form host:port or host:port-port")
    low, _, high = ports.partition("-")
    port_from = _parse_port(low, raw)
    port_to = _parse_port(high, raw) if high else port_from
    if port_to < port_from:
        raise ValueError(f"port range in '{raw}' is reversed")
    return HostnamePort(host, port_from, port_to)


def _parse_port(text: str, raw: str) -> int:
    if not text.isdigit() or not 0 <= int(text) <= 65535:
        raise ValueError(f"'{text}' in '{raw}' is not a valid port number")
    return int(text)


INTEGER: Final[Parser[int]] = Parser("integer", "an integer", _parse_integer)
FLOAT: Final[Parser[float]] = Parser("float", "a floating point number", _parse_float)
BOOLEAN: Final[Parser[bool]] = Parser("boolean", f"a boolean (`{TRUE}` or `{FALSE}`)", _parse_boolean)
STRING: Final[Parser[str]] = Parser("string", "a string", _parse_string)
DURATION: Final[Parser[int]] = Parser(
    "duration",
    "a duration (valid units are `ms`, `s`, `m` and `h`; default unit is `ms`)",
    _parse_duration,
)
BYTES: Final[Parser[int]] = Parser(
    "bytes",
    "a byte size (valid multipliers are `k`, `m` and `g`; case-insensitive)",
    _parse_bytes,
)
PATH: Final[Parser[Path]] = Parser("path", "a path", _parse_path)
URI: Final[Parser[str]] = Parser("uri", "a URI", _parse_uri)
NORMALIZED_RELATIVE_URI: Final[Parser[str]] = Parser(
    "normalized-relative-uri",
    "a URI reduced to its normalized path",
    _parse_normalized_relative_uri,
)
HOSTNAME_PORT: Final[Parser[HostnamePort]] = Parser(
    "hostname-port",
    "a hostname and port (`host:port` or `host:port-port`)",
    _parse_hostname_port,
)


def options(*choices: Any) -> Parser[Any]:
    """Build a parser accepting only *choices*.

    Passing a single :class:`~enum.Enum` subclass accepts its member names
    (case-insensitive) and returns the member; otherwise the choices are
    compared as exact strings.

    Examples
    --------
    >>> options("fast", "safe")("safe")
    'safe'
    >>> import enum
    >>> class Mode(enum.Enum):
    ...     FAST = 1
    ...     SAFE = 2
    >>> options(Mode)("fast")
    <Mode.FAST: 1>
    """

    if len(choices) == 1 and isinstance(choices[0], type) and issubclass(choices[0], Enum):
        return _enum_options(choices[0])
    allowed = tuple(str(choice) for choice in choices)
    if not allowed:
        raise ValueError("options() needs at least one choice")

    def convert(raw: str) -> str:
        text = raw.strip()
        if text not in allowed:
            raise ValueError(f"must be one of {', '.join(allowed)}")
        return text

    return Parser("options", "one of " + ", ".join(allowed), convert)


def _enum_options(enum_type: type[Enum]) -> Parser[Any]:
    members = {member.name.lower(): member for member in enum_type}
    names = ", ".join(member.name for member in enum_type)

    def convert(raw: str) -> Enum:
        try:
            return members[raw.strip().lower()]
        except KeyError:
            raise ValueError(f"must be one of {names}") from None

    return Parser("options", "one of " + names, convert)


def list_of(separator: str, element: Parser[T]) -> Parser[list[T]]:
    """Build a parser splitting on *separator* and parsing every item with *element*.

    A trailing separator does not produce an extra empty item and an empty
    string yields an empty list.

    Examples
    --------
    >>> list_of(",", INTEGER)("1,2,3,4,")
    [1, 2, 3, 4]
    >>> list_of(",", INTEGER)("")
    []
    """

    if not separator:
        raise ValueError("list separator must not be empty")

    def convert(raw: str) -> list[T]:
        if not raw:
            return []
        parts = raw.split(separator)
        if not parts[-1]:
            parts.pop()
        return [element(part) for part in parts]

    return Parser(f"list of {element.name}", f"a list separated by '{separator}' where items are {element}", convert)


PARSERS: Final[dict[str, Parser[Any]]] = {
    parser.name: parser
    for parser in (INTEGER, FLOAT, BOOLEAN, STRING, DURATION, BYTES, PATH, URI, NORMALIZED_RELATIVE_URI, HOSTNAME_PORT)
}
"""Built-in parsers keyed by :attr:`Parser.name` (used by the CLI)."""
