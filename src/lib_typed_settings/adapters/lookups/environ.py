"""Environment variable lookup adapter.

Purpose
-------
Expose process environment variables as dotted configuration keys so settings
declared as ``dbms.mygroup.1.name`` can be supplied as
``APP_DBMS__MYGROUP__1__NAME``.

Key behaviours
--------------
* Enforces a configurable prefix (``default_env_prefix``) so only relevant
  variables are visible.
* Uses ``__`` as the separator standing in for ``.`` (single underscores stay
  part of the key, ``rotation_threshold`` keeps its name).
* Variable names are upper-case; discovered keys are reported lower-case.
* Values stay raw strings; parsing is the settings' job.
"""

from __future__ import annotations

import os
import re
from typing import Mapping

from ...observability import log_debug, make_event


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-typed-settings')
    'LIB_TYPED_SETTINGS'
    """

    return slug.replace("-", "_").upper()


class EnvironLookup:
    """Look up settings in environment variables sharing a prefix."""

    def __init__(self, prefix: str, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the lookup with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        prefix:
            Variable prefix (upper-case). ``_`` is appended if missing; an empty
            prefix exposes every variable.
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        self._environ = os.environ if environ is None else environ

    def variable_name(self, key: str) -> str:
        """Return the environment variable that carries *key*.

        Examples
        --------
        >>> EnvironLookup("APP", environ={}).variable_name("dbms.mygroup.1.name")
        'APP_DBMS__MYGROUP__1__NAME'
        """

        return self._prefix + key.replace(".", "__").upper()

    def get(self, key: str) -> str | None:
        return self._environ.get(self.variable_name(key))

    def find(self, pattern: re.Pattern[str]) -> list[tuple[str, str]]:
        """Return ``(dotted_key, value)`` pairs for prefixed variables matching *pattern*.

        Examples
        --------
        >>> env = {"APP_DBMS__MYGROUP__1__NAME": "Bob", "OTHER": "x"}
        >>> EnvironLookup("APP", environ=env).find(re.compile(r"dbms\\.mygroup\\..*"))
        [('dbms.mygroup.1.name', 'Bob')]
        """

        compiled = re.compile(pattern)
        found: list[tuple[str, str]] = []
        for name, value in self._environ.items():
            if not name.startswith(self._prefix):
                continue
            key = _dotted_key(name[len(self._prefix) :])
            if key and compiled.fullmatch(key):
                found.append((key, value))
        log_debug(
            "env_variables_matched",
            **make_event("*", "env", {"pattern": compiled.pattern, "keys": [key for key, _ in found]}),
        )
        return found


def _dotted_key(stripped: str) -> str:
    """Translate ``DBMS__MYGROUP__1__NAME`` into ``dbms.mygroup.1.name``."""

    return stripped.lower().replace("__", ".")
