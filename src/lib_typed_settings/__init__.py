"""Public package surface for typed, validated configuration settings.

Declare settings once with :func:`setting` and :func:`group`, then resolve them
against any :class:`ConfigLookup` (``MappingLookup``, ``EnvironLookup``,
``LayeredLookup`` or your own adapter). :func:`read_settings` resolves a whole
schema at once and reports every invalid value together.
"""

from __future__ import annotations

from .adapters.lookups.environ import EnvironLookup, default_env_prefix
from .adapters.lookups.layered import LayeredLookup
from .adapters.lookups.mapping import MappingLookup
from .application.groups import ConfigGroup, GroupSetting, PrefixedLookup, group
from .application.ports import ConfigLookup, Resolvable
from .application.resolution import Resolution
from .application.setting import Setting, setting
from .core import read_settings
from .domain.constraints import (
    Constraint,
    base_path,
    in_range,
    is_directory,
    is_file,
    matches,
    maximum,
    minimum,
)
from .domain.defaults import MANDATORY, NO_DEFAULT, InheritDefault, LiteralDefault
from .domain.errors import CyclicInheritanceError, InvalidSettingError, SettingsError, ValidationError
from .domain.parsers import (
    BOOLEAN,
    BYTES,
    DURATION,
    FALSE,
    FLOAT,
    HOSTNAME_PORT,
    INTEGER,
    NORMALIZED_RELATIVE_URI,
    PARSERS,
    PATH,
    STRING,
    TRUE,
    URI,
    HostnamePort,
    Parser,
    list_of,
    options,
)
from .domain.resolved import ResolvedSettings, SourceInfo
from .observability import bind_trace_id, get_logger

__all__ = [
    "BOOLEAN",
    "BYTES",
    "DURATION",
    "FALSE",
    "FLOAT",
    "HOSTNAME_PORT",
    "INTEGER",
    "MANDATORY",
    "NORMALIZED_RELATIVE_URI",
    "NO_DEFAULT",
    "PARSERS",
    "PATH",
    "STRING",
    "TRUE",
    "URI",
    "ConfigGroup",
    "ConfigLookup",
    "Constraint",
    "CyclicInheritanceError",
    "EnvironLookup",
    "GroupSetting",
    "HostnamePort",
    "InheritDefault",
    "InvalidSettingError",
    "LayeredLookup",
    "LiteralDefault",
    "MappingLookup",
    "Parser",
    "PrefixedLookup",
    "Resolution",
    "Resolvable",
    "ResolvedSettings",
    "Setting",
    "SettingsError",
    "SourceInfo",
    "ValidationError",
    "base_path",
    "bind_trace_id",
    "default_env_prefix",
    "get_logger",
    "group",
    "in_range",
    "is_directory",
    "is_file",
    "list_of",
    "matches",
    "maximum",
    "minimum",
    "options",
    "read_settings",
    "setting",
]
