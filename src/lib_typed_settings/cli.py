"""CLI adapter for ``lib_typed_settings`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators check how raw configuration text is interpreted (parsers,
group discovery) without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_parse` – runs a built-in parser over a raw value.
* :func:`cli_groups` – discovers numbered groups under a prefix.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It builds lookups from command line
assignments and environment variables and never loads configuration files.
``lib_cli_exit_tools`` centralises the exit code strategy so every command
behaves consistently across shells and CI.
"""

from __future__ import annotations

import json
import sys
from enum import Enum
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.lookups.environ import EnvironLookup
from .adapters.lookups.layered import LayeredLookup
from .adapters.lookups.mapping import MappingLookup
from .application.groups import group
from .application.ports import ConfigLookup
from .application.setting import setting
from .domain.defaults import MANDATORY
from .domain.parsers import PARSERS, HostnamePort

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

PARSER_CHOICES: Final[tuple[str, ...]] = tuple(sorted(PARSERS))


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_typed_settings")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Typed configuration settings toolkit",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_typed_settings",
    message="lib_typed_settings version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_typed_settings")
    except metadata.PackageNotFoundError:
        click.echo("lib_typed_settings (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_typed_settings')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("parse", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("parser_name", metavar="PARSER", type=click.Choice(PARSER_CHOICES, case_sensitive=False))
@click.argument("value")
@click.option("--name", default="value", show_default=True, help="Setting name used in error messages")
def cli_parse(parser_name: str, value: str, name: str) -> None:
    """Parse VALUE with a built-in PARSER and print the result as JSON.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["parse", "duration", "3s"])
    >>> result.output.strip()
    '3000'
    """

    declared = setting(name, PARSERS[parser_name.lower()], MANDATORY)
    parsed = declared.resolve(MappingLookup({name: value}))
    click.echo(json.dumps(_to_jsonable(parsed)))


@cli.command("groups", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("prefix")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Raw configuration entry (repeatable)",
)
@click.option(
    "--env-prefix",
    default=None,
    help="Also read environment variables with this prefix (overridden by --set)",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
def cli_groups(prefix: str, assignments: Sequence[str], env_prefix: Optional[str], indent: Optional[int]) -> None:
    """Discover numbered groups under PREFIX and print them as JSON.

    Each group is reported with its index and raw entries, keys relative to
    ``PREFIX.<index>.``.
    """

    lookup = _build_lookup(assignments, env_prefix)
    payload = [
        {"index": found.index, "key": found.key, "settings": found.as_dict()}
        for found in group(prefix).resolve(lookup)
    ]
    click.echo(json.dumps(payload, indent=indent, separators=(",", ":")))


def _build_lookup(assignments: Sequence[str], env_prefix: Optional[str]) -> ConfigLookup:
    """Layer ``--set`` entries above environment variables when a prefix is given."""

    explicit = MappingLookup(_parse_assignments(assignments))
    if env_prefix is None:
        return explicit
    return LayeredLookup([("env", EnvironLookup(env_prefix)), ("cli", explicit)])


def _parse_assignments(values: Sequence[str]) -> dict[str, str]:
    """Split ``KEY=VALUE`` strings, rejecting entries without ``=`` or key."""

    parsed: dict[str, str] = {}
    for entry in values:
        key, separator, value = entry.partition("=")
        key = key.strip()
        if not separator or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {entry!r}", param_hint="--set")
        parsed[key] = value
    return parsed


def _to_jsonable(value: Any) -> Any:
    """Convert parser results to JSON-compatible structures."""

    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, HostnamePort):
        return {"host": value.host, "port_from": value.port_from, "port_to": value.port_to}
    if isinstance(value, Enum):
        return value.name
    return value


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_typed_settings",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
