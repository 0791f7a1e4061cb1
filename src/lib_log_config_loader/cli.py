"""CLI adapter for ``lib_log_config_loader`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators see where the loader looks for the logging configuration, what
it ends up loading, and which raw-text markers a broken file carries, without
writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_candidates` – prints the ordered candidate paths as JSON.
* :func:`cli_load` – loads the configuration and prints it as JSON.
* :func:`cli_scan` – prints the raw-text marker flags of a file.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: calls the composition root and the default adapters, never
the other way round. ``lib_cli_exit_tools`` centralises exit codes and
traceback printing.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.environment.default import ENV_BASE_DIR, DefaultAppEnvironment
from .adapters.parsers.structured import XmlConfigurationParser
from .application.scan import decode_raw_text, scan_markers
from .core import ConfigurationFileLoader
from .domain.errors import NotFound
from .domain.policy import ExceptionPolicy

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_log_config_loader")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Discover and load logging configuration files",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_log_config_loader",
    message="lib_log_config_loader version %(version)s",
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
        meta = metadata.metadata("lib_log_config_loader")
    except metadata.PackageNotFoundError:
        click.echo("lib_log_config_loader (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_log_config_loader')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("candidates", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--name", default=None, help="Explicit configuration file name (defaults to Logging.config)")
@click.option(
    "--base-dir",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
    default=None,
    help="Override the detected application base directory",
)
@click.option("--platform", default=None, help="Override auto-detected platform (e.g. linux, darwin, windows)")
@click.option(
    "--existing/--all",
    "existing_only",
    default=False,
    help="Only list candidates that exist on disk",
)
def cli_candidates(
    name: Optional[str],
    base_dir: Optional[Path],
    platform: Optional[str],
    existing_only: bool,
) -> None:
    """Print the ordered candidate paths as a JSON array."""

    environment = _build_environment(base_dir, platform)
    loader = ConfigurationFileLoader(environment)
    paths = [path for path in loader.candidates(name) if not existing_only or environment.file_exists(path)]
    click.echo(json.dumps(paths, indent=2))


@cli.command("load", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--name", default=None, help="Explicit configuration file (absolute, or relative to the candidates)")
@click.option(
    "--base-dir",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
    default=None,
    help="Override the detected application base directory",
)
@click.option(
    "--throw-exceptions/--no-throw-exceptions",
    default=None,
    help="Propagate every loader failure (defaults to LIB_LOG_CONFIG_LOADER_THROW_EXCEPTIONS)",
)
@click.option(
    "--throw-config-exceptions/--no-throw-config-exceptions",
    default=None,
    help="Propagate configuration errors (defaults to LIB_LOG_CONFIG_LOADER_THROW_CONFIG_EXCEPTIONS)",
)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_load(
    name: Optional[str],
    base_dir: Optional[Path],
    throw_exceptions: Optional[bool],
    throw_config_exceptions: Optional[bool],
    indent: Optional[int],
) -> None:
    """Load the logging configuration and print it as JSON (``null`` when none exists).

    An explicit ``--name`` that resolves to no existing file is an error.
    """

    environment = _build_environment(base_dir, None)
    policy = _build_policy(throw_exceptions, throw_config_exceptions)
    loader = ConfigurationFileLoader(environment, policy=policy)
    if name:
        resolved = loader.resolve_config_file(name)
        if not environment.file_exists(resolved):
            raise NotFound(f"Logging configuration not found: {name}")
    configuration = loader.load(name)
    if configuration is None:
        click.echo("null")
        return
    click.echo(configuration.to_json(indent=indent))


@cli.command("scan", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument(
    "path",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
)
def cli_scan(path: Path) -> None:
    """Print the raw-text markers the loader would honour for PATH.

    Throw markers only count when the file is not well-formed XML.
    """

    with path.open("rb") as stream:
        parsed = XmlConfigurationParser().parse(stream, str(path))
    content = decode_raw_text(path.read_bytes())
    syntax_error = parsed.read_error is not None
    flags = scan_markers(content, syntax_error=syntax_error)
    payload = {
        "path": str(path),
        "initialize_succeeded": parsed.initialize_succeeded,
        "syntax_error": syntax_error,
        "throw_exceptions": flags.throw_exceptions,
        "throw_config_exceptions": flags.throw_config_exceptions,
        "auto_reload": flags.auto_reload,
    }
    click.echo(json.dumps(payload, indent=2))


def _build_environment(base_dir: Optional[Path], platform: Optional[str]) -> DefaultAppEnvironment:
    """Return the default environment honouring CLI overrides."""

    overrides = {ENV_BASE_DIR: str(base_dir)} if base_dir is not None else None
    return DefaultAppEnvironment(env=overrides, platform=_normalize_platform(platform))


def _build_policy(throw_exceptions: Optional[bool], throw_config_exceptions: Optional[bool]) -> ExceptionPolicy:
    """Layer explicit CLI flags over the environment-derived policy."""

    policy = ExceptionPolicy.from_env()
    return ExceptionPolicy(
        throw_exceptions=policy.throw_exceptions if throw_exceptions is None else throw_exceptions,
        throw_config_exceptions=(
            policy.throw_config_exceptions if throw_config_exceptions is None else throw_config_exceptions
        ),
    )


def _normalize_platform(platform: Optional[str]) -> Optional[str]:
    """Return a ``sys.platform``-style identifier or ``None``."""

    if platform is None:
        return None
    alias = platform.strip().lower()
    if not alias:
        return None
    mapping = {
        "linux": "linux",
        "posix": "linux",
        "darwin": "darwin",
        "mac": "darwin",
        "macos": "darwin",
        "win": "win32",
        "win32": "win32",
        "windows": "win32",
    }
    try:
        return mapping[alias]
    except KeyError as exc:
        raise click.BadParameter(
            "Platform must be one of: linux, posix, darwin, mac, macos, win, win32, windows.",
            param_hint="--platform",
        ) from exc


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_log_config_loader",
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
