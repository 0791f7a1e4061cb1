"""Candidate path resolution for logging configuration files.

Purpose
-------
Implement the :class:`lib_log_config_loader.application.ports.CandidateResolver`
protocol: turn a logical file name plus an
:class:`~lib_log_config_loader.domain.environment.EnvironmentContext` into an
ordered, de-duplicated, lazily produced list of places where the file may live.

Contents
--------
* :data:`DEFAULT_CONFIG_FILE_NAME` / :data:`CONFIG_EXTENSION` – naming
  conventions shared with the CLI.
* :class:`CandidatePathResolver` – the resolver.
* Private helpers trimming, joining and comparing path roots.

System Role
-----------
Feeds :class:`lib_log_config_loader.core.ConfigurationFileLoader`. The resolver
never touches the filesystem; existence checks belong to the environment
adapter so the search order can be asserted without a sandbox.
"""

from __future__ import annotations

import os
from pathlib import PurePosixPath, PureWindowsPath
from typing import Callable, Final, Iterable, Iterator

from ...domain.environment import EnvironmentContext
from ...observability import log_debug

DEFAULT_CONFIG_FILE_NAME: Final[str] = "Logging.config"
#: Extension substituted for a host configuration file's extension and
#: appended to binary names (``app.py.logcfg``).
CONFIG_EXTENSION: Final[str] = ".logcfg"

_DEBUG_HOST_MARKER: Final[str] = ".vshost."
_SEPARATORS: Final[str] = "/\\"


class CandidatePathResolver:
    """Resolve candidate configuration paths from an environment snapshot.

    Why
    ----
    Centralise the priority rules so the loader only has to walk the sequence
    and stop at the first existing file.

    Examples
    --------
    >>> ctx = EnvironmentContext(base_directory="/app", entry_binary_location="/app")
    >>> list(CandidatePathResolver(ctx).candidates("Logging.config"))
    ['/app/Logging.config', '/app/logging.config']
    """

    def __init__(self, context: EnvironmentContext) -> None:
        self.context = context

    def candidates(self, file_name: str | None = None) -> Iterator[str]:
        """Return a fresh generator over candidate paths for *file_name*.

        Why
        ----
        Callers usually stop at the first hit, so nothing beyond that point is
        computed. Calling the method again restarts the sequence.

        Parameters
        ----------
        file_name:
            Explicit logical file name. ``None`` (or an empty string) selects
            :data:`DEFAULT_CONFIG_FILE_NAME` and enables the process-specific
            and library-specific locations.
        """

        return _unique(self._iter_candidates(file_name or None), case_insensitive=self.context.case_insensitive)

    def resolve_config_file(self, file_name: str, file_exists: Callable[[str], bool]) -> str:
        """Resolve an explicit *file_name* to the first existing candidate.

        Absolute names pass through untouched. Relative names are matched
        against the explicit-name candidate sequence; when nothing exists the
        name is returned unchanged so downstream I/O fails naturally.
        """

        if _is_absolute(file_name):
            return file_name
        for path in self.candidates(file_name):
            if file_exists(path):
                log_debug("config_file_resolved", stage="resolve", path=path, requested=file_name)
                return path
        return file_name

    def _iter_candidates(self, file_name: str | None) -> Iterator[str]:  # noqa: C901 - ordered rules
        """Yield candidates in priority order, duplicates included."""

        ctx = self.context
        name = file_name or DEFAULT_CONFIG_FILE_NAME
        lower_name = name.lower()
        include_lower = lower_name != name and not ctx.case_insensitive

        base_directory = _trim_separators(ctx.base_directory)
        if base_directory:
            yield os.path.join(base_directory, name)
            if include_lower:
                yield os.path.join(base_directory, lower_name)

        entry_location = _trim_separators(ctx.entry_binary_location)
        if entry_location and not _same_root(entry_location, base_directory):
            yield os.path.join(entry_location, name)
            if include_lower:
                yield os.path.join(entry_location, lower_name)

        if not base_directory:
            yield name
            if include_lower:
                yield lower_name

        if file_name is None:
            yield from self._app_specific_locations(entry_location)

        yield from self._search_path_locations(base_directory, name, lower_name if include_lower else None)

        if file_name is None:
            yield from self._library_locations()

    def _app_specific_locations(self, entry_location: str) -> Iterator[str]:
        """Yield locations derived from the host configuration file or the process."""

        ctx = self.context
        config_file = ctx.app_configuration_file
        if config_file and config_file.strip():
            yield _change_extension(config_file, CONFIG_EXTENSION)
            if _DEBUG_HOST_MARKER in config_file:
                yield _change_extension(config_file.replace(_DEBUG_HOST_MARKER, "."), CONFIG_EXTENSION)
            return

        process_file = ctx.current_process_file_path
        process_directory = _trim_separators(os.path.dirname(process_file)) if process_file else ""
        entry_file = ctx.entry_binary_file_name

        if not self._is_valid_process_directory(process_directory, entry_location):
            # Interpreter-hosted script: the executable says nothing about the app.
            if entry_file:
                yield os.path.join(entry_location, entry_file + CONFIG_EXTENSION)
            entry_stem = os.path.splitext(entry_file)[0]
            if entry_stem:
                yield os.path.join(entry_location, entry_stem + ".exe" + CONFIG_EXTENSION)
        elif process_file:
            yield process_file + CONFIG_EXTENSION
            if entry_location:
                if entry_file:
                    yield os.path.join(entry_location, entry_file + CONFIG_EXTENSION)
            else:
                process_stem = os.path.splitext(os.path.basename(process_file))[0]
                if process_stem:
                    yield os.path.join(process_directory, process_stem + ".py" + CONFIG_EXTENSION)

    def _is_valid_process_directory(self, process_directory: str, entry_location: str) -> bool:
        """Return ``True`` when the process executable belongs to the application.

        A single-file executable unpacks its entry script below the temp
        directory while the executable stays where it was installed; that shape
        counts as valid too.
        """

        if not entry_location:
            return True
        if _same_root(entry_location, process_directory):
            return True
        if not process_directory:
            return False
        temp_path = _trim_separators(self.context.user_temp_path)
        return bool(temp_path) and entry_location.lower().startswith(temp_path.lower())

    def _search_path_locations(self, base_directory: str, name: str, lower_name: str | None) -> Iterator[str]:
        for raw_path in self.context.supplementary_search_paths:
            path = _trim_separators(raw_path)
            if not path.strip() or _same_root(path, base_directory):
                continue
            yield os.path.join(path, name)
            if lower_name:
                yield os.path.join(path, lower_name)

    def _library_locations(self) -> Iterator[str]:
        location = _trim_separators(self.context.library_location or "")
        if location and not self.context.library_globally_registered:
            yield location + CONFIG_EXTENSION


def _unique(paths: Iterable[str], *, case_insensitive: bool) -> Iterator[str]:
    """Yield *paths* skipping any already yielded.

    Examples
    --------
    >>> list(_unique(["/a/X", "/a/x", "/a/X"], case_insensitive=False))
    ['/a/X', '/a/x']
    >>> list(_unique(["/a/X", "/a/x"], case_insensitive=True))
    ['/a/X']
    """

    seen: set[str] = set()
    for path in paths:
        key = path.casefold() if case_insensitive else path
        if key in seen:
            continue
        seen.add(key)
        yield path


def _trim_separators(path: str) -> str:
    """Strip trailing directory separators while keeping bare roots intact.

    Examples
    --------
    >>> _trim_separators('/app/'), _trim_separators('/'), _trim_separators('C:\\\\')
    ('/app', '/', 'C:\\\\')
    """

    if not path:
        return ""
    trimmed = path.rstrip(_SEPARATORS)
    if not trimmed or trimmed.endswith(":"):
        return path
    return trimmed


def _same_root(left: str, right: str) -> bool:
    """Compare two directory roots ignoring case."""

    return left.lower() == right.lower()


def _change_extension(path: str, extension: str) -> str:
    """Replace the extension of *path* (or append one when it has none).

    Examples
    --------
    >>> _change_extension('/srv/app.exe.config', '.logcfg')
    '/srv/app.exe.logcfg'
    >>> _change_extension('/srv/settings', '.logcfg')
    '/srv/settings.logcfg'
    """

    return os.path.splitext(path)[0] + extension


def _is_absolute(path: str) -> bool:
    """Return ``True`` for POSIX, Windows drive or UNC/rooted absolute paths."""

    if path.startswith(("/", "\\")):
        return True
    return PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute()
