"""Immutable per-load snapshot of the hosting environment.

Purpose
-------
Freeze the answers of an :class:`~lib_log_config_loader.application.ports.AppEnvironment`
once per load call so candidate resolution is deterministic even if the
provider's answers change while the sequence is being consumed.

Contents
--------
* :class:`EnvironmentContext` – frozen dataclass with :meth:`EnvironmentContext.capture`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..application.ports import AppEnvironment


@dataclass(frozen=True, slots=True)
class EnvironmentContext:
    """Read-only view of where the application lives and how it was started.

    Attributes
    ----------
    base_directory:
        Application base directory; empty when unknown (interactive sessions).
    entry_binary_location:
        Directory holding the entry script or frozen bundle.
    entry_binary_file_name:
        File name of the entry script (``app.py``) or bundled module.
    current_process_file_path:
        Executable of the running process (interpreter or frozen executable).
    app_configuration_file:
        Host-identified configuration file, if any.
    supplementary_search_paths:
        Extra directories probed after the primary locations.
    user_temp_path:
        Temp directory; frozen single-file executables unpack beneath it.
    library_location:
        Install location of this library.
    library_globally_registered:
        ``True`` when the library lives in the system-wide interpreter rather
        than next to the application.
    case_insensitive:
        Whether the platform filesystem ignores case.
    """

    base_directory: str = ""
    entry_binary_location: str = ""
    entry_binary_file_name: str = ""
    current_process_file_path: str = ""
    app_configuration_file: str | None = None
    supplementary_search_paths: tuple[str, ...] = ()
    user_temp_path: str = ""
    library_location: str | None = None
    library_globally_registered: bool = False
    case_insensitive: bool = False

    @classmethod
    def capture(cls, environment: AppEnvironment) -> EnvironmentContext:
        """Snapshot *environment* into a new context."""

        return cls(
            base_directory=environment.base_directory or "",
            entry_binary_location=environment.entry_binary_location or "",
            entry_binary_file_name=environment.entry_binary_file_name or "",
            current_process_file_path=environment.current_process_file_path or "",
            app_configuration_file=environment.app_configuration_file,
            supplementary_search_paths=tuple(environment.supplementary_search_paths or ()),
            user_temp_path=environment.user_temp_path or "",
            library_location=environment.library_location,
            library_globally_registered=environment.library_globally_registered,
            case_insensitive=environment.case_insensitive,
        )
