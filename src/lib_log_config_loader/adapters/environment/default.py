"""Default environment adapter for the running interpreter.

Purpose
-------
Implement :class:`lib_log_config_loader.application.ports.AppEnvironment` for a
regular CPython process, covering three execution shapes:

* a script started by the interpreter (``python app.py``), where the process
  executable lives elsewhere than the entry script;
* a frozen one-directory bundle, where executable and entry script share a
  directory;
* a frozen single-file executable that unpacks itself beneath the temp
  directory (``sys._MEIPASS``).

Contents
--------
* :class:`DefaultAppEnvironment` – the adapter.
* ``ENV_*`` constants – environment variables overriding detected values.

System Role
-----------
Selected by :func:`lib_log_config_loader.core.load_configuration` when the
caller does not inject an environment. All other components only see the
frozen :class:`~lib_log_config_loader.domain.environment.EnvironmentContext`.
"""

from __future__ import annotations

import os
import sys
import sysconfig
import tempfile
from pathlib import Path
from typing import BinaryIO, Final, Mapping

from ...observability import log_debug

ENV_BASE_DIR: Final[str] = "LIB_LOG_CONFIG_LOADER_BASE_DIR"
ENV_APP_CONFIG: Final[str] = "LIB_LOG_CONFIG_LOADER_APP_CONFIG"
ENV_SEARCH_PATH: Final[str] = "LIB_LOG_CONFIG_LOADER_PATH"

_PACKAGE_DIR: Final[Path] = Path(__file__).resolve().parents[2]


class DefaultAppEnvironment:
    """Answer environment questions for the current process.

    Why
    ----
    Detection reads interpreter globals (``sys.argv``, ``sys.frozen``,
    ``sys.executable``); every one of them can be overridden through the
    constructor so tests can describe any deployment shape.
    """

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        platform: str | None = None,
        main_file: str | None = None,
        executable: str | None = None,
        frozen: bool | None = None,
        bundle_dir: str | None = None,
        temp_dir: str | None = None,
        library_location: str | None = None,
    ) -> None:
        """Store the detection inputs.

        Parameters
        ----------
        env:
            Optional mapping layered over :data:`os.environ` (useful for
            deterministic tests).
        platform:
            Platform identifier (``sys.platform`` clone) deciding filesystem
            case sensitivity.
        main_file:
            Entry script path; defaults to ``__main__.__file__``.
        executable:
            Process executable; defaults to :data:`sys.executable`.
        frozen / bundle_dir:
            Frozen-application markers; default to ``sys.frozen`` and
            ``sys._MEIPASS``.
        temp_dir:
            User temp directory; defaults to :func:`tempfile.gettempdir`.
        library_location:
            Install location of this library; defaults to the package directory.
        """

        self.env = {**os.environ, **(env or {})}
        self.platform = platform or sys.platform
        self._main_file = main_file if main_file is not None else _detect_main_file()
        self._executable = executable if executable is not None else (sys.executable or "")
        self._frozen = bool(getattr(sys, "frozen", False)) if frozen is None else frozen
        self._bundle_dir = bundle_dir if bundle_dir is not None else getattr(sys, "_MEIPASS", None)
        self._temp_dir = temp_dir if temp_dir is not None else tempfile.gettempdir()
        self._library_location = library_location if library_location is not None else str(_PACKAGE_DIR)

    @property
    def base_directory(self) -> str:
        """Return the application base directory.

        Frozen applications use their bundle directory; scripts use the
        directory of the entry script; interactive sessions have none.
        """

        override = self.env.get(ENV_BASE_DIR)
        if override:
            return override
        if self._frozen:
            if self._bundle_dir:
                return self._bundle_dir
            return os.path.dirname(self._executable)
        return self.entry_binary_location

    @property
    def entry_binary_location(self) -> str:
        if not self._main_file:
            return ""
        return os.path.dirname(os.path.abspath(self._main_file))

    @property
    def entry_binary_file_name(self) -> str:
        if not self._main_file:
            return ""
        return os.path.basename(self._main_file)

    @property
    def current_process_file_path(self) -> str:
        return self._executable

    @property
    def app_configuration_file(self) -> str | None:
        return self.env.get(ENV_APP_CONFIG) or None

    @property
    def supplementary_search_paths(self) -> tuple[str, ...]:
        """Return directories listed in ``LIB_LOG_CONFIG_LOADER_PATH``."""

        raw = self.env.get(ENV_SEARCH_PATH, "")
        return tuple(part for part in raw.split(os.pathsep) if part.strip())

    @property
    def user_temp_path(self) -> str:
        return self._temp_dir

    @property
    def library_location(self) -> str | None:
        return self._library_location

    @property
    def library_globally_registered(self) -> bool:
        """Return ``True`` when the library sits in the base interpreter's site-packages.

        Libraries installed inside a virtual environment or loaded from a
        source checkout belong to the application and are not global.
        """

        if sys.prefix != sys.base_prefix or not self._library_location:
            return False
        location = os.path.normcase(os.path.abspath(self._library_location))
        for key in ("purelib", "platlib"):
            root = sysconfig.get_paths().get(key)
            if root and location.startswith(os.path.normcase(os.path.abspath(root)) + os.sep):
                return True
        return False

    @property
    def case_insensitive(self) -> bool:
        """Return ``True`` on Windows and macOS default filesystems."""

        return self.platform.startswith("win") or self.platform == "darwin"

    def file_exists(self, path: str) -> bool:
        exists = os.path.isfile(path)
        if not exists:
            log_debug("candidate_missing", stage="probe", path=path)
        return exists

    def open_for_parsing(self, path: str) -> BinaryIO:
        return open(path, "rb")


def _detect_main_file() -> str:
    """Return the entry script of the running program or ``""`` when interactive."""

    main = sys.modules.get("__main__")
    return getattr(main, "__file__", None) or ""
