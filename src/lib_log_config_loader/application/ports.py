"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the loader can
orchestrate discovery and parsing without depending on concrete
implementations.

Contents
--------
* :class:`AppEnvironment` – answers where the application lives and opens
  candidate files.
* :class:`CandidateResolver` – yields ordered candidate configuration paths.
* :class:`ConfigurationParser` – parses a byte stream into a
  :class:`~lib_log_config_loader.domain.configuration.LoggingConfiguration`.

System Role
-----------
These protocols enforce Dependency Inversion (DIP). Platform differences live
behind :class:`AppEnvironment`, selected at composition time, so tests can swap
in an in-memory fake.
"""

from __future__ import annotations

from typing import BinaryIO, Iterator, Protocol, Sequence, runtime_checkable

from ..domain.configuration import LoggingConfiguration


@runtime_checkable
class AppEnvironment(Protocol):
    """Capability interface over the hosting process and filesystem.

    Why
    ----
    Existence checks and stream opening are the only filesystem I/O the loader
    performs; routing them through one object keeps every other component pure.
    """

    @property
    def base_directory(self) -> str:
        """Application base directory or ``""`` when unknown."""

    @property
    def entry_binary_location(self) -> str:
        """Directory of the entry script or frozen bundle."""

    @property
    def entry_binary_file_name(self) -> str:
        """File name of the entry script."""

    @property
    def current_process_file_path(self) -> str:
        """Executable path of the running process."""

    @property
    def app_configuration_file(self) -> str | None:
        """Host-identified configuration file, if any."""

    @property
    def supplementary_search_paths(self) -> Sequence[str]:
        """Extra directories probed after the primary locations."""

    @property
    def user_temp_path(self) -> str:
        """Temp directory used by single-file executables."""

    @property
    def library_location(self) -> str | None:
        """Install location of this library."""

    @property
    def library_globally_registered(self) -> bool:
        """Whether the library is installed system-wide."""

    @property
    def case_insensitive(self) -> bool:
        """Whether the filesystem ignores case."""

    def file_exists(self, path: str) -> bool:
        """Return ``True`` when *path* names an existing file."""

    def open_for_parsing(self, path: str) -> BinaryIO:
        """Open *path* for binary reading; raises :class:`OSError` on failure."""


@runtime_checkable
class CandidateResolver(Protocol):
    """Produce the ordered, de-duplicated candidate configuration paths."""

    def candidates(self, file_name: str | None = None) -> Iterator[str]:
        """Yield candidate paths lazily; each call restarts the sequence."""


@runtime_checkable
class ConfigurationParser(Protocol):
    """Parse a configuration stream.

    Why
    ----
    Keep format concerns out of the loader. In lenient mode problems are
    reported through ``initialize_succeeded=False`` (and ``read_error`` for
    syntax errors); in strict mode they raise
    :class:`~lib_log_config_loader.domain.errors.InvalidFormat`.
    """

    def parse(self, stream: BinaryIO, path: str | None, *, strict: bool = False) -> LoggingConfiguration:
        """Parse *stream* originating from *path*."""
