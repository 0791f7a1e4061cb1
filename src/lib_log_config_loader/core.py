"""Composition root for ``lib_log_config_loader``.

Purpose
-------
Provide the entry points that orchestrate candidate resolution, structured
parsing, failure classification and the raw-text fallback. Adapters are wired
here and nowhere else.

Contents
--------
* :class:`LoadAttemptResult` / :class:`LoadAttempt` – tri-state outcome of
  probing one candidate.
* :class:`ConfigurationFileLoader` – the resilient loader.
* :func:`load_configuration` – high-level API returning a
  :class:`LoggingConfiguration` or ``None``.

System Role
-----------
Hosts call :func:`load_configuration` at start-up and again from their own
reload trigger. Each call captures a fresh
:class:`~lib_log_config_loader.domain.environment.EnvironmentContext`, so the
loader keeps no state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .adapters.environment.default import DefaultAppEnvironment
from .adapters.parsers.structured import XmlConfigurationParser
from .adapters.path_resolvers.default import CandidatePathResolver
from .application.ports import AppEnvironment, ConfigurationParser
from .application.scan import NO_FLAGS, RawScanFlags, decode_raw_text, scan_markers
from .domain.configuration import LoggingConfiguration
from .domain.environment import EnvironmentContext
from .domain.errors import (
    ConfigError,
    InvalidFormat,
    NotFound,
    ValidationError,
    effective_policy,
    must_be_rethrown,
    must_be_rethrown_immediately,
)
from .domain.policy import ExceptionPolicy
from .observability import bind_trace_id, log_debug, log_error, log_info, log_warning, make_event


class LoadAttemptResult(Enum):
    """Outcome of probing a single candidate path."""

    NOT_FOUND = "not_found"
    SKIPPED = "skipped"
    PROCESSED = "processed"


@dataclass(frozen=True, slots=True)
class LoadAttempt:
    """Result of :meth:`ConfigurationFileLoader.try_load`.

    ``configuration`` is only set for :attr:`LoadAttemptResult.PROCESSED`; it
    may be degraded (``initialize_succeeded=False``) or an empty fallback.
    """

    outcome: LoadAttemptResult
    path: str
    configuration: LoggingConfiguration | None = None


class ConfigurationFileLoader:
    """Locate and load the logging configuration file.

    Why
    ----
    A broken or missing logging configuration must never take the host down
    unless the host, or the file itself, opts into strict failure.

    What
    ----
    Walks the candidate sequence, stops at the first existing file, and
    degrades structural failures into either the parsed-but-failed object or an
    empty reload-enabled configuration.

    Parameters
    ----------
    environment:
        Environment provider; defaults to :class:`DefaultAppEnvironment`.
    parser:
        Structured parser; defaults to :class:`XmlConfigurationParser`.
    policy:
        Host exception policy; defaults to the lenient :class:`ExceptionPolicy`.
    """

    def __init__(
        self,
        environment: AppEnvironment | None = None,
        parser: ConfigurationParser | None = None,
        *,
        policy: ExceptionPolicy | None = None,
    ) -> None:
        self._environment = environment if environment is not None else DefaultAppEnvironment()
        self._parser = parser if parser is not None else XmlConfigurationParser()
        self.policy = policy if policy is not None else ExceptionPolicy()

    def candidates(self, file_name: str | None = None) -> Iterator[str]:
        """Return the candidate sequence for *file_name* against a fresh environment snapshot."""

        return self._resolver().candidates(file_name)

    def resolve_config_file(self, file_name: str) -> str:
        """Resolve an explicit *file_name* to an existing candidate when it is relative."""

        return self._resolver().resolve_config_file(file_name, self._environment.file_exists)

    def load(self, file_name: str | None = None) -> LoggingConfiguration | None:
        """Return the first loadable configuration or ``None``.

        Why
        ----
        Hosts call this at start-up without knowing where the file lives; a
        missing configuration is normal and must not raise.

        Parameters
        ----------
        file_name:
            Explicit file to load. Relative names are resolved against the
            candidate locations; I/O errors for explicit files propagate.

        Returns
        -------
        LoggingConfiguration | None
            The configuration of the first existing candidate (possibly
            degraded), or ``None`` when no candidate exists.

        Raises
        ------
        InvalidFormat
            When the host policy, or a throw marker inside a malformed file,
            requests strict failure. ``exc.policy`` holds the escalated policy.
        MemoryError, RecursionError
            Always propagated.
        """

        if file_name:
            path = self.resolve_config_file(file_name)
            return self._load_file(path, self.policy)

        for path in self.candidates():
            attempt = self.try_load(path)
            if attempt.outcome is LoadAttemptResult.PROCESSED:
                return attempt.configuration
        log_info("configuration_missing", **make_event("load", None))
        return None

    def try_load(self, path: str) -> LoadAttempt:
        """Probe one candidate and classify the outcome.

        Existing files always end the search, whatever their content; I/O
        failures and non-propagated errors turn into
        :attr:`LoadAttemptResult.SKIPPED`.
        """

        try:
            if not self._environment.file_exists(path):
                return LoadAttempt(LoadAttemptResult.NOT_FOUND, path)
            log_debug("candidate_found", **make_event("load", path))
            return LoadAttempt(LoadAttemptResult.PROCESSED, path, self._load_file(path, self.policy))
        except OSError as exc:
            log_warning("candidate_skipped", **make_event("load", path, {"error": str(exc)}))
        except Exception as exc:
            log_error("candidate_failed", **make_event("load", path, {"error": repr(exc)}))
            policy = effective_policy(exc, self.policy)
            if policy.propagate_config_errors or must_be_rethrown(exc, policy):
                raise
        return LoadAttempt(LoadAttemptResult.SKIPPED, path)

    def _load_file(self, path: str, policy: ExceptionPolicy) -> LoggingConfiguration:
        """Parse *path*, falling back on the raw-text scan when parsing fails."""

        try:
            configuration = self._parse(path, strict=policy.propagate_config_errors)
        except OSError:
            raise
        except Exception as exc:
            if must_be_rethrown(exc, policy) or policy.propagate_config_errors:
                raise
            flags = self._scan_raw_text(path, syntax_error=getattr(exc, "position", None) is not None)
            if flags.requests_propagation:
                escalated = policy.escalate(flags)
                log_warning("config_escalated", **make_event("load", path, {"error": repr(exc)}))
                if isinstance(exc, ConfigError):
                    exc.policy = escalated
                    raise
                raise InvalidFormat(f"Failed to load {path}: {exc}", path=path, policy=escalated) from exc
            log_warning("config_fallback_empty", **make_event("load", path, {"auto_reload": flags.auto_reload}))
            return LoggingConfiguration.empty(path, auto_reload=flags.auto_reload)

        if configuration.initialize_succeeded:
            return configuration
        return self._recover(configuration, path, policy)

    def _recover(
        self,
        configuration: LoggingConfiguration,
        path: str,
        policy: ExceptionPolicy,
    ) -> LoggingConfiguration:
        """Decide what to return for a parse that completed but failed."""

        flags = self._scan_raw_text(path, syntax_error=configuration.read_error is not None)
        if flags.requests_propagation:
            escalated = policy.escalate(flags)
            log_warning("config_escalated", **make_event("load", path, {"strict": escalated.propagate_config_errors}))
            try:
                # Parse again under the escalated policy so the real exception surfaces.
                return self._parse(path, strict=escalated.propagate_config_errors)
            except ConfigError as exc:
                exc.policy = escalated
                raise
        if flags.auto_reload and not configuration.auto_reload:
            log_warning("config_fallback_empty", **make_event("load", path, {"auto_reload": True}))
            return LoggingConfiguration.empty(path, auto_reload=True)
        return configuration

    def _parse(self, path: str, *, strict: bool) -> LoggingConfiguration:
        with self._environment.open_for_parsing(path) as stream:
            return self._parser.parse(stream, path, strict=strict)

    def _scan_raw_text(self, path: str, *, syntax_error: bool) -> RawScanFlags:
        """Read *path* again as text and collect marker flags.

        Any failure while reading or scanning (the file vanished, the stream
        broke) is logged and yields no flags; only fatal faults propagate.
        """

        try:
            with self._environment.open_for_parsing(path) as stream:
                content = decode_raw_text(stream.read())
            flags = scan_markers(content, syntax_error=syntax_error)
        except Exception as exc:
            if must_be_rethrown_immediately(exc):
                raise
            log_error("config_scan_failed", **make_event("scan", path, {"error": repr(exc)}))
            return NO_FLAGS
        log_debug(
            "config_scanned",
            **make_event(
                "scan",
                path,
                {
                    "throw_exceptions": flags.throw_exceptions,
                    "throw_config_exceptions": flags.throw_config_exceptions,
                    "auto_reload": flags.auto_reload,
                },
            ),
        )
        return flags

    def _resolver(self) -> CandidatePathResolver:
        return CandidatePathResolver(EnvironmentContext.capture(self._environment))


def load_configuration(
    file_name: str | None = None,
    *,
    environment: AppEnvironment | None = None,
    parser: ConfigurationParser | None = None,
    policy: ExceptionPolicy | None = None,
    trace_id: str | None = None,
) -> LoggingConfiguration | None:
    """Load the logging configuration with the default adapters.

    Why
    ----
    Most hosts only need one call; adapters and policy stay injectable for
    tests and unusual deployments.

    What
    ----
    Binds *trace_id* for the diagnostics of this call, builds a
    :class:`ConfigurationFileLoader` (policy defaulting to
    :meth:`ExceptionPolicy.from_env`) and delegates to
    :meth:`ConfigurationFileLoader.load`.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from pathlib import Path
    >>> tmp = TemporaryDirectory()
    >>> env = DefaultAppEnvironment(
    ...     env={"LIB_LOG_CONFIG_LOADER_BASE_DIR": tmp.name},
    ...     main_file="",
    ...     executable="",
    ...     library_location="",
    ... )
    >>> load_configuration(environment=env) is None
    True
    >>> _ = (Path(tmp.name) / "Logging.config").write_text('<logging autoReload="true"/>', encoding="utf-8")
    >>> load_configuration(environment=env).auto_reload
    True
    >>> tmp.cleanup()
    """

    bind_trace_id(trace_id)
    loader = ConfigurationFileLoader(
        environment,
        parser,
        policy=policy if policy is not None else ExceptionPolicy.from_env(),
    )
    return loader.load(file_name)


__all__ = [
    "ConfigError",
    "ConfigurationFileLoader",
    "ExceptionPolicy",
    "InvalidFormat",
    "LoadAttempt",
    "LoadAttemptResult",
    "LoggingConfiguration",
    "NotFound",
    "ValidationError",
    "load_configuration",
]
