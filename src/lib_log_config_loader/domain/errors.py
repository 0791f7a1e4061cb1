"""Domain-level exception hierarchy and failure classification.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the loader, and consuming
applications, plus the single place deciding which exceptions must never be
swallowed.

Contents
--------
* :class:`ConfigError` – umbrella base class; carries the host
  :class:`~lib_log_config_loader.domain.policy.ExceptionPolicy` in force when
  the error was raised.
* :class:`InvalidFormat` – structural problems while reading a configuration
  file.
* :class:`ValidationError` – well-formed documents that fail semantic checks.
* :class:`NotFound` – an explicitly requested configuration file is missing.
* :data:`FATAL_EXCEPTION_TYPES` – runtime faults that always propagate.
* :func:`must_be_rethrown_immediately` / :func:`must_be_rethrown` /
  :func:`effective_policy` – classification helpers used by the loader.

System Role
-----------
Adapters raise these exceptions; :mod:`lib_log_config_loader.core` classifies
every failure through the helpers below so the propagation rules stay
auditable in one module.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .configuration import ReadErrorPosition
    from .policy import ExceptionPolicy


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_log_config_loader``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.

    What
    ----
    ``policy`` is set when the loader escalated the host policy because the
    broken file asked for strict behaviour; callers adopt it to keep the
    escalation for subsequent loads.
    """

    def __init__(self, message: str = "", *, policy: ExceptionPolicy | None = None) -> None:
        super().__init__(message)
        self.policy = policy


class InvalidFormat(ConfigError):
    """Raised when a configuration file cannot be parsed into a configuration.

    Attributes
    ----------
    path:
        File that failed to parse, if known.
    position:
        Syntax error location when the XML itself was malformed.
    """

    def __init__(
        self,
        message: str = "",
        *,
        path: str | None = None,
        position: ReadErrorPosition | None = None,
        policy: ExceptionPolicy | None = None,
    ) -> None:
        super().__init__(message, policy=policy)
        self.path = path
        self.position = position


class ValidationError(InvalidFormat):
    """Signifies that a well-formed document failed semantic checks.

    Typical sources are rules writing to undeclared targets, unknown level
    names, or non-boolean flag attributes.
    """


class NotFound(ConfigError):
    """Represents a configuration file that was explicitly requested but is missing."""


FATAL_EXCEPTION_TYPES: Final[tuple[type[BaseException], ...]] = (MemoryError, RecursionError)
"""Runtime faults that propagate regardless of host configuration.

``BaseException`` subclasses outside :class:`Exception` (``KeyboardInterrupt``,
``SystemExit``) are never caught by the loader and need no entry here.
"""


def must_be_rethrown_immediately(exc: BaseException) -> bool:
    """Return ``True`` when *exc* belongs to :data:`FATAL_EXCEPTION_TYPES`.

    Examples
    --------
    >>> must_be_rethrown_immediately(MemoryError())
    True
    >>> must_be_rethrown_immediately(ValueError())
    False
    """

    return isinstance(exc, FATAL_EXCEPTION_TYPES)


def must_be_rethrown(exc: BaseException, policy: ExceptionPolicy) -> bool:
    """Return ``True`` when *exc* must propagate under *policy*."""

    if must_be_rethrown_immediately(exc):
        return True
    if isinstance(exc, ConfigError) and policy.propagate_config_errors:
        return True
    return policy.throw_exceptions


def effective_policy(exc: BaseException, policy: ExceptionPolicy) -> ExceptionPolicy:
    """Return the escalated policy attached to *exc*, falling back to *policy*."""

    if isinstance(exc, ConfigError) and exc.policy is not None:
        return exc.policy
    return policy
