"""Host exception policy as an immutable value.

Purpose
-------
Describe whether the host wants configuration failures surfaced as exceptions.
The policy is passed into the loader and, when raw-text markers in a broken
file request strict behaviour, a *new* escalated policy is produced and handed
back to the caller instead of flipping process-wide flags.

Contents
--------
* :class:`ExceptionPolicy` – ``throw_exceptions`` / ``throw_config_exceptions``
  pair plus the derived :attr:`ExceptionPolicy.propagate_config_errors`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final, Mapping

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..application.scan import RawScanFlags

ENV_THROW_EXCEPTIONS: Final[str] = "LIB_LOG_CONFIG_LOADER_THROW_EXCEPTIONS"
ENV_THROW_CONFIG_EXCEPTIONS: Final[str] = "LIB_LOG_CONFIG_LOADER_THROW_CONFIG_EXCEPTIONS"


@dataclass(frozen=True, slots=True)
class ExceptionPolicy:
    """Decide whether configuration failures propagate to the host.

    Attributes
    ----------
    throw_exceptions:
        Generic strict mode; every library failure propagates.
    throw_config_exceptions:
        Configuration-specific override. ``None`` defers to
        ``throw_exceptions``.

    Examples
    --------
    >>> ExceptionPolicy().propagate_config_errors
    False
    >>> ExceptionPolicy(throw_exceptions=True).propagate_config_errors
    True
    >>> ExceptionPolicy(throw_exceptions=True, throw_config_exceptions=False).propagate_config_errors
    False
    """

    throw_exceptions: bool = False
    throw_config_exceptions: bool | None = None

    @property
    def propagate_config_errors(self) -> bool:
        """Return the effective strictness for configuration errors."""

        if self.throw_config_exceptions is not None:
            return self.throw_config_exceptions
        return self.throw_exceptions

    def escalate(self, flags: RawScanFlags) -> ExceptionPolicy:
        """Return a copy honouring the throw markers recovered from raw text.

        The generic marker wins over the configuration-specific one, matching
        the order in which the markers are checked.
        """

        if flags.throw_exceptions:
            return replace(self, throw_exceptions=True)
        if flags.throw_config_exceptions:
            return replace(self, throw_config_exceptions=True)
        return self

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ExceptionPolicy:
        """Build a policy from ``LIB_LOG_CONFIG_LOADER_THROW_*`` variables.

        Examples
        --------
        >>> ExceptionPolicy.from_env({'LIB_LOG_CONFIG_LOADER_THROW_CONFIG_EXCEPTIONS': 'TRUE'})
        ExceptionPolicy(throw_exceptions=False, throw_config_exceptions=True)
        >>> ExceptionPolicy.from_env({})
        ExceptionPolicy(throw_exceptions=False, throw_config_exceptions=None)
        """

        source = os.environ if env is None else env
        throw_exceptions = _coerce_flag(source.get(ENV_THROW_EXCEPTIONS))
        return cls(
            throw_exceptions=bool(throw_exceptions),
            throw_config_exceptions=_coerce_flag(source.get(ENV_THROW_CONFIG_EXCEPTIONS)),
        )


def _coerce_flag(value: str | None) -> bool | None:
    """Coerce an environment string to ``bool``; unknown or blank values yield ``None``."""

    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in {"true", "1", "yes", "on"}:
        return True
    if lowered in {"false", "0", "no", "off"}:
        return False
    return None
