"""Public package surface for ``lib_log_config_loader``.

Exposes the loader entry points, the configuration value object, the error
taxonomy, and the observability hooks so ``import lib_log_config_loader`` is
all a host application needs.
"""

from __future__ import annotations

from .adapters.path_resolvers.default import CONFIG_EXTENSION, DEFAULT_CONFIG_FILE_NAME
from .core import ConfigurationFileLoader, LoadAttempt, LoadAttemptResult, load_configuration
from .domain.configuration import LoggingConfiguration
from .domain.errors import ConfigError, InvalidFormat, NotFound, ValidationError
from .domain.policy import ExceptionPolicy
from .observability import bind_trace_id, get_logger

__all__ = [
    "CONFIG_EXTENSION",
    "DEFAULT_CONFIG_FILE_NAME",
    "ConfigError",
    "ConfigurationFileLoader",
    "ExceptionPolicy",
    "InvalidFormat",
    "LoadAttempt",
    "LoadAttemptResult",
    "LoggingConfiguration",
    "NotFound",
    "ValidationError",
    "bind_trace_id",
    "get_logger",
    "load_configuration",
]
