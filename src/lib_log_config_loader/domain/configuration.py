"""Domain-level logging configuration value objects.

Purpose
-------
Anchor the immutable :class:`LoggingConfiguration` handed back to hosts once a
candidate file has been processed. The module contains no I/O; parsing lives in
:mod:`lib_log_config_loader.adapters.parsers.structured`.

Contents
--------
* :class:`ReadErrorPosition` – where a structural (syntax) parse stopped.
* :class:`TargetDefinition` – a named output target and its raw attributes.
* :class:`LoggingRule` – routing rule from logger name pattern to targets.
* :class:`LoggingConfiguration` – the parsed (or degraded) configuration,
  including :meth:`LoggingConfiguration.empty`, the rule-less fallback used to
  keep watching a broken file.

System Role
-----------
Every successful call to :func:`lib_log_config_loader.core.load_configuration`
returns an instance of :class:`LoggingConfiguration`. The object records
whether initialisation succeeded so callers can distinguish a healthy ruleset
from a degraded one.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class ReadErrorPosition:
    """Location of a syntax error reported by the structured reader.

    Its presence means the document could not be read as XML at all, as
    opposed to a well-formed document that failed semantic checks.
    """

    line: int
    column: int
    message: str = ""


@dataclass(frozen=True, slots=True)
class TargetDefinition:
    """Named output target declared under ``<targets>``."""

    name: str
    type: str
    attributes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True, slots=True)
class LoggingRule:
    """Routing rule declared under ``<rules>``.

    Attributes
    ----------
    logger_name_pattern:
        Logger name or ``*`` wildcard pattern the rule applies to.
    min_level:
        Lowest level routed by the rule.
    write_to:
        Names of targets receiving matching events.
    final:
        Stop evaluating later rules once this one matched.
    """

    logger_name_pattern: str
    min_level: str
    write_to: tuple[str, ...] = ()
    final: bool = False


@dataclass(frozen=True, slots=True)
class LoggingConfiguration:
    """Immutable logging configuration produced by the loader.

    Why
    ----
    The loader stops at the first existing candidate even when its content is
    invalid, so the result must say whether it is usable
    (:attr:`initialize_succeeded`) and whether the host should keep watching
    its backing file (:attr:`auto_reload`).

    Examples
    --------
    >>> cfg = LoggingConfiguration.empty("/app/Logging.config", auto_reload=True)
    >>> cfg.auto_reload, cfg.rules, cfg.file_path
    (True, (), '/app/Logging.config')
    >>> cfg.initialize_succeeded
    True
    """

    file_path: str | None = None
    initialize_succeeded: bool = True
    auto_reload: bool = False
    throw_exceptions: bool | None = None
    throw_config_exceptions: bool | None = None
    variables: Mapping[str, str] = field(default_factory=dict)
    targets: tuple[TargetDefinition, ...] = ()
    rules: tuple[LoggingRule, ...] = ()
    read_error: ReadErrorPosition | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @classmethod
    def empty(cls, file_path: str | None, *, auto_reload: bool) -> LoggingConfiguration:
        """Return a structurally valid configuration with no targets or rules.

        The result stays anchored to *file_path* so a file watcher can pick up a
        later fix to the broken file.
        """

        return cls(file_path=file_path, initialize_succeeded=True, auto_reload=auto_reload)

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when no targets, rules or variables were configured."""

        return not (self.targets or self.rules or self.variables)

    def find_target(self, name: str) -> TargetDefinition | None:
        """Return the target called *name* (case-insensitive) or ``None``."""

        lowered = name.lower()
        for target in self.targets:
            if target.name.lower() == lowered:
                return target
        return None

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly snapshot of the configuration.

        Examples
        --------
        >>> LoggingConfiguration.empty(None, auto_reload=False).as_dict()["rules"]
        []
        """

        return {
            "file_path": self.file_path,
            "initialize_succeeded": self.initialize_succeeded,
            "auto_reload": self.auto_reload,
            "throw_exceptions": self.throw_exceptions,
            "throw_config_exceptions": self.throw_config_exceptions,
            "variables": dict(self.variables),
            "targets": [
                {"name": target.name, "type": target.type, "attributes": dict(target.attributes)}
                for target in self.targets
            ],
            "rules": [
                {
                    "logger": rule.logger_name_pattern,
                    "min_level": rule.min_level,
                    "write_to": list(rule.write_to),
                    "final": rule.final,
                }
                for rule in self.rules
            ],
            "read_error": (
                None
                if self.read_error is None
                else {
                    "line": self.read_error.line,
                    "column": self.read_error.column,
                    "message": self.read_error.message,
                }
            ),
        }

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise :meth:`as_dict` to JSON."""

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False)
