"""Structured XML parser for logging configuration files.

Purpose
-------
Implement :class:`lib_log_config_loader.application.ports.ConfigurationParser`
on top of :mod:`xml.etree.ElementTree`. The adapter converts a document such as::

    <logging autoReload="true" throwConfigExceptions="false">
      <variable name="logDir" value="/var/log/app"/>
      <targets>
        <target name="file" type="File" fileName="${logDir}/app.log"/>
      </targets>
      <rules>
        <logger name="*" minlevel="Info" writeTo="file"/>
      </rules>
    </logging>

into a :class:`~lib_log_config_loader.domain.configuration.LoggingConfiguration`.
A ``<logging>`` section nested inside a ``<configuration>`` root is accepted
as well.

Contents
--------
* :data:`LEVELS` – recognised level names.
* :class:`XmlConfigurationParser` – lenient/strict parser.
* :class:`_ConfigurationBuilder` – walks the element tree and records errors.

System Role
-----------
Invoked by :class:`lib_log_config_loader.core.ConfigurationFileLoader`. In
lenient mode syntax errors come back as ``read_error`` and semantic errors as
``initialize_succeeded=False``; strict mode raises
:class:`~lib_log_config_loader.domain.errors.InvalidFormat` or
:class:`~lib_log_config_loader.domain.errors.ValidationError`.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import BinaryIO, Final

from ...domain.configuration import LoggingConfiguration, LoggingRule, ReadErrorPosition, TargetDefinition
from ...domain.errors import InvalidFormat, ValidationError
from ...observability import log_debug, log_error

LEVELS: Final[tuple[str, ...]] = ("trace", "debug", "info", "warn", "error", "fatal", "off")

_ROOT_TAG: Final[str] = "logging"
_HOST_ROOT_TAG: Final[str] = "configuration"


class XmlConfigurationParser:
    """Parse XML logging configuration documents."""

    def parse(self, stream: BinaryIO, path: str | None, *, strict: bool = False) -> LoggingConfiguration:
        """Return the configuration read from *stream*.

        Why
        ----
        The loader needs to know *how* a parse failed: a syntax error (the
        reader gave up, ``read_error`` set) enables the raw-text marker scan,
        while a semantic error leaves a partially populated object.

        Parameters
        ----------
        stream:
            Binary stream positioned at the start of the document. Read errors
            (:class:`OSError`) propagate unchanged.
        path:
            Originating file path, recorded on the result.
        strict:
            Raise instead of returning a failed configuration.

        Examples
        --------
        >>> from io import BytesIO
        >>> parser = XmlConfigurationParser()
        >>> cfg = parser.parse(BytesIO(b'<logging autoReload="true"/>'), None)
        >>> cfg.initialize_succeeded, cfg.auto_reload
        (True, True)
        >>> broken = parser.parse(BytesIO(b'<logging>'), None)
        >>> broken.initialize_succeeded, broken.read_error is not None
        (False, True)
        """

        payload = stream.read()
        log_debug("config_file_read", stage="parse", path=path, size=len(payload))
        try:
            root = ET.fromstring(payload)
        except ET.ParseError as exc:
            line, column = exc.position
            position = ReadErrorPosition(line=line, column=column, message=str(exc))
            log_error("config_file_invalid", stage="parse", path=path, error=str(exc), line=line, column=column)
            if strict:
                raise InvalidFormat(f"Invalid XML in {path}: {exc}", path=path, position=position) from exc
            return LoggingConfiguration(file_path=path, initialize_succeeded=False, read_error=position)

        configuration = _ConfigurationBuilder(path, strict=strict).build(root)
        if configuration.initialize_succeeded:
            log_debug(
                "config_file_loaded",
                stage="parse",
                path=path,
                targets=len(configuration.targets),
                rules=len(configuration.rules),
            )
        return configuration


class _ConfigurationBuilder:
    """Translate an element tree into a configuration, collecting semantic errors."""

    def __init__(self, path: str | None, *, strict: bool) -> None:
        self.path = path
        self.strict = strict
        self.errors: list[str] = []

    def build(self, root: ET.Element) -> LoggingConfiguration:
        section = self._locate_section(root)
        if section is None:
            self._fail(f"Expected <{_ROOT_TAG}> root element, found <{_local_name(root.tag)}>")
            return LoggingConfiguration(file_path=self.path, initialize_succeeded=False)

        attributes = _attributes(section)
        auto_reload = self._flag(attributes, "autoreload")
        throw_exceptions = self._flag(attributes, "throwexceptions")
        throw_config_exceptions = self._flag(attributes, "throwconfigexceptions")

        variables: dict[str, str] = {}
        targets: list[TargetDefinition] = []
        rules: list[LoggingRule] = []
        for child in section:
            tag = _local_name(child.tag).lower()
            if tag == "variable":
                self._read_variable(child, variables)
            elif tag == "targets":
                targets.extend(self._read_targets(child, targets))
            elif tag == "rules":
                rules.extend(self._read_rules(child, targets))
            else:
                log_debug("config_element_ignored", stage="parse", path=self.path, element=tag)

        return LoggingConfiguration(
            file_path=self.path,
            initialize_succeeded=not self.errors,
            auto_reload=bool(auto_reload),
            throw_exceptions=throw_exceptions,
            throw_config_exceptions=throw_config_exceptions,
            variables=variables,
            targets=tuple(targets),
            rules=tuple(rules),
        )

    def _locate_section(self, root: ET.Element) -> ET.Element | None:
        tag = _local_name(root.tag).lower()
        if tag == _ROOT_TAG:
            return root
        if tag == _HOST_ROOT_TAG:
            for child in root:
                if _local_name(child.tag).lower() == _ROOT_TAG:
                    return child
        return None

    def _read_variable(self, element: ET.Element, variables: dict[str, str]) -> None:
        attributes = _attributes(element)
        name = attributes.get("name", "").strip()
        if not name:
            self._fail("<variable> requires a name attribute")
            return
        variables[name] = attributes.get("value", "")

    def _read_targets(self, element: ET.Element, declared: list[TargetDefinition]) -> list[TargetDefinition]:
        known = {target.name.lower() for target in declared}
        collected: list[TargetDefinition] = []
        for child in element:
            if _local_name(child.tag).lower() != "target":
                continue
            attributes = _attributes(child)
            name = attributes.pop("name", "").strip()
            target_type = attributes.pop("type", "").strip()
            if not name or not target_type:
                self._fail("<target> requires name and type attributes")
                continue
            if name.lower() in known:
                self._fail(f"Duplicate target name: {name}")
                continue
            known.add(name.lower())
            collected.append(TargetDefinition(name=name, type=target_type, attributes=attributes))
        return collected

    def _read_rules(self, element: ET.Element, targets: list[TargetDefinition]) -> list[LoggingRule]:
        known = {target.name.lower() for target in targets}
        collected: list[LoggingRule] = []
        for child in element:
            if _local_name(child.tag).lower() != "logger":
                continue
            attributes = _attributes(child)
            min_level = attributes.get("minlevel", "Trace").strip()
            if min_level.lower() not in LEVELS:
                self._fail(f"Unknown level '{min_level}' in rule for {attributes.get('name', '*')}")
                continue
            write_to = tuple(part.strip() for part in attributes.get("writeto", "").split(",") if part.strip())
            missing = [name for name in write_to if name.lower() not in known]
            if missing:
                self._fail(f"Rule writes to undeclared target(s): {', '.join(missing)}")
                continue
            collected.append(
                LoggingRule(
                    logger_name_pattern=attributes.get("name", "*").strip() or "*",
                    min_level=min_level,
                    write_to=write_to,
                    final=bool(self._flag(attributes, "final")),
                )
            )
        return collected

    def _flag(self, attributes: dict[str, str], key: str) -> bool | None:
        raw = attributes.get(key)
        if raw is None:
            return None
        lowered = raw.strip().lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        self._fail(f"Attribute {key} expects true/false, got '{raw}'")
        return None

    def _fail(self, message: str) -> None:
        if self.strict:
            raise ValidationError(f"Invalid configuration in {self.path}: {message}", path=self.path)
        log_error("config_file_invalid", stage="parse", path=self.path, error=message)
        self.errors.append(message)


def _local_name(name: str) -> str:
    """Strip an ``{namespace}`` prefix from a tag or attribute name.

    Examples
    --------
    >>> _local_name('{http://www.w3.org/2001/XMLSchema-instance}type')
    'type'
    """

    return name.rsplit("}", 1)[-1]


def _attributes(element: ET.Element) -> dict[str, str]:
    """Return element attributes keyed by lowercase local name."""

    return {_local_name(key).lower(): value for key, value in element.attrib.items()}
