"""Diagnostics for the configuration search.

Purpose
    The loader runs before the host has set up its own logging, so every probe,
    skip, fallback and escalation is reported through one quiet package logger.
    Hosts that want to see why a configuration was (not) picked attach a
    handler to ``lib_log_config_loader``.

Contents
    - ``TRACE_ID``: identifier of the load call currently running.
    - ``get_logger`` / ``bind_trace_id``: the hooks hosts use.
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: one event
      name as the message, fields under ``record.context``.
    - ``make_event``: ``stage`` / ``path`` payload shared by all call sites.

System Integration
    The resolver, the parser adapter and the loader log through these helpers;
    the domain package never logs.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_log_config_loader_trace_id", default=None)
"""Identifier bound by :func:`lib_log_config_loader.core.load_configuration`.

A start-up load and a later reload usually run in different contexts; the
identifier tells their events apart.
"""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_log_config_loader")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the package logger; silent until the host attaches a handler."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind *trace_id* to the current context, ``None`` clears it.

    Examples
    --------
    >>> bind_trace_id('reload-7')
    >>> TRACE_ID.get()
    'reload-7'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(event: str, **fields: Any) -> None:
    _emit(logging.DEBUG, event, fields)


def log_info(event: str, **fields: Any) -> None:
    _emit(logging.INFO, event, fields)


def log_warning(event: str, **fields: Any) -> None:
    """Report a candidate that was skipped or degraded."""

    _emit(logging.WARNING, event, fields)


def log_error(event: str, **fields: Any) -> None:
    """Report a candidate whose content or read failed."""

    _emit(logging.ERROR, event, fields)


def make_event(
    stage: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the fields of one search event.

    ``stage`` is one of ``"resolve"``, ``"probe"``, ``"load"``, ``"parse"`` or
    ``"scan"``; ``path`` is the candidate concerned. *payload* keys are added
    after them, so a payload cannot hide which candidate an event is about
    unless it names ``stage`` or ``path`` itself.

    Examples
    --------
    >>> make_event('scan', '/app/Logging.config', {'auto_reload': True})
    {'stage': 'scan', 'path': '/app/Logging.config', 'auto_reload': True}
    """

    event: dict[str, Any] = {"stage": stage, "path": path}
    event.update(payload or {})
    return event


def _emit(level: int, event: str, fields: Mapping[str, Any]) -> None:
    # Candidate probes are frequent; skip building the context when nobody listens.
    if not _LOGGER.isEnabledFor(level):
        return
    context: dict[str, Any] = {"trace_id": TRACE_ID.get(), **fields}
    _LOGGER.log(level, event, extra={"context": context})
