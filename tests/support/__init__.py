"""Shared test doubles and sandboxes for the loader suites.

``FakeAppEnvironment`` keeps files in memory and records every probe so tests
can assert on the exact search order. ``create_app_sandbox`` lays out a real
directory tree and returns a matching :class:`DefaultAppEnvironment` for the
end-to-end suites.
"""

from __future__ import annotations

from .environment import AppSandbox, FakeAppEnvironment, create_app_sandbox
from .documents import (
    MALFORMED_PLAIN,
    MALFORMED_UTF16_WITH_AUTO_RELOAD,
    MALFORMED_UTF16_WITH_THROW_EXCEPTIONS,
    MALFORMED_WITH_AUTO_RELOAD,
    MALFORMED_WITH_THROW_CONFIG_EXCEPTIONS,
    MALFORMED_WITH_THROW_EXCEPTIONS,
    SEMANTIC_ERROR_WITH_AUTO_RELOAD_ATTRIBUTE,
    SEMANTIC_ERROR_WITH_COMMENTED_MARKERS,
    VALID_CONFIG,
)

__all__ = [
    "AppSandbox",
    "FakeAppEnvironment",
    "MALFORMED_PLAIN",
    "MALFORMED_UTF16_WITH_AUTO_RELOAD",
    "MALFORMED_UTF16_WITH_THROW_EXCEPTIONS",
    "MALFORMED_WITH_AUTO_RELOAD",
    "MALFORMED_WITH_THROW_CONFIG_EXCEPTIONS",
    "MALFORMED_WITH_THROW_EXCEPTIONS",
    "SEMANTIC_ERROR_WITH_AUTO_RELOAD_ATTRIBUTE",
    "SEMANTIC_ERROR_WITH_COMMENTED_MARKERS",
    "VALID_CONFIG",
    "create_app_sandbox",
]
