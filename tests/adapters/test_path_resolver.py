"""Candidate path resolver tests.

Each scenario pins the exact search order for one deployment shape: script
started by the interpreter, frozen one-directory bundle, frozen single-file
executable, host configuration file, interactive session.
"""

from __future__ import annotations

import os

from hypothesis import given
from hypothesis import strategies as st

from lib_log_config_loader.adapters.path_resolvers.default import (
    CONFIG_EXTENSION,
    DEFAULT_CONFIG_FILE_NAME,
    CandidatePathResolver,
)
from lib_log_config_loader.domain.environment import EnvironmentContext


def _resolver(**fields) -> CandidatePathResolver:
    defaults = {
        "base_directory": "/app",
        "entry_binary_location": "/app",
        "entry_binary_file_name": "app.py",
        "current_process_file_path": "/usr/bin/python3",
        "user_temp_path": "/tmp",
    }
    defaults.update(fields)
    return CandidatePathResolver(EnvironmentContext(**defaults))


def test_interpreter_hosted_script_order() -> None:
    """A script run by the interpreter probes base names, then entry-script derived names."""

    assert list(_resolver().candidates()) == [
        "/app/Logging.config",
        "/app/logging.config",
        "/app/app.py.logcfg",
        "/app/app.exe.logcfg",
    ]


def test_entry_location_differs_from_base() -> None:
    """Entry directory candidates follow the base directory ones, original case first."""

    resolver = _resolver(entry_binary_location="/app/entrybin")
    paths = list(resolver.candidates("App.config"))
    assert paths == [
        "/app/App.config",
        "/app/app.config",
        "/app/entrybin/App.config",
        "/app/entrybin/app.config",
    ]


def test_entry_location_equal_to_base_ignoring_case_is_skipped() -> None:
    resolver = _resolver(entry_binary_location="/APP/")
    assert list(resolver.candidates("logging.config")) == ["/app/logging.config"]


def test_frozen_single_file_executable() -> None:
    """Entry script unpacked below the temp path still counts as a published application."""

    resolver = _resolver(
        base_directory="/tmp/_MEI42",
        entry_binary_location="/tmp/_MEI42",
        current_process_file_path="/opt/tool/tool",
    )
    assert list(resolver.candidates()) == [
        "/tmp/_MEI42/Logging.config",
        "/tmp/_MEI42/logging.config",
        "/opt/tool/tool.logcfg",
        "/tmp/_MEI42/app.py.logcfg",
    ]


def test_frozen_one_directory_bundle() -> None:
    resolver = _resolver(
        base_directory="/opt/tool",
        entry_binary_location="/opt/tool",
        current_process_file_path="/opt/tool/tool",
    )
    assert list(resolver.candidates())[2:] == ["/opt/tool/tool.logcfg", "/opt/tool/app.py.logcfg"]


def test_process_without_entry_location_uses_process_stem() -> None:
    resolver = _resolver(
        base_directory="/opt/tool",
        entry_binary_location="",
        entry_binary_file_name="",
        current_process_file_path="/opt/tool/tool.exe",
    )
    assert list(resolver.candidates())[2:] == ["/opt/tool/tool.exe.logcfg", "/opt/tool/tool.py.logcfg"]


def test_host_configuration_file_replaces_process_locations() -> None:
    """A host configuration file yields its .logcfg twin plus the debug-host variant."""

    resolver = _resolver(app_configuration_file="/srv/web/web.vshost.config")
    assert list(resolver.candidates())[2:] == ["/srv/web/web.vshost.logcfg", "/srv/web/web.logcfg"]


def test_blank_host_configuration_file_is_ignored() -> None:
    resolver = _resolver(app_configuration_file="   ")
    assert "/app/app.py.logcfg" in list(resolver.candidates())


def test_missing_base_directory_falls_back_to_bare_names() -> None:
    resolver = _resolver(base_directory="", entry_binary_location="", entry_binary_file_name="", current_process_file_path="")
    assert list(resolver.candidates()) == ["Logging.config", "logging.config"]


def test_missing_base_directory_with_entry_location() -> None:
    resolver = _resolver(base_directory="", entry_binary_location="/srv/app")
    assert list(resolver.candidates("Custom.xml")) == [
        "/srv/app/Custom.xml",
        "/srv/app/custom.xml",
        "Custom.xml",
        "custom.xml",
    ]


def test_supplementary_search_paths_follow_process_locations() -> None:
    resolver = _resolver(supplementary_search_paths=("/app", "/plugins/", "   "))
    assert list(resolver.candidates())[4:] == ["/plugins/Logging.config", "/plugins/logging.config"]


def test_library_location_is_last_and_only_when_local() -> None:
    local = _resolver(library_location="/venv/site-packages/lib_log_config_loader")
    assert list(local.candidates())[-1] == "/venv/site-packages/lib_log_config_loader" + CONFIG_EXTENSION

    global_install = _resolver(
        library_location="/usr/lib/python3/site-packages/lib_log_config_loader",
        library_globally_registered=True,
    )
    assert not any(path.endswith("lib_log_config_loader.logcfg") for path in global_install.candidates())


def test_explicit_name_skips_process_and_library_locations() -> None:
    resolver = _resolver(library_location="/venv/lib_log_config_loader", supplementary_search_paths=("/plugins",))
    assert list(resolver.candidates("custom.xml")) == ["/app/custom.xml", "/plugins/custom.xml"]


def test_case_insensitive_platform_drops_lowercase_variants_and_dedups() -> None:
    resolver = _resolver(case_insensitive=True, supplementary_search_paths=("/Plugins", "/plugins"))
    assert list(resolver.candidates()) == [
        "/app/Logging.config",
        "/app/app.py.logcfg",
        "/app/app.exe.logcfg",
        "/Plugins/Logging.config",
    ]


def test_duplicate_roots_are_yielded_once() -> None:
    resolver = _resolver(entry_binary_location="/srv", supplementary_search_paths=("/srv",))
    paths = list(resolver.candidates("x.xml"))
    assert paths == ["/app/x.xml", "/srv/x.xml"]


def test_sequence_is_restartable_and_lazy() -> None:
    resolver = _resolver()
    first = resolver.candidates()
    assert next(first) == "/app/Logging.config"
    assert list(resolver.candidates()) == list(resolver.candidates())
    assert next(first) == "/app/logging.config"


def test_empty_name_behaves_like_default() -> None:
    resolver = _resolver()
    assert list(resolver.candidates("")) == list(resolver.candidates(None))
    assert list(resolver.candidates())[0].endswith(DEFAULT_CONFIG_FILE_NAME)


def test_resolve_config_file_prefers_existing_candidate() -> None:
    resolver = _resolver(entry_binary_location="/srv/entry")
    existing = {"/srv/entry/custom.xml"}
    assert resolver.resolve_config_file("custom.xml", existing.__contains__) == "/srv/entry/custom.xml"
    assert resolver.resolve_config_file("other.xml", existing.__contains__) == "other.xml"


def test_resolve_config_file_passes_absolute_paths_through() -> None:
    probes: list[str] = []

    def _exists(path: str) -> bool:
        probes.append(path)
        return True

    resolver = _resolver()
    assert resolver.resolve_config_file("/etc/app/logging.xml", _exists) == "/etc/app/logging.xml"
    assert resolver.resolve_config_file("C:\\app\\logging.xml", _exists) == "C:\\app\\logging.xml"
    assert probes == []


NAMES = st.text(alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-", min_size=1, max_size=12)
ROOTS = st.sampled_from(["/app", "/opt/service", "/srv/App"])


@given(name=NAMES, root=ROOTS)
def test_equal_roots_never_produce_duplicates(name: str, root: str) -> None:
    resolver = _resolver(base_directory=root, entry_binary_location=root)
    paths = list(resolver.candidates(name))
    expected = [os.path.join(root, name)]
    if name.lower() != name:
        expected.append(os.path.join(root, name.lower()))
    assert paths == expected


@given(name=NAMES, case_insensitive=st.booleans())
def test_default_sequence_has_no_duplicates(name: str, case_insensitive: bool) -> None:
    resolver = _resolver(
        entry_binary_location="/app/bin",
        supplementary_search_paths=("/app/bin", "/extra"),
        case_insensitive=case_insensitive,
        library_location="/venv/lib_log_config_loader",
    )
    for paths in (list(resolver.candidates(name)), list(resolver.candidates())):
        keys = [path.casefold() if case_insensitive else path for path in paths]
        assert len(keys) == len(set(keys))
