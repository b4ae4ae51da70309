"""Unit tests for the configured TgzService facade."""

from __future__ import annotations

from pathlib import Path

import pytest
from tree_helpers import archive_names, read_tree

from tgzpack.archive import OpPhase, TgzService
from tgzpack.core.config import ConfigResolver
from tgzpack.core.errors import ConfigError, CorruptArchiveError, SourceNotFoundError
from tgzpack.core.log_bus import LogRecord, get_log_bus


@pytest.fixture
def resolver_factory(tmp_path: Path):
    def _make(cli_args: dict | None = None) -> ConfigResolver:
        return ConfigResolver(
            cli_args=cli_args,
            user_config_path=tmp_path / "user.yaml",
            system_config_path=tmp_path / "system.yaml",
        )

    return _make


def test_defaults_come_from_config(sample_tree: Path, tmp_path: Path, resolver_factory) -> None:
    svc = TgzService(resolver_factory({"archive": {"prefix": "cfg/", "compression_level": 0}}))
    archive = tmp_path / "t.tar.gz"

    result = svc.pack(sample_tree, archive)

    assert result.prefix == "cfg/"
    assert result.compression_level == 0
    assert "cfg/x/1/file.txt" in archive_names(archive)


def test_explicit_arguments_override_config(sample_tree: Path, tmp_path: Path, resolver_factory) -> None:
    svc = TgzService(resolver_factory({"archive": {"prefix": "cfg/"}}))
    archive = tmp_path / "t.tar.gz"

    result = svc.pack(sample_tree, archive, prefix="", level=9)

    assert result.prefix == ""
    assert result.compression_level == 9
    assert "x/1/file.txt" in archive_names(archive)


def test_trace_only_when_enabled(sample_tree: Path, tmp_path: Path, resolver_factory) -> None:
    svc = TgzService(resolver_factory())

    quiet = svc.pack(sample_tree, tmp_path / "a.tar.gz")
    traced = svc.pack(sample_tree, tmp_path / "b.tar.gz", debug_trace=True)

    assert quiet.trace == []
    assert [e.phase for e in traced.trace] == [OpPhase.PLANNED, OpPhase.OK]
    assert traced.trace[1].details == {"entries": 6, "bytes": traced.total_bytes}


def test_trace_enabled_by_config(sample_tree: Path, tmp_path: Path, resolver_factory) -> None:
    svc = TgzService(resolver_factory({"archive": {"debug": {"include_trace": True}}}))
    archive = tmp_path / "a.tar.gz"
    svc.pack(sample_tree, archive)

    result = svc.unpack(archive, tmp_path / "dst")

    assert [e.op for e in result.trace] == ["unpack", "unpack"]
    assert result.trace[-1].details["files"] == 3
    assert read_tree(tmp_path / "dst") == read_tree(sample_tree)


def test_failure_is_logged_and_reraised(tmp_path: Path, resolver_factory) -> None:
    errors: list[LogRecord] = []
    get_log_bus().subscribe("ERROR", errors.append)
    svc = TgzService(resolver_factory())

    with pytest.raises(SourceNotFoundError):
        svc.pack(tmp_path / "missing", tmp_path / "a.tar.gz", include_stack=True)

    assert len(errors) == 1
    assert errors[0].plain.startswith("[error] pack failed: Source does not exist")


def test_invalid_configured_level(sample_tree: Path, tmp_path: Path, resolver_factory) -> None:
    svc = TgzService(resolver_factory({"archive": {"compression_level": 42}}))

    with pytest.raises(ConfigError):
        svc.pack(sample_tree, tmp_path / "a.tar.gz")
    assert not (tmp_path / "a.tar.gz").exists()


def test_list_entries_logs_corrupt_archive(tmp_path: Path, resolver_factory) -> None:
    errors: list[LogRecord] = []
    get_log_bus().subscribe("ERROR", errors.append)
    bad = tmp_path / "bad.tar.gz"
    bad.write_bytes(b"garbage")

    with pytest.raises(CorruptArchiveError):
        TgzService(resolver_factory()).list_entries(bad)

    assert errors and "list failed" in errors[0].plain
