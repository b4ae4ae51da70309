"""Tests for centralized logging system."""

from __future__ import annotations

from tgzpack.core.config import ConfigResolver
from tgzpack.core.log_bus import LogRecord, get_log_bus
from tgzpack.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_logger,
    get_verbosity,
    set_colors,
    set_verbosity,
)


def _collect(level_name: str | None = None) -> list[LogRecord]:
    collected: list[LogRecord] = []
    if level_name is None:
        get_log_bus().subscribe_all(collected.append)
    else:
        get_log_bus().subscribe(level_name, collected.append)
    return collected


class TestVerbosityLevel:
    def test_verbosity_ordering(self):
        assert VerbosityLevel.QUIET < VerbosityLevel.NORMAL < VerbosityLevel.VERBOSE
        assert VerbosityLevel.VERBOSE < VerbosityLevel.DEBUG

    def test_set_get_verbosity(self):
        set_verbosity(2)
        assert get_verbosity() == VerbosityLevel.VERBOSE

        set_verbosity(VerbosityLevel.DEBUG)
        assert get_verbosity() == VerbosityLevel.DEBUG


def test_record_plain_text_and_logger_name() -> None:
    collected = _collect()

    get_logger("bus_test").info("hello")

    assert len(collected) == 1
    assert collected[0].plain == "[info] hello"
    assert collected[0].logger_name == "bus_test"


def test_quiet_suppresses_info_but_not_errors(capsys) -> None:
    collected = _collect()
    set_verbosity(VerbosityLevel.QUIET)
    log = get_logger("bus_test")

    log.info("hidden")
    log.debug("hidden")
    log.warning("careful")
    log.error("broken")

    assert [r.level_name for r in collected] == ["WARNING", "ERROR"]
    err = capsys.readouterr().err
    assert "[warning] careful" in err
    assert "[error] broken" in err


def test_level_subscription_filters() -> None:
    errors = _collect("ERROR")
    log = get_logger("bus_test")

    log.info("a")
    log.error("b")

    assert [r.plain for r in errors] == ["[error] b"]


def test_failing_subscriber_does_not_break_publishing(capsys) -> None:
    def _boom(rec: LogRecord) -> None:
        raise RuntimeError("subscriber bug")

    get_log_bus().subscribe_all(_boom)
    collected = _collect()

    get_logger("bus_test").info("still delivered")

    assert [r.plain for r in collected] == ["[info] still delivered"]
    assert "LogBus subscriber raised" in capsys.readouterr().err


def test_unsubscribe() -> None:
    bus = get_log_bus()
    collected: list[LogRecord] = []
    bus.subscribe_all(collected.append)
    bus.unsubscribe_all(collected.append)

    get_logger("bus_test").info("nobody listens")

    assert collected == []


def test_apply_logging_policy(tmp_path) -> None:
    resolver = ConfigResolver(
        cli_args={"logging": {"level": "verbose"}},
        user_config_path=tmp_path / "u.yaml",
        system_config_path=tmp_path / "s.yaml",
    )

    apply_logging_policy(resolver.resolve_logging_policy())

    assert get_verbosity() == VerbosityLevel.VERBOSE


def test_plain_output_without_colors(capsys) -> None:
    set_colors(False)

    get_logger("bus_test").info("no color")

    assert capsys.readouterr().out == "[info] no color\n"
