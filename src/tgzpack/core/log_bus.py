"""Publish/subscribe fan-out for log records.

Every line emitted by the core logger is published here so that callers
(tests, embedding applications) can capture pack/unpack progress without
scraping stdout. Subscriber exceptions never break publishing.
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass

Subscriber = Callable[["LogRecord"], None]


@dataclass(frozen=True)
class LogRecord:
    level_name: str
    plain: str
    logger_name: str


class LogBus:
    def __init__(self) -> None:
        self._by_level: dict[str, list[Subscriber]] = {}
        self._all: list[Subscriber] = []

    def subscribe(self, level_name: str, cb: Subscriber) -> None:
        self._by_level.setdefault(level_name, []).append(cb)

    def unsubscribe(self, level_name: str, cb: Subscriber) -> None:
        subs = self._by_level.get(level_name, [])
        if cb in subs:
            subs.remove(cb)
        if not subs:
            self._by_level.pop(level_name, None)

    def subscribe_all(self, cb: Subscriber) -> None:
        self._all.append(cb)

    def unsubscribe_all(self, cb: Subscriber) -> None:
        if cb in self._all:
            self._all.remove(cb)

    def publish(self, record: LogRecord) -> None:
        targets = list(self._all) + list(self._by_level.get(record.level_name, []))
        for cb in targets:
            try:
                cb(record)
            except Exception:
                # Never route through the logger here (recursion).
                with contextlib.suppress(Exception):
                    sys.stderr.write(
                        "LogBus subscriber raised; suppressed.\n" + traceback.format_exc()
                    )

    def clear(self) -> None:
        self._by_level.clear()
        self._all.clear()


_LOG_BUS: LogBus | None = None


def get_log_bus() -> LogBus:
    global _LOG_BUS
    if _LOG_BUS is None:
        _LOG_BUS = LogBus()
    return _LOG_BUS
