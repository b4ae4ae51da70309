"""Centralized logging for tgzpack.

Four verbosity levels:
- QUIET (0): warnings + errors
- NORMAL (1): info + warnings + errors
- VERBOSE (2): per-operation detail (skipped entries, resolved options)
- DEBUG (3): every archive entry

Usage:
    from tgzpack.core.logging import get_logger, set_verbosity

    log = get_logger(__name__)
    set_verbosity(3)

    log.debug("add x/1/file.txt (5 bytes)")
    log.info("packed 3 entries into out.tar.gz")
"""

from __future__ import annotations

import sys
from enum import IntEnum

from tgzpack.core.config import LoggingPolicy
from tgzpack.core.log_bus import LogRecord, get_log_bus


class VerbosityLevel(IntEnum):
    """Verbosity levels for tgzpack."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


_VERBOSITY: VerbosityLevel = VerbosityLevel.NORMAL
_USE_COLORS: bool = True


def set_verbosity(level: int | VerbosityLevel) -> None:
    """Set global verbosity level.

    Args:
        level: Verbosity level (0-3 or VerbosityLevel enum)
    """
    global _VERBOSITY
    _VERBOSITY = VerbosityLevel(level)


def get_verbosity() -> VerbosityLevel:
    return _VERBOSITY


def apply_logging_policy(policy: LoggingPolicy) -> None:
    """Map a resolved LoggingPolicy onto the global verbosity."""
    if policy.emit_debug:
        set_verbosity(VerbosityLevel.DEBUG)
    elif policy.emit_verbose:
        set_verbosity(VerbosityLevel.VERBOSE)
    elif policy.emit_info:
        set_verbosity(VerbosityLevel.NORMAL)
    else:
        set_verbosity(VerbosityLevel.QUIET)


def set_colors(enabled: bool) -> None:
    """Enable or disable ANSI colors on tty output."""
    global _USE_COLORS
    _USE_COLORS = enabled


class TgzLogger:
    """Logger with verbosity support."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "VERBOSE": "\033[34m",  # Blue
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "RESET": "\033[0m",
    }

    def __init__(self, name: str):
        self.name = name

    def _format_message(self, level_name: str, message: str) -> str:
        if _USE_COLORS and sys.stdout.isatty():
            color = self.COLORS.get(level_name, "")
            reset = self.COLORS["RESET"]
            return f"{color}[{level_name.lower()}]{reset} {message}"
        return f"[{level_name.lower()}] {message}"

    def _log(self, level: VerbosityLevel, level_name: str, message: str) -> None:
        """Publish to the log bus and print, if the level is enabled.

        Errors pass QUIET as their level, so they are always emitted.
        """
        if level > _VERBOSITY:
            return

        plain = f"[{level_name.lower()}] {message}"
        get_log_bus().publish(LogRecord(level_name=level_name, plain=plain, logger_name=self.name))

        stream = sys.stderr if level_name in ("WARNING", "ERROR") else sys.stdout
        print(self._format_message(level_name, message), file=stream)

    def debug(self, message: str) -> None:
        self._log(VerbosityLevel.DEBUG, "DEBUG", message)

    def verbose(self, message: str) -> None:
        self._log(VerbosityLevel.VERBOSE, "VERBOSE", message)

    def info(self, message: str) -> None:
        self._log(VerbosityLevel.NORMAL, "INFO", message)

    def warning(self, message: str) -> None:
        self._log(VerbosityLevel.QUIET, "WARNING", message)

    def error(self, message: str) -> None:
        self._log(VerbosityLevel.QUIET, "ERROR", message)


_LOGGERS: dict[str, TgzLogger] = {}


def get_logger(name: str = __name__) -> TgzLogger:
    """Get (or create) the logger registered under ``name``."""
    if name not in _LOGGERS:
        _LOGGERS[name] = TgzLogger(name)
    return _LOGGERS[name]
