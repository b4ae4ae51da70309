"""Configuration, errors and logging shared by the archive code."""

from tgzpack.core.config import ConfigResolver, ConfigSource, LoggingPolicy
from tgzpack.core.errors import (
    CompressionLevelError,
    ConfigError,
    CorruptArchiveError,
    IOFailureError,
    OpenFailedError,
    SourceNotADirectoryError,
    SourceNotFoundError,
    TgzError,
    UnsafeEntryError,
)
from tgzpack.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_logger,
    get_verbosity,
    set_colors,
    set_verbosity,
)

__all__ = [
    "CompressionLevelError",
    "ConfigError",
    "ConfigResolver",
    "ConfigSource",
    "CorruptArchiveError",
    "IOFailureError",
    "LoggingPolicy",
    "OpenFailedError",
    "SourceNotADirectoryError",
    "SourceNotFoundError",
    "TgzError",
    "UnsafeEntryError",
    "VerbosityLevel",
    "apply_logging_policy",
    "get_logger",
    "get_verbosity",
    "set_colors",
    "set_verbosity",
]
