"""Error hierarchy with friendly messages."""

from __future__ import annotations


class TgzError(Exception):
    """Base exception for all tgzpack errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(TgzError):
    """Configuration error."""

    pass


class CompressionLevelError(TgzError):
    """Compression level outside the supported range."""

    def __init__(self, level: object) -> None:
        super().__init__(
            f"Invalid compression level: {level!r}",
            "Use -1 (default), 0 (store) or 1..9",
        )


class SourceNotFoundError(TgzError):
    """Source directory or archive does not exist or is inaccessible."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        msg = f"Source does not exist: '{path}'"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)
        self.path = path


class SourceNotADirectoryError(TgzError):
    """Pack source exists but is not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Source is not a directory: '{path}'")
        self.path = path


class OpenFailedError(TgzError):
    """Archive or destination file could not be opened or created."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        msg = f"Could not open '{path}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, "Check permissions and free disk space")
        self.path = path


class CorruptArchiveError(TgzError):
    """Compression framing or an entry header could not be parsed."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        msg = f"Archive '{path}' is corrupted or not a tar.gz file"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, "Try re-downloading or check file integrity")
        self.path = path


class UnsafeEntryError(CorruptArchiveError):
    """Archive entry resolves outside the extraction directory."""

    def __init__(self, path: str, entry_name: str) -> None:
        super().__init__(path, f"entry escapes destination: {entry_name}")
        self.entry_name = entry_name


class IOFailureError(TgzError):
    """Read, write or copy failed in the middle of an operation."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        msg = f"I/O failure on '{path}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.path = path
