"""Archive data model.

Entries exist only as records of the tar stream; nothing here is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# gzip/zlib levels, passed through to the compressor unchanged.
DEFAULT_COMPRESSION = -1
NO_COMPRESSION = 0
BEST_SPEED = 1
BEST_COMPRESSION = 9


def is_valid_level(level: object) -> bool:
    if isinstance(level, bool) or not isinstance(level, int):
        return False
    return DEFAULT_COMPRESSION <= level <= BEST_COMPRESSION


class EntryType(StrEnum):
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


class OpPhase(StrEnum):
    PLANNED = "planned"
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class ArchiveEntry:
    name: str  # virtual path, always '/'-separated
    type: EntryType
    mode: int
    size: int
    mtime: float


@dataclass(frozen=True)
class OpEvent:
    op: str
    phase: OpPhase
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PackResult:
    archive_path: str
    prefix: str
    compression_level: int
    entries_written: int
    files_packed: int
    total_bytes: int
    warnings: list[str] = field(default_factory=list)
    trace: list[OpEvent] = field(default_factory=list)


@dataclass(frozen=True)
class UnpackResult:
    target_dir: str
    dirs_applied: int
    files_unpacked: int
    entries_skipped: int
    total_bytes: int
    warnings: list[str] = field(default_factory=list)
    trace: list[OpEvent] = field(default_factory=list)
