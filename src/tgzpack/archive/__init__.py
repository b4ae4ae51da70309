"""tar.gz pack/unpack."""

from .packer import pack, pack_with_level, pack_with_prefix
from .service import TgzService
from .types import (
    BEST_COMPRESSION,
    BEST_SPEED,
    DEFAULT_COMPRESSION,
    NO_COMPRESSION,
    ArchiveEntry,
    EntryType,
    OpEvent,
    OpPhase,
    PackResult,
    UnpackResult,
)
from .unpacker import list_entries, unpack

__all__ = [
    "BEST_COMPRESSION",
    "BEST_SPEED",
    "DEFAULT_COMPRESSION",
    "NO_COMPRESSION",
    "ArchiveEntry",
    "EntryType",
    "OpEvent",
    "OpPhase",
    "PackResult",
    "TgzService",
    "UnpackResult",
    "list_entries",
    "pack",
    "pack_with_level",
    "pack_with_prefix",
    "unpack",
]
