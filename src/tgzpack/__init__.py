"""tgzpack - pack a directory tree into a tar.gz archive and back.

    from tgzpack import pack_with_prefix, unpack

    pack_with_prefix("site", "site.tar.gz", "www/", 9)
    unpack("site.tar.gz", "/srv")  # -> /srv/www/...
"""

__version__ = "1.0.0"

from tgzpack.archive import (
    BEST_COMPRESSION,
    BEST_SPEED,
    DEFAULT_COMPRESSION,
    NO_COMPRESSION,
    ArchiveEntry,
    EntryType,
    PackResult,
    TgzService,
    UnpackResult,
    list_entries,
    pack,
    pack_with_level,
    pack_with_prefix,
    unpack,
)
from tgzpack.core.config import ConfigResolver
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

__all__ = [
    # Operations
    "pack",
    "pack_with_level",
    "pack_with_prefix",
    "unpack",
    "list_entries",
    "TgzService",
    # Types
    "ArchiveEntry",
    "EntryType",
    "PackResult",
    "UnpackResult",
    "DEFAULT_COMPRESSION",
    "NO_COMPRESSION",
    "BEST_SPEED",
    "BEST_COMPRESSION",
    # Config
    "ConfigResolver",
    # Errors
    "TgzError",
    "ConfigError",
    "CompressionLevelError",
    "SourceNotFoundError",
    "SourceNotADirectoryError",
    "OpenFailedError",
    "CorruptArchiveError",
    "UnsafeEntryError",
    "IOFailureError",
]
