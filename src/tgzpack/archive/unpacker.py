"""tar.gz archive -> directory tree.

The archive is read as a stream, one entry at a time; only directories and
regular files are materialized. Entries extracted before a failure stay on
disk.
"""

from __future__ import annotations

import contextlib
import gzip
import os
import shutil
import tarfile
import zlib
from collections.abc import Iterator

from tgzpack.core.errors import (
    CorruptArchiveError,
    IOFailureError,
    OpenFailedError,
    SourceNotFoundError,
    UnsafeEntryError,
)
from tgzpack.core.logging import get_logger

from .paths import is_within, to_host_path
from .types import ArchiveEntry, EntryType, UnpackResult

log = get_logger(__name__)

# Mode for parent directories a file entry needs but the archive has not
# (yet) created; umask still applies.
PARENT_DIR_MODE = 0o777

# Raised by the gzip/tar layers when framing or a header cannot be decoded.
_FRAMING_ERRORS = (tarfile.TarError, gzip.BadGzipFile, EOFError, zlib.error)


def unpack(source_archive: str | os.PathLike[str], target_dir: str | os.PathLike[str]) -> UnpackResult:
    """Extract ``source_archive`` under ``target_dir``.

    Directory entries are created with their recorded mode; regular files
    are created (or truncated) and filled with exactly the entry's bytes.
    Other entry types are skipped.

    Raises:
        SourceNotFoundError: archive does not exist
        OpenFailedError: archive could not be opened
        CorruptArchiveError: gzip framing or a tar header is invalid
        UnsafeEntryError: an entry resolves outside ``target_dir``
        IOFailureError: creating or writing output failed, or the archive
            ended inside an entry's content
    """
    src = os.fspath(source_archive)
    dst = os.fspath(target_dir)

    log.info(f"unpack {src} -> {dst}")

    warnings: list[str] = []
    dirs = 0
    files = 0
    total = 0

    with _open_stream(src) as tf:
        for member in _members(tf, src):
            name = member.name
            out = to_host_path(dst, name)
            if not is_within(dst, out):
                raise UnsafeEntryError(src, name)

            if member.isdir():
                try:
                    os.makedirs(out, mode=member.mode, exist_ok=True)
                except OSError as e:
                    raise IOFailureError(out, str(e)) from e
                dirs += 1
                log.debug(f"mkdir {name}")
            elif member.isreg():
                total += _extract_file(tf, member, out)
                files += 1
                log.debug(f"extract {name} ({member.size} bytes)")
            else:
                warnings.append(f"unsupported entry type {member.type!r}, not extracted: {name}")
                log.verbose(f"skip {name}: unsupported entry type {member.type!r}")

    log.info(f"unpacked {files} files, {dirs} directories ({total} bytes) into {dst}")
    return UnpackResult(
        target_dir=dst,
        dirs_applied=dirs,
        files_unpacked=files,
        entries_skipped=len(warnings),
        total_bytes=total,
        warnings=warnings,
    )


def list_entries(source_archive: str | os.PathLike[str]) -> list[ArchiveEntry]:
    """Read every entry header of ``source_archive`` without extracting."""
    src = os.fspath(source_archive)
    with _open_stream(src) as tf:
        return [_entry_from_member(m) for m in _members(tf, src)]


@contextlib.contextmanager
def _open_stream(src: str) -> Iterator[tarfile.TarFile]:
    """Open file -> gzip -> tar (stream mode); all three closed on exit."""
    try:
        raw = open(src, "rb")
    except FileNotFoundError as e:
        raise SourceNotFoundError(src, e.strerror) from e
    except OSError as e:
        raise OpenFailedError(src, e.strerror) from e

    with raw, gzip.GzipFile(fileobj=raw, mode="rb") as gz:
        try:
            tf = tarfile.open(fileobj=gz, mode="r|")
        except _FRAMING_ERRORS as e:
            raise CorruptArchiveError(src, str(e)) from e
        except OSError as e:
            raise IOFailureError(src, str(e)) from e
        with tf:
            yield tf


def _members(tf: tarfile.TarFile, src: str) -> Iterator[tarfile.TarInfo]:
    """Iterate headers; end of stream stops, bad framing raises."""
    while True:
        try:
            member = tf.next()
        except _FRAMING_ERRORS as e:
            raise CorruptArchiveError(src, str(e)) from e
        except OSError as e:
            raise IOFailureError(src, str(e)) from e
        if member is None:
            return
        yield member


def _extract_file(tf: tarfile.TarFile, member: tarfile.TarInfo, out: str) -> int:
    parent = os.path.dirname(out)
    try:
        if parent:
            os.makedirs(parent, mode=PARENT_DIR_MODE, exist_ok=True)
        f = tf.extractfile(member)
        if f is None:
            raise IOFailureError(out, "entry has no readable content")
        with contextlib.closing(f), open(out, "wb") as out_f:
            shutil.copyfileobj(f, out_f)
    except (OSError, tarfile.TarError, EOFError, zlib.error) as e:
        raise IOFailureError(out, str(e)) from e
    return int(member.size)


def _entry_from_member(member: tarfile.TarInfo) -> ArchiveEntry:
    if member.isdir():
        kind = EntryType.DIRECTORY
    elif member.isreg():
        kind = EntryType.FILE
    else:
        kind = EntryType.OTHER
    return ArchiveEntry(
        name=member.name,
        type=kind,
        mode=member.mode,
        size=member.size if member.isreg() else 0,
        mtime=float(member.mtime),
    )
