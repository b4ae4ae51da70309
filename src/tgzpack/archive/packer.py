"""Directory tree -> tar.gz archive.

The walk is pre-order with directory entries sorted by name, so the same
filesystem state always yields the same entry order. Symlinks are recorded,
never followed.
"""

from __future__ import annotations

import gzip
import os
import stat
import tarfile
from collections.abc import Iterator

from tgzpack.core.errors import (
    CompressionLevelError,
    IOFailureError,
    OpenFailedError,
    SourceNotADirectoryError,
    SourceNotFoundError,
    TgzError,
)
from tgzpack.core.logging import get_logger

from .paths import archive_name
from .types import DEFAULT_COMPRESSION, PackResult, is_valid_level

log = get_logger(__name__)


def pack(source_dir: str | os.PathLike[str], target_archive: str | os.PathLike[str]) -> PackResult:
    """Pack ``source_dir`` into ``target_archive`` with default compression and no prefix."""
    return pack_with_prefix(source_dir, target_archive, "", DEFAULT_COMPRESSION)


def pack_with_level(
    source_dir: str | os.PathLike[str], target_archive: str | os.PathLike[str], level: int
) -> PackResult:
    """Pack with an explicit gzip level (-1 default, 0 store, 1..9)."""
    return pack_with_prefix(source_dir, target_archive, "", level)


def pack_with_prefix(
    source_dir: str | os.PathLike[str],
    target_archive: str | os.PathLike[str],
    prefix: str,
    level: int,
) -> PackResult:
    """Pack ``source_dir`` into a tar.gz at ``target_archive``.

    Every member name is the path relative to ``source_dir`` with ``prefix``
    applied: a ``./``-style prefix is concatenated, any other prefix is
    joined as a path segment. The archive root itself gets no entry.

    Raises:
        CompressionLevelError: level outside -1..9
        SourceNotFoundError: source missing or not accessible
        SourceNotADirectoryError: source is not a directory
        OpenFailedError: destination could not be created
        IOFailureError: walk, read or write failed; the partial archive is
            left on disk for the caller to discard
    """
    src = os.fspath(source_dir)
    dst = os.fspath(target_archive)

    if not is_valid_level(level):
        raise CompressionLevelError(level)

    try:
        src_st = os.stat(src)
    except OSError as e:
        raise SourceNotFoundError(src, e.strerror) from e
    if not stat.S_ISDIR(src_st.st_mode):
        raise SourceNotADirectoryError(src)

    try:
        raw = open(dst, "wb")
    except OSError as e:
        raise OpenFailedError(dst, e.strerror) from e

    log.info(f"pack {src} -> {dst} (level={level}, prefix={prefix!r})")

    warnings: list[str] = []
    entries = 0
    files = 0
    total = 0
    current = src

    # Closed innermost first: tar writer, gzip stream, file. Closing flushes
    # the last blocks, so it can fail just like the walk.
    try:
        with (
            raw,
            gzip.GzipFile(filename="", mode="wb", fileobj=raw, compresslevel=level, mtime=0) as gz,
            tarfile.open(fileobj=gz, mode="w") as tf,
        ):
            self_st = os.fstat(raw.fileno())
            try:
                for path, st in _walk(src):
                    current = path
                    if _same_file(st, self_st):
                        warnings.append(f"skipped the archive being written: {path}")
                        log.warning(f"skip {path}: it is the output archive")
                        continue

                    name = archive_name(os.path.relpath(path, src), prefix)
                    if name is None:
                        continue

                    ti = _tarinfo_from_stat(path, name, st)
                    if ti is None:
                        warnings.append(f"unsupported file type, not archived: {path}")
                        log.warning(f"skip {path}: unsupported file type")
                        continue

                    if ti.isreg():
                        with open(path, "rb") as f:
                            tf.addfile(ti, f)
                        files += 1
                        total += ti.size
                    else:
                        tf.addfile(ti)
                    entries += 1
                    log.debug(f"add {name} ({ti.size} bytes)" if ti.isreg() else f"add {name}")
            except (OSError, tarfile.TarError) as e:
                raise IOFailureError(current, str(e)) from e
    except (OSError, tarfile.TarError) as e:
        # A walk failure is reported even when closing fails afterwards.
        pending = _pending_error(e)
        if pending is not None:
            raise pending
        raise IOFailureError(dst, str(e)) from e

    log.info(f"packed {entries} entries ({files} files, {total} bytes) into {dst}")
    return PackResult(
        archive_path=dst,
        prefix=prefix,
        compression_level=level,
        entries_written=entries,
        files_packed=files,
        total_bytes=total,
        warnings=warnings,
    )


def _walk(path: str, *, top: bool = True) -> Iterator[tuple[str, os.stat_result]]:
    """Yield (path, stat) for ``path`` and everything below it, pre-order.

    Only the top directory is stat()ed; below it symlinks are not followed.
    """
    st = os.stat(path) if top else os.lstat(path)
    yield path, st
    if stat.S_ISDIR(st.st_mode):
        for name in sorted(os.listdir(path)):
            yield from _walk(os.path.join(path, name), top=False)


def _pending_error(e: BaseException) -> TgzError | None:
    """The TgzError that was propagating when ``e`` was raised, if any."""
    ctx = e.__context__
    while ctx is not None:
        if isinstance(ctx, TgzError):
            return ctx
        ctx = ctx.__context__
    return None


def _same_file(a: os.stat_result, b: os.stat_result) -> bool:
    return a.st_ino != 0 and (a.st_dev, a.st_ino) == (b.st_dev, b.st_ino)


def _tarinfo_from_stat(path: str, name: str, st: os.stat_result) -> tarfile.TarInfo | None:
    """Header built from real attributes; None for types tar cannot hold."""
    ti = tarfile.TarInfo(name=name)
    ti.mode = stat.S_IMODE(st.st_mode)
    ti.mtime = int(st.st_mtime)
    ti.uid = st.st_uid
    ti.gid = st.st_gid

    fmt = st.st_mode
    if stat.S_ISREG(fmt):
        ti.type = tarfile.REGTYPE
        ti.size = st.st_size
    elif stat.S_ISDIR(fmt):
        ti.type = tarfile.DIRTYPE
    elif stat.S_ISLNK(fmt):
        ti.type = tarfile.SYMTYPE
        ti.linkname = os.readlink(path)
    elif stat.S_ISFIFO(fmt):
        ti.type = tarfile.FIFOTYPE
    elif stat.S_ISCHR(fmt) or stat.S_ISBLK(fmt):
        ti.type = tarfile.CHRTYPE if stat.S_ISCHR(fmt) else tarfile.BLKTYPE
        ti.devmajor = os.major(st.st_rdev)
        ti.devminor = os.minor(st.st_rdev)
    else:
        return None
    return ti
