"""Configured pack/unpack facade.

The module-level functions in packer/unpacker take every option explicitly.
This service fills unset options from a ConfigResolver and records an
operation trace, for the CLI and for applications embedding tgzpack.
"""

from __future__ import annotations

import dataclasses
import os
import traceback

from tgzpack.core.config import ConfigResolver
from tgzpack.core.errors import TgzError
from tgzpack.core.logging import get_logger

from .packer import pack_with_prefix
from .types import ArchiveEntry, OpEvent, OpPhase, PackResult, UnpackResult
from .unpacker import list_entries, unpack

log = get_logger(__name__)


class TgzService:
    """Archive capability.

    Thin on purpose: first error aborts, nothing is rolled back, and the
    caller decides what to do with partial output.
    """

    def __init__(self, resolver: ConfigResolver | None = None) -> None:
        self._resolver = resolver or ConfigResolver(cli_args={})

    def pack(
        self,
        source_dir: str | os.PathLike[str],
        target_archive: str | os.PathLike[str],
        *,
        prefix: str | None = None,
        level: int | None = None,
        debug_trace: bool | None = None,
        include_stack: bool | None = None,
    ) -> PackResult:
        _prefix = self._resolver.resolve_prefix() if prefix is None else prefix
        _level = self._resolver.resolve_compression_level() if level is None else level
        _debug_trace, _include_stack = self._debug_flags(debug_trace, include_stack)

        log.verbose(f"pack options: prefix={_prefix!r} level={_level}")
        trace = [
            OpEvent(
                op="pack",
                phase=OpPhase.PLANNED,
                details={"source": os.fspath(source_dir), "prefix": _prefix, "level": _level},
            )
        ]
        try:
            result = pack_with_prefix(source_dir, target_archive, _prefix, _level)
        except TgzError as e:
            trace.append(self._error_event("pack", e, _include_stack))
            if _debug_trace:
                log.debug(f"pack trace: {trace}")
            log.error(f"pack failed: {e}")
            raise

        trace.append(
            OpEvent(
                op="pack",
                phase=OpPhase.OK,
                details={"entries": result.entries_written, "bytes": result.total_bytes},
            )
        )
        return dataclasses.replace(result, trace=trace if _debug_trace else [])

    def unpack(
        self,
        source_archive: str | os.PathLike[str],
        target_dir: str | os.PathLike[str],
        *,
        debug_trace: bool | None = None,
        include_stack: bool | None = None,
    ) -> UnpackResult:
        _debug_trace, _include_stack = self._debug_flags(debug_trace, include_stack)

        trace = [
            OpEvent(
                op="unpack",
                phase=OpPhase.PLANNED,
                details={"source": os.fspath(source_archive), "target": os.fspath(target_dir)},
            )
        ]
        try:
            result = unpack(source_archive, target_dir)
        except TgzError as e:
            trace.append(self._error_event("unpack", e, _include_stack))
            if _debug_trace:
                log.debug(f"unpack trace: {trace}")
            log.error(f"unpack failed: {e}")
            raise

        trace.append(
            OpEvent(
                op="unpack",
                phase=OpPhase.OK,
                details={"files": result.files_unpacked, "bytes": result.total_bytes},
            )
        )
        return dataclasses.replace(result, trace=trace if _debug_trace else [])

    def list_entries(self, source_archive: str | os.PathLike[str]) -> list[ArchiveEntry]:
        try:
            return list_entries(source_archive)
        except TgzError as e:
            log.error(f"list failed: {e}")
            raise

    def _debug_flags(self, debug_trace: bool | None, include_stack: bool | None) -> tuple[bool, bool]:
        if debug_trace is None:
            debug_trace = self._resolver.resolve_bool("archive.debug.include_trace", False)
        if include_stack is None:
            include_stack = self._resolver.resolve_bool("archive.debug.include_stack", False)
        return debug_trace, include_stack

    @staticmethod
    def _error_event(op: str, e: TgzError, include_stack: bool) -> OpEvent:
        details: dict[str, object] = {"error": e.message, "kind": type(e).__name__}
        if include_stack:
            details["stack"] = traceback.format_exc()
        return OpEvent(op=op, phase=OpPhase.ERROR, details=details)
