"""Command line entry point.

    python -m tgzpack pack SOURCE_DIR ARCHIVE [--prefix P] [--level N]
    python -m tgzpack unpack ARCHIVE TARGET_DIR
    python -m tgzpack list ARCHIVE

Options not given on the command line come from TGZPACK_* environment
variables, then ~/.config/tgzpack/config.yaml, then built-in defaults.

Exit codes:
- 0: success
- 1: archive or configuration error
- 2: usage error (argparse)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from tgzpack import __version__
from tgzpack.archive import TgzService
from tgzpack.core.config import ConfigResolver
from tgzpack.core.errors import ConfigError, TgzError
from tgzpack.core.logging import apply_logging_policy, get_logger, set_colors

log = get_logger("tgzpack")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="tgzpack", description="Pack and unpack tar.gz archives")
    ap.add_argument("--version", action="version", version=f"tgzpack {__version__}")
    ap.add_argument("--config", type=Path, help="User config file (YAML)")
    ap.add_argument("--no-color", action="store_true", help="Disable colored output")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_const", const="quiet", dest="log_level")
    verbosity.add_argument("-v", "--verbose", action="store_const", const="verbose", dest="log_level")
    verbosity.add_argument("-d", "--debug", action="store_const", const="debug", dest="log_level")

    sub = ap.add_subparsers(dest="command", required=True)

    p_pack = sub.add_parser("pack", help="Pack a directory into a tar.gz archive")
    p_pack.add_argument("source_dir")
    p_pack.add_argument("archive")
    p_pack.add_argument("--prefix", help="Prefix for every path inside the archive")
    p_pack.add_argument("--level", type=int, help="gzip level: -1 default, 0 store, 1..9")

    p_unpack = sub.add_parser("unpack", help="Extract a tar.gz archive into a directory")
    p_unpack.add_argument("archive")
    p_unpack.add_argument("target_dir")

    p_list = sub.add_parser("list", help="List archive entries")
    p_list.add_argument("archive")

    return ap


def _cli_args(args: argparse.Namespace) -> dict[str, Any]:
    cli: dict[str, Any] = {"archive": {}, "logging": {}}
    if getattr(args, "prefix", None) is not None:
        cli["archive"]["prefix"] = args.prefix
    if getattr(args, "level", None) is not None:
        cli["archive"]["compression_level"] = args.level
    if args.log_level is not None:
        cli["logging"]["level"] = args.log_level
    if args.no_color:
        cli["logging"]["color"] = False
    return cli


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        resolver = ConfigResolver(cli_args=_cli_args(args), user_config_path=args.config)
        apply_logging_policy(resolver.resolve_logging_policy())
        set_colors(resolver.resolve_bool("logging.color", True))
        svc = TgzService(resolver)

        if args.command == "pack":
            svc.pack(args.source_dir, args.archive)
        elif args.command == "unpack":
            svc.unpack(args.archive, args.target_dir)
        else:
            for entry in svc.list_entries(args.archive):
                print(f"{entry.mode:04o} {entry.type.value:9} {entry.size:>10} {entry.name}")
    except ConfigError as e:
        log.error(str(e))
        return 1
    except TgzError:
        # Already logged by the service.
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
