# src/main.py — v1
"""CLI entry point: status, scan, clear, stats commands.

Usage:
    mediaref status <catalog.json> [--wait]
    mediaref scan <catalog.json>
    mediaref clear
    mediaref stats

Catalog files are JSON arrays of media items
(``{"id": ..., "filename": ..., "mediaType": "photo"|"video"}``).
Settings come from .env / environment; ``--scan-path`` and
``--external-domain`` override them per invocation.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter

from mediaref.config.settings import Settings, load_settings
from mediaref.core.models import MediaItem
from mediaref.logging.logger import setup_logging
from mediaref.version import __version__

logger = logging.getLogger(__name__)

_CATALOG = TypeAdapter(list[MediaItem])


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
    except Exception as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="mediaref",
        description=f"mediaref v{__version__}: media reference detection for note corpora",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument("--scan-path", default=None, help="Override SCAN_PATH")
    parser.add_argument(
        "--external-domain", default=None, help="Override EXTERNAL_DOMAIN",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- status ---
    p_status = subparsers.add_parser(
        "status", help="Print cached reference status (may schedule a scan)",
    )
    p_status.add_argument("catalog", type=Path, help="Catalog JSON file")
    p_status.add_argument(
        "--wait", action="store_true",
        help="If a scan was scheduled, wait for it and print fresh results",
    )
    p_status.set_defaults(func=_cmd_status)

    # --- scan ---
    p_scan = subparsers.add_parser("scan", help="Force a full rescan")
    p_scan.add_argument("catalog", type=Path, help="Catalog JSON file")
    p_scan.set_defaults(func=_cmd_scan)

    # --- clear ---
    p_clear = subparsers.add_parser("clear", help="Delete the reference cache")
    p_clear.set_defaults(func=_cmd_clear)

    # --- stats ---
    p_stats = subparsers.add_parser("stats", help="Show reference cache statistics")
    p_stats.set_defaults(func=_cmd_stats)

    return parser


async def _cmd_status(args: argparse.Namespace, settings: Settings) -> int:
    from mediaref.manager.reference_manager import ReferenceManager

    items = _load_catalog(args.catalog)
    manager = ReferenceManager(settings)
    status = await manager.get_status(items)

    if args.wait and manager.is_scanning:
        await manager.wait_for_scan()
        status = await manager.get_status(items)

    _print_json(status)

    # Let a scheduled scan populate the cache before the loop shuts down
    await manager.wait_for_scan()
    return 0


async def _cmd_scan(args: argparse.Namespace, settings: Settings) -> int:
    from mediaref.manager.reference_manager import ReferenceManager

    items = _load_catalog(args.catalog)
    manager = ReferenceManager(settings)
    _print_json(await manager.force_scan(items))
    return 0


async def _cmd_clear(args: argparse.Namespace, settings: Settings) -> int:
    from mediaref.manager.reference_manager import ReferenceManager

    manager = ReferenceManager(settings)
    return 0 if await manager.clear_cache() else 1


async def _cmd_stats(args: argparse.Namespace, settings: Settings) -> int:
    from mediaref.manager.reference_manager import ReferenceManager

    manager = ReferenceManager(settings)
    stats = await manager.get_stats()

    last_scan = stats.last_scan.isoformat() if stats.last_scan else "never"
    print(f"\nReference cache ({manager.cache.path}):")
    print(f"  Entries:     {stats.total_entries}")
    print(f"  Referenced:  {stats.referenced_count}")
    print(f"  Last scan:   {last_scan}")
    print(f"  Size:        {stats.approx_size_bytes} bytes")
    return 0


def _load_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.scan_path is not None:
        overrides["scan_path"] = args.scan_path
    if args.external_domain is not None:
        overrides["external_domain"] = args.external_domain
    return load_settings(**overrides)


def _load_catalog(path: Path) -> list[MediaItem]:
    return _CATALOG.validate_json(path.read_bytes())


def _print_json(status: dict[str, bool]) -> None:
    print(json.dumps(status, indent=2, sort_keys=True))


if __name__ == "__main__":
    sys.exit(main())
