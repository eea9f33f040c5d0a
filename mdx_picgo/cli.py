"""Command-line entry point for migrating Markdown images to PicGo."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .config import DEFAULT_SERVER_TIMEOUT, DEFAULT_UPLOADER, MigrateConfig
from .models import DocumentStatus, MigrationSummary
from .runner import DiscoveryError, build_uploader, migrate_documents, run_migration

logger = logging.getLogger("mdx_picgo.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return ("migrate",)
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("migrate", *argv)


def _add_uploader_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--uploader",
        default=DEFAULT_UPLOADER,
        help="PicGo CLI executable invoked as '<uploader> upload <image>'",
    )
    parser.add_argument(
        "--server",
        default=None,
        metavar="URL",
        help="Upload through a running PicGo server instead, e.g. http://127.0.0.1:36677/upload",
    )
    parser.add_argument(
        "--server-timeout",
        type=float,
        default=DEFAULT_SERVER_TIMEOUT,
        help="Seconds to wait for the PicGo server per image",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Upload local images referenced by Markdown posts and rewrite them to hosted URLs.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    migrate_parser = subparsers.add_parser(
        "migrate", help="Migrate every Markdown file in a posts directory"
    )
    migrate_parser.add_argument(
        "posts_dir",
        nargs="?",
        default=Path("source/_posts"),
        type=Path,
        help="Directory holding the Markdown posts (default: source/_posts)",
    )
    _add_uploader_arguments(migrate_parser)

    document_parser = subparsers.add_parser(
        "document", help="Migrate individual Markdown files"
    )
    document_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Markdown files to migrate",
    )
    _add_uploader_arguments(document_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _build_config(args: argparse.Namespace, posts_dir: Path) -> MigrateConfig:
    return MigrateConfig(
        posts_dir=posts_dir.resolve(),
        uploader_path=args.uploader,
        server_url=args.server,
        server_timeout=args.server_timeout,
    )


def _report(summary: MigrationSummary, verbose: bool) -> None:
    logger.info(
        "Finished in %.2fs (%d updated, %d skipped, %d failed; %d image(s) uploaded, %d failed)",
        summary.total_seconds,
        summary.updated,
        summary.skipped,
        summary.failed,
        summary.images_uploaded,
        summary.images_failed,
    )
    for result in summary.results:
        if result.status is DocumentStatus.FAILED:
            logger.error("Failed: %s (%s)", result.path, result.error)
        elif verbose:
            logger.debug(
                "%s -> %s (found=%d, replaced=%d, failed=%d)",
                result.path,
                result.status.value,
                result.found,
                result.replaced,
                result.failed,
            )


def _run_migrate(args: argparse.Namespace) -> int:
    config = _build_config(args, args.posts_dir)
    try:
        summary = run_migration(config)
    except DiscoveryError as exc:
        logger.error("%s", exc)
        return 1
    _report(summary, args.verbose)
    return 0


def _run_documents(args: argparse.Namespace) -> int:
    config = _build_config(args, Path.cwd())
    summary = migrate_documents(args.paths, build_uploader(config))
    _report(summary, args.verbose)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "migrate":
        return _run_migrate(args)
    return _run_documents(args)


if __name__ == "__main__":
    sys.exit(main())
