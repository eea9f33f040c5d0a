"""Sequential driver that migrates every post in a Hexo posts directory."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, List, Optional

from .config import MigrateConfig
from .migrator import Uploader, migrate_document
from .models import MigrationSummary
from .uploader import PicGoServerUploader, PicGoUploader

logger = logging.getLogger("mdx_picgo")


class DiscoveryError(RuntimeError):
    """Raised when the posts directory cannot be listed."""


def discover_documents(posts_dir: Path) -> List[Path]:
    """List the Markdown files directly inside ``posts_dir``."""
    try:
        entries = sorted(posts_dir.iterdir())
    except OSError as exc:
        raise DiscoveryError(f"Cannot list posts directory {posts_dir}: {exc}") from exc
    return [
        entry for entry in entries if entry.is_file() and entry.suffix.lower() == ".md"
    ]


def build_uploader(config: MigrateConfig) -> Uploader:
    if config.server_url:
        return PicGoServerUploader(config.server_url, timeout=config.server_timeout)
    return PicGoUploader(config.uploader_path)


def migrate_documents(paths: Iterable[Path], uploader: Uploader) -> MigrationSummary:
    """Migrate documents one after another; one failure never stops the rest."""
    summary = MigrationSummary()
    start = time.perf_counter()
    for path in paths:
        summary.results.append(migrate_document(path, uploader))
    summary.total_seconds = time.perf_counter() - start
    return summary


def run_migration(
    config: MigrateConfig,
    uploader: Optional[Uploader] = None,
) -> MigrationSummary:
    """Discover the posts under ``config.posts_dir`` and migrate each of them."""
    logger.info("Scanning %s", config.posts_dir)
    documents = discover_documents(config.posts_dir)
    if not documents:
        logger.info("No Markdown files found in %s", config.posts_dir)
        return MigrationSummary()

    logger.info("Found %d Markdown file(s)", len(documents))
    return migrate_documents(documents, uploader or build_uploader(config))
