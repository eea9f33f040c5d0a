"""MCP server exposing mdx-picgo migration tools."""

from __future__ import annotations

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_UPLOADER, MigrateConfig
from .models import MigrationSummary
from .runner import build_uploader, migrate_documents, run_migration

logger = logging.getLogger("mdx_picgo.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="mdx-picgo")


def _format_summary(summary: MigrationSummary) -> str:
    lines = [
        f"{summary.updated} updated, {summary.skipped} skipped, {summary.failed} failed; "
        f"{summary.images_uploaded} image(s) uploaded, {summary.images_failed} failed"
    ]
    for result in summary.results:
        line = f"- {result.path}: {result.status.value}"
        if result.error:
            line += f" ({result.error})"
        elif result.found:
            line += f" ({result.replaced}/{result.found} replaced)"
        lines.append(line)
    return "\n".join(lines)


@mcp.tool()
def migrate(posts_dir: str, uploader: str = DEFAULT_UPLOADER) -> str:
    """Upload local images of every post in a directory and rewrite the posts."""

    config = MigrateConfig(posts_dir=Path(posts_dir).expanduser(), uploader_path=uploader)
    return _format_summary(run_migration(config))


@mcp.tool()
def migrate_file(path: str, uploader: str = DEFAULT_UPLOADER) -> str:
    """Upload local images of a single Markdown file and rewrite it."""

    source = Path(path).expanduser()
    if not source.is_file():
        raise FileNotFoundError(f"Markdown file does not exist: {source}")
    config = MigrateConfig(posts_dir=source.parent, uploader_path=uploader)
    return _format_summary(migrate_documents([source], build_uploader(config)))


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
