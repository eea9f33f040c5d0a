"""Utility helpers for URL checks and asset path handling."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Optional

from filetype import guess

REMOTE_PREFIXES = ("http://", "https://")


def is_remote_url(value: str) -> bool:
    """Return True when the value is an absolute http(s) URL."""
    return value.startswith(REMOTE_PREFIXES)


def resolve_asset_path(document_path: Path, raw_path: str) -> Path:
    """Locate an image for ``post.md`` inside the sibling ``post/`` directory.

    Only the base filename of ``raw_path`` is kept, so ``post/a.png``,
    ``./a.png`` and ``post\\a.png`` all resolve to ``<dir>/post/a.png``.
    """
    image_name = PurePosixPath(raw_path.replace("\\", "/")).name
    return document_path.parent / document_path.stem / image_name


def detect_image_format(path: Path) -> Optional[str]:
    """Sniff a file's signature with filetype; returns a lowercase extension."""
    try:
        kind = guess(str(path))
    except OSError:
        return None
    if kind and kind.mime.startswith("image/"):
        return kind.extension.lower()
    return None
