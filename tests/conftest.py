"""Shared test fixtures for mdx-picgo."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from mdx_picgo.models import UploadResult

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeUploader:
    """Returns canned results keyed by image filename and records every call."""

    def __init__(self, results: Optional[Dict[str, UploadResult]] = None) -> None:
        self.results = results or {}
        self.calls: List[Path] = []

    def upload(self, image_path: Path) -> UploadResult:
        self.calls.append(image_path)
        return self.results.get(
            image_path.name, UploadResult.failure(f"no canned result for {image_path.name}")
        )


@pytest.fixture
def fake_uploader():
    def _make(urls: Optional[Dict[str, str]] = None) -> FakeUploader:
        results = {name: UploadResult.success(url) for name, url in (urls or {}).items()}
        return FakeUploader(results)

    return _make


@pytest.fixture
def posts_dir(tmp_path):
    """A Hexo-style posts directory with an asset folder per post."""
    root = tmp_path / "_posts"
    root.mkdir()
    return root


@pytest.fixture
def write_post(posts_dir):
    def _write(name: str, text: str, images: tuple = ()) -> Path:
        post = posts_dir / name
        post.write_bytes(text.encode("utf-8"))
        if images:
            asset_dir = posts_dir / post.stem
            asset_dir.mkdir(exist_ok=True)
            for image in images:
                (asset_dir / image).write_bytes(PNG_BYTES)
        return post

    return _write
