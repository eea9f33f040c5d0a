"""Tests for document discovery and the sequential run."""

from __future__ import annotations

import pytest

from mdx_picgo.config import MigrateConfig
from mdx_picgo.models import DocumentStatus
from mdx_picgo.runner import (
    DiscoveryError,
    build_uploader,
    discover_documents,
    run_migration,
)
from mdx_picgo.uploader import PicGoServerUploader, PicGoUploader


def test_discover_is_flat_and_filters_markdown(posts_dir, write_post):
    write_post("b.md", "")
    write_post("a.MD", "")
    (posts_dir / "notes.txt").write_text("x")
    (posts_dir / "folder.md").mkdir()
    nested = posts_dir / "category"
    nested.mkdir()
    (nested / "deep.md").write_text("![a](a.png)")

    assert [p.name for p in discover_documents(posts_dir)] == ["a.MD", "b.md"]


def test_discover_missing_directory(tmp_path):
    with pytest.raises(DiscoveryError):
        discover_documents(tmp_path / "nope")


def test_build_uploader_prefers_server():
    server = build_uploader(MigrateConfig(posts_dir=".", server_url="http://localhost:36677/upload"))
    assert isinstance(server, PicGoServerUploader)
    assert server.endpoint == "http://localhost:36677/upload"

    cli = build_uploader(MigrateConfig(posts_dir=".", uploader_path="/usr/bin/picgo"))
    assert isinstance(cli, PicGoUploader)
    assert cli.command == "/usr/bin/picgo"


def test_run_continues_after_document_failure(posts_dir, write_post, fake_uploader):
    write_post("a.md", "![x](a.png)")
    broken = write_post("b.md", "![x](b.png)")
    broken.write_bytes(b"\xff\xfe not utf-8 ![x](b.png)")
    write_post("c.md", "no images")
    uploader = fake_uploader({"a.png": "https://cdn/a.png", "b.png": "https://cdn/b.png"})

    summary = run_migration(MigrateConfig(posts_dir=posts_dir), uploader)

    statuses = [(r.path.name, r.status) for r in summary.results]
    assert statuses == [
        ("a.md", DocumentStatus.DONE),
        ("b.md", DocumentStatus.FAILED),
        ("c.md", DocumentStatus.SKIPPED),
    ]
    assert (summary.updated, summary.failed, summary.skipped) == (1, 1, 1)
    assert summary.images_uploaded == 1
    assert [p.name for p in uploader.calls] == ["a.png"]


def test_empty_directory(posts_dir, fake_uploader):
    uploader = fake_uploader()
    summary = run_migration(MigrateConfig(posts_dir=posts_dir), uploader)
    assert summary.results == []
    assert uploader.calls == []


def test_missing_directory_is_fatal(tmp_path, fake_uploader):
    with pytest.raises(DiscoveryError):
        run_migration(MigrateConfig(posts_dir=tmp_path / "missing"), fake_uploader())
