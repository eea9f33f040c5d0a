"""Data models used throughout the migration pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from .utils import is_remote_url


@dataclass(frozen=True)
class ImageReference:
    """A Markdown image occurrence found while scanning a document."""

    alt_text: str
    raw_path: str
    span: Tuple[int, int]

    @property
    def is_local(self) -> bool:
        return not is_remote_url(self.raw_path)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a single upload: a hosted URL or the reason it failed."""

    url: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, url: str) -> "UploadResult":
        return cls(url=url)

    @classmethod
    def failure(cls, reason: str) -> "UploadResult":
        return cls(reason=reason)

    @property
    def ok(self) -> bool:
        """True only when the uploader returned an http(s) URL."""
        return self.url is not None and is_remote_url(self.url)


class DocumentStatus(str, Enum):
    SKIPPED = "skipped"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DocumentResult:
    """Per-document outcome reported by the migrator."""

    path: Path
    status: DocumentStatus
    found: int = 0
    replaced: int = 0
    failed: int = 0
    error: Optional[str] = None


@dataclass
class MigrationSummary:
    """Results for every document processed in one run."""

    results: List[DocumentResult] = field(default_factory=list)
    total_seconds: float = 0.0

    def _count(self, status: DocumentStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def updated(self) -> int:
        return self._count(DocumentStatus.DONE)

    @property
    def skipped(self) -> int:
        return self._count(DocumentStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(DocumentStatus.FAILED)

    @property
    def images_uploaded(self) -> int:
        return sum(result.replaced for result in self.results)

    @property
    def images_failed(self) -> int:
        return sum(result.failed for result in self.results)
