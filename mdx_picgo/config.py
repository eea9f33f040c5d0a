"""Configuration objects and constants for the image migration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_UPLOADER = "picgo"
DEFAULT_SERVER_URL = "http://127.0.0.1:36677/upload"
DEFAULT_SERVER_TIMEOUT = 60.0


@dataclass
class MigrateConfig:
    """Top-level settings that control discovery and uploading."""

    posts_dir: Path
    uploader_path: str = DEFAULT_UPLOADER
    server_url: Optional[str] = None
    server_timeout: float = DEFAULT_SERVER_TIMEOUT
