"""Uploader adapters that turn a local image into a hosted URL via PicGo."""

from __future__ import annotations

import json
import logging
import re
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

import requests

from .config import DEFAULT_SERVER_TIMEOUT, DEFAULT_SERVER_URL, DEFAULT_UPLOADER
from .models import UploadResult

logger = logging.getLogger("mdx_picgo")

URL_TOKEN_PATTERN = re.compile(r"https?://[^\s]+")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp")


def match_url_token(output: str) -> Optional[str]:
    """Return the first http(s) token anywhere in the output."""
    match = URL_TOKEN_PATTERN.search(output)
    return match.group(0) if match else None


def match_json_img_url(output: str) -> Optional[str]:
    """Read ``imgUrl`` from PicGo's JSON array result format."""
    try:
        payload = json.loads(output)
    except ValueError:
        return None
    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if isinstance(first, dict):
        img_url = first.get("imgUrl")
        if isinstance(img_url, str) and img_url:
            return img_url
    return None


def match_image_line(output: str) -> Optional[str]:
    """Fall back to the first line that mentions an image filename."""
    for line in output.splitlines():
        stripped = line.strip()
        if any(ext in stripped for ext in IMAGE_EXTENSIONS):
            return stripped
    return None


# Order is significant: an explicit URL beats structured JSON, which beats
# the line heuristic.
URL_STRATEGIES: Sequence[Callable[[str], Optional[str]]] = (
    match_url_token,
    match_json_img_url,
    match_image_line,
)


def extract_image_url(output: str) -> Optional[str]:
    """Run the extraction strategies in order and return the first hit."""
    for strategy in URL_STRATEGIES:
        url = strategy(output)
        if url:
            return url
    return None


class PicGoUploader:
    """Invoke ``picgo upload <path>`` and parse whatever it prints."""

    def __init__(self, command: str = DEFAULT_UPLOADER) -> None:
        self.command = command

    def _run(self, image_path: Path) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.command, "upload", str(image_path)],
            capture_output=True,
            text=True,
            check=True,
        )

    def upload(self, image_path: Path) -> UploadResult:
        """Upload one image; failures are returned, never raised."""
        try:
            completed = self._run(image_path)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip()
            reason = f"{self.command} exited with status {exc.returncode}"
            if detail:
                reason = f"{reason}: {detail}"
            return UploadResult.failure(reason)
        except OSError as exc:
            return UploadResult.failure(f"could not run {self.command}: {exc}")

        stdout = completed.stdout or ""
        if completed.stderr:
            logger.warning(
                "Uploader stderr while uploading %s: %s",
                image_path,
                completed.stderr.strip(),
            )

        url = extract_image_url(stdout)
        if url is None:
            return UploadResult.failure(
                f"could not parse a URL from uploader output:\n{stdout}"
            )
        return UploadResult.success(url)


class PicGoServerUploader:
    """Upload through the HTTP server that a running PicGo app exposes."""

    def __init__(
        self,
        endpoint: str = DEFAULT_SERVER_URL,
        timeout: float = DEFAULT_SERVER_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def upload(self, image_path: Path) -> UploadResult:
        try:
            resp = self.session.post(
                self.endpoint,
                json={"list": [str(image_path)]},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            return UploadResult.failure(f"request to {self.endpoint} failed: {exc}")
        try:
            payload = resp.json()
        except ValueError:
            return UploadResult.failure(
                f"PicGo server returned a non-JSON body: {resp.text[:200]}"
            )

        if not isinstance(payload, dict) or not payload.get("success"):
            message = payload.get("message") if isinstance(payload, dict) else None
            return UploadResult.failure(
                f"PicGo server reported failure: {message or payload}"
            )
        result = payload.get("result")
        if isinstance(result, list) and result and isinstance(result[0], str):
            return UploadResult.success(result[0])
        return UploadResult.failure(f"PicGo server returned no URL: {payload}")
