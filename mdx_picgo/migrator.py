"""Rewrite local Markdown image references to hosted URLs, one document at a time."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Protocol

from .models import DocumentResult, DocumentStatus, ImageReference, UploadResult
from .utils import detect_image_format, resolve_asset_path

logger = logging.getLogger("mdx_picgo")

# Alt text may hold one level of balanced brackets, e.g. "Figure [1]".
_ALT_TEXT = r"(?:[^\[\]\n]|\[[^\[\]\n]*\])*"
# One level of balanced parentheses is allowed so ``fig.1(a).png`` stays whole.
_IMAGE_TARGET = r"(?:[^()\n]|\([^()\n]*\))*"
IMAGE_PATTERN = re.compile(rf"!\[({_ALT_TEXT})\]\(({_IMAGE_TARGET})\)")


class Uploader(Protocol):
    def upload(self, image_path: Path) -> UploadResult:
        ...


def find_image_references(text: str) -> List[ImageReference]:
    """Return every ``![alt](path)`` occurrence in document order."""
    return [
        ImageReference(alt_text=match.group(1), raw_path=match.group(2), span=match.span())
        for match in IMAGE_PATTERN.finditer(text)
    ]


def find_local_references(text: str) -> List[ImageReference]:
    """Return only the references that do not already point at http(s)."""
    return [ref for ref in find_image_references(text) if ref.is_local]


def build_url_mapping(
    document_path: Path,
    references: Iterable[ImageReference],
    uploader: Uploader,
) -> Dict[str, str]:
    """Upload each referenced image in order and map old paths to new URLs.

    A failed upload only excludes its own reference; the remaining images are
    still attempted.
    """
    mapping: Dict[str, str] = {}
    for ref in references:
        image_path = resolve_asset_path(document_path, ref.raw_path)
        logger.info("  Uploading %s", image_path.name)
        if image_path.is_file() and detect_image_format(image_path) is None:
            logger.warning("  %s does not look like an image", image_path)

        result = uploader.upload(image_path)
        if result.url is None:
            logger.warning("  Upload failed for %s: %s", image_path, result.reason)
            continue
        if not result.ok:
            logger.warning(
                "  Skipping %s: uploader returned an invalid URL -> %s",
                image_path,
                result.url,
            )
            continue
        logger.info("  Uploaded %s -> %s", image_path.name, result.url)
        mapping[ref.raw_path] = result.url
    return mapping


def rewrite_markdown(text: str, mapping: Dict[str, str]) -> str:
    """Replace every image that points at a mapped path with ``![](url)``.

    Old paths are matched literally. Alt text is not carried over.
    """
    updated = text
    for old_path, new_url in mapping.items():
        pattern = re.compile(rf"!\[{_ALT_TEXT}\]\({re.escape(old_path)}\)")
        replacement = f"![]({new_url})"
        updated = pattern.sub(lambda _match: replacement, updated)
        logger.debug("  Replaced %s -> %s", old_path, new_url)
    return updated


def _read_document(path: Path) -> str:
    # newline="" keeps CRLF files byte-for-byte intact on rewrite.
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def _write_document(path: Path, text: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def migrate_document(document_path: Path, uploader: Uploader) -> DocumentResult:
    """Upload a document's local images and rewrite it if anything changed."""
    logger.info("Processing %s", document_path)
    try:
        text = _read_document(document_path)
        references = find_local_references(text)
        if not references:
            logger.info("  No local image references, skipping")
            return DocumentResult(path=document_path, status=DocumentStatus.SKIPPED)

        logger.info("  Found %d local image reference(s)", len(references))
        mapping = build_url_mapping(document_path, references, uploader)
        failed = sum(1 for ref in references if ref.raw_path not in mapping)
        if not mapping:
            logger.info("  Nothing uploaded, leaving %s untouched", document_path)
            return DocumentResult(
                path=document_path,
                status=DocumentStatus.SKIPPED,
                found=len(references),
                failed=failed,
            )

        _write_document(document_path, rewrite_markdown(text, mapping))
        logger.info(
            "  Updated %s (%d link(s) replaced)", document_path, len(mapping)
        )
        return DocumentResult(
            path=document_path,
            status=DocumentStatus.DONE,
            found=len(references),
            replaced=len(mapping),
            failed=failed,
        )
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Error while processing %s: %s", document_path, exc)
        return DocumentResult(
            path=document_path, status=DocumentStatus.FAILED, error=str(exc)
        )
