"""Building batch documents from files and uploads."""

import mimetypes
from pathlib import Path

from remittance.pipeline.models import Document

# Receipt suffixes whose registration differs between platforms
_KNOWN_SUFFIXES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
}


def guess_media_type(filename: str) -> str:
    """Guess the MIME type of a receipt from its filename.

    Returns:
        MIME type, or 'application/octet-stream' if unknown
    """
    suffix = Path(filename).suffix.lower()
    if suffix in _KNOWN_SUFFIXES:
        return _KNOWN_SUFFIXES[suffix]
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"


def resolve_media_type(declared: str | None, filename: str) -> str:
    """Pick the media type of an uploaded receipt.

    A missing declared type, or application/octet-stream, falls back to
    the filename guess.
    """
    if declared and declared.split(";")[0].strip().lower() != "application/octet-stream":
        return declared
    return guess_media_type(filename)


def document_from_path(path: Path) -> Document:
    """Read a receipt file from disk."""
    return Document(
        filename=path.name,
        content=path.read_bytes(),
        media_type=guess_media_type(path.name),
    )
