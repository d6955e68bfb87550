"""Copy images into a project's asset directory."""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Final

from chapterpress.exceptions import StorageError
from chapterpress.identifiers import sanitize_asset_name
from chapterpress.schemas import AssetCopyResult
from chapterpress.utils.logging_config import get_logger

logger = get_logger(__name__)

IMAGE_MIME_TYPES: Final[dict[str, str]] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}
DEFAULT_IMAGE_MIME_TYPE: Final[str] = "image/jpeg"


def image_mime_for_ext(ext: str) -> str:
    """Return the MIME type for an image extension (with or without a dot)."""
    return IMAGE_MIME_TYPES.get(ext.lstrip(".").lower(), DEFAULT_IMAGE_MIME_TYPE)


def image_mime_for_name(name: str) -> str:
    return image_mime_for_ext(Path(name).suffix)


def unique_asset_path(assets_dir: Path, name: str) -> Path:
    """Return ``assets_dir/name``, or ``stem_N.ext`` with the first free ``N``."""
    candidate = assets_dir / name
    if not candidate.exists():
        return candidate
    suffix = Path(name).suffix
    stem = name[: len(name) - len(suffix)]
    n = 1
    while True:
        candidate = assets_dir / f"{stem}_{n}{suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def encode_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def copy_asset_and_encode(assets_dir: Path, source: Path) -> AssetCopyResult:
    """Copy ``source`` into ``assets_dir`` under a sanitized, unused name.

    Args:
        assets_dir: The project's asset directory; created if missing.
        source: Image file to copy.

    Returns:
        The stored filename and a base64 data URL of the image.

    Raises:
        StorageError: If the directory cannot be created, the source cannot
            be read, or the copy cannot be written.
    """
    if not source.name:
        raise StorageError("read image", source, "invalid source path")
    try:
        assets_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError("create directory", assets_dir, exc) from exc

    destination = unique_asset_path(assets_dir, sanitize_asset_name(source.name))

    try:
        data = source.read_bytes()
    except OSError as exc:
        raise StorageError("read image", source, exc) from exc
    try:
        destination.write_bytes(data)
    except OSError as exc:
        raise StorageError("copy image to", destination, exc) from exc

    logger.info("Copied asset", extra={"source": str(source), "asset": destination.name})
    return AssetCopyResult(
        name=destination.name,
        data_url=encode_data_url(data, image_mime_for_name(destination.name)),
    )
