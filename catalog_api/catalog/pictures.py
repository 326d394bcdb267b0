"""Catalog item picture helpers."""

from pathlib import Path

DEFAULT_MIME_TYPE = "application/octet-stream"

IMAGE_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".gif": "image/gif",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".wmf": "image/wmf",
    ".jp2": "image/jp2",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}


def get_image_mime_type(file_name: str) -> str:
    """Map a picture file name to its MIME type by extension.

    Args:
        file_name: Picture file name.

    Returns:
        MIME type, or ``application/octet-stream`` for unknown extensions.
    """
    return IMAGE_MIME_TYPES.get(Path(file_name).suffix, DEFAULT_MIME_TYPE)


def get_full_path(content_root: str | Path, picture_file_name: str) -> Path | None:
    """Resolve a picture file name under the content root's ``Pics`` folder.

    Returns:
        The resolved path, or None when the name points outside ``Pics``.
    """
    pics_root = (Path(content_root) / "Pics").resolve()
    path = (pics_root / picture_file_name).resolve()
    if not path.is_relative_to(pics_root):
        return None
    return path
