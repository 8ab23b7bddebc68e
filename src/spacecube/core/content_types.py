"""Content-type selection for uploaded objects."""

from __future__ import annotations

import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Types the platform table is known to miss or get wrong on some systems
EXTRA_TYPES = {
    ".md": "text/markdown",
    ".webp": "image/webp",
    ".woff2": "font/woff2",
    ".zst": "application/zstd",
    ".7z": "application/x-7z-compressed",
}


def guess_content_type(key: str, override: str | None = None) -> str:
    """Pick the content type for an object.

    Args:
        key: Remote key; its extension drives the lookup.
        override: Explicit content type, used as-is when given.

    Returns:
        The override, else the type inferred from the extension, else
        ``application/octet-stream``.
    """
    if override:
        return override
    name = key.rsplit("/", 1)[-1]
    if "." in name:
        extension = "." + name.rsplit(".", 1)[-1].lower()
        if extension in EXTRA_TYPES:
            return EXTRA_TYPES[extension]
    guessed, _ = mimetypes.guess_type(name, strict=False)
    return guessed or DEFAULT_CONTENT_TYPE
