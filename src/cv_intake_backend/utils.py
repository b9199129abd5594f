"""
Utility functions for file system operations and string sanitization.

This module provides helper functions for:
- Sanitizing submitter names for safe filesystem usage
- Building the deterministic scratch filename for an upload
- Splitting file extensions
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

# Pattern to match runs of characters that are not safe for filesystem paths
# Allows: word characters, dots and hyphens
SANITIZE_PATTERN = re.compile(r"[^\w.-]+")

# Upper bound, in UTF-8 bytes, for each name component of a scratch filename
MAX_NAME_BYTES = 64


def sanitize_name(name: str) -> str:
    """
    Generate a filesystem-safe name component from user input.

    Whitespace and unsafe characters are collapsed into a single underscore;
    case is preserved. The result is cut to MAX_NAME_BYTES of UTF-8 so that
    long names still fit in a single path component.

    Args:
        name: The submitted first or last name

    Returns:
        The sanitized name

    Example:
        >>> sanitize_name("Mary Ann")
        "Mary_Ann"
        >>> sanitize_name("O'Brien / Smith")
        "O_Brien_Smith"
    """
    sanitized = SANITIZE_PATTERN.sub("_", name.strip())
    return sanitized.encode("utf-8")[:MAX_NAME_BYTES].decode("utf-8", errors="ignore")


def split_extension(filename: str) -> tuple[str, str]:
    """
    Split a filename into stem and extension components.

    The extension runs from the last dot of the base name, so a bare
    ".pdf" is all extension.

    Args:
        filename: The filename to split (can include path)

    Returns:
        A tuple of (stem, extension) where extension includes the dot

    Example:
        >>> split_extension("document.pdf")
        ("document", ".pdf")
        >>> split_extension("/path/to/file.tar.gz")
        ("file.tar", ".gz")
        >>> split_extension(".pdf")
        ("", ".pdf")
    """
    name = Path(filename).name
    dot = name.rfind(".")
    if dot < 0:
        return name, ""
    return name[:dot], name[dot:]


def build_scratch_filename(
    first_name: str,
    last_name: str,
    original_filename: str,
    timestamp: datetime,
    timestamp_format: str = "%Y-%m-%d-%H-%M-%S",
) -> str:
    """
    Build the name an upload is stored under while it is processed.

    The result is ``<First>-<Last>-<timestamp><ext>``, keeping the original
    extension as submitted. The same name (with a ``.pdf`` extension after
    conversion) becomes the object key in storage.
    """
    _, extension = split_extension(original_filename)
    stamp = timestamp.strftime(timestamp_format)
    return f"{sanitize_name(first_name)}-{sanitize_name(last_name)}-{stamp}{extension}"
