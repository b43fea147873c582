"""
Output File Naming
==================

Suggested download filenames derived from the document title.
"""

from typing import Optional
import re

from storpub_core.xml.utils import slugify

DEFAULT_FILENAME_LENGTH = 80
FALLBACK_NAME = "document"

_VERSION_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_version(version: Optional[str]) -> str:
    """Keep ``[A-Za-z0-9._-]``; other runs become ``-``."""
    if not version:
        return ""
    return _VERSION_UNSAFE_RE.sub("-", str(version).strip()).strip("-")


def suggest_filename(title: Optional[str],
                     extension: str,
                     version: Optional[str] = None,
                     max_length: int = DEFAULT_FILENAME_LENGTH) -> str:
    """
    Suggest a filename for an exported document.

    Args:
        title: Document title
        extension: File extension, with or without the leading dot
        version: Optional version appended as ``-v<version>``
        max_length: Maximum length of the title slug

    Returns:
        Filename such as ``budget-outlook-2025-v1.0.xml``

    Example:
        >>> suggest_filename("Éire: Budget Outlook", "xml", "1.0")
        'eire-budget-outlook-v1.0.xml'
    """
    stem = slugify(title, max_length) or FALLBACK_NAME
    safe_version = sanitize_version(version)
    if safe_version:
        stem = f"{stem}-v{safe_version}"
    ext = extension.lstrip(".")
    return f"{stem}.{ext}" if ext else stem
