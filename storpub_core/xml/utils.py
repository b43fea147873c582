"""
XML Utility Functions
=====================

Escaping, slug/id generation and lxml lookup helpers shared by the
serializers and the DOCX property extractor.

Serializers build their output as strings, so every piece of text or
attribute value that reaches the output must pass through ``escape_xml``.
"""

import re
import unicodedata
from typing import Any, Callable, Iterator, Optional, Set
import logging

logger = logging.getLogger(__name__)


_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")
_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&(amp|lt|gt|quot|apos|#39);")
_ENTITY_MAP = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "#39": "'",
}

DEFAULT_SLUG_LENGTH = 60


def escape_xml(value: Any) -> str:
    """
    Escape a value for use in XML/HTML text or a quoted attribute.

    Args:
        value: Any value; ``None`` renders as an empty string

    Returns:
        String with ``& < > " '`` replaced by entity references

    Example:
        >>> escape_xml('Fish & "Chips"')
        'Fish &amp; &quot;Chips&quot;'
    """
    if value is None:
        return ""
    text = str(value)
    for raw, entity in _XML_ESCAPES:
        text = text.replace(raw, entity)
    return text


def escape_comment(value: Any) -> str:
    """
    Make text safe for the inside of an XML comment.

    Comments may not contain ``--`` nor end with ``-``.
    """
    text = escape_xml(value)
    while "--" in text:
        text = text.replace("--", "- -")
    if text.endswith("-"):
        text += " "
    return text


def xml_comment(message: str) -> str:
    """Build a complete ``<!-- ... -->`` comment from arbitrary text."""
    return f"<!-- {escape_comment(message)} -->"


def strip_markup(markup: str) -> str:
    """
    Reduce rendered inline markup back to plain text.

    Only understands the markup produced by this package (tags plus the
    five predefined entities).
    """
    if not markup:
        return ""
    text = _TAG_RE.sub("", markup)
    return _ENTITY_RE.sub(lambda m: _ENTITY_MAP[m.group(1)], text)


def strip_diacritics(text: str) -> str:
    """Decompose (NFKD) and drop combining marks: 'Éire' -> 'Eire'."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def slugify(text: Optional[str], max_length: int = DEFAULT_SLUG_LENGTH) -> str:
    """
    Turn a title into an id/filename-safe slug.

    Diacritics are stripped, runs of non-alphanumeric characters collapse
    to a single hyphen, leading/trailing hyphens are removed, and the
    result is lower-cased and truncated.

    Args:
        text: Source text
        max_length: Maximum slug length

    Returns:
        Slug, possibly empty

    Example:
        >>> slugify("Budget 2025: Éire's Outlook")
        'budget-2025-eire-s-outlook'
    """
    slug = _NON_ALNUM_RE.sub("-", strip_diacritics(text or ""))
    slug = slug.strip("-").lower()
    return slug[:max_length].rstrip("-")


def make_unique_id_factory(used: Optional[Set[str]] = None) -> Callable[[str], str]:
    """
    Create a function that hands out unique ids.

    The first request for a base returns it unchanged; later requests get
    ``-2``, ``-3``, ... appended. An empty base becomes ``section``.

    Example:
        >>> uniq = make_unique_id_factory()
        >>> uniq("intro"), uniq("intro"), uniq("intro")
        ('intro', 'intro-2', 'intro-3')
    """
    seen: Set[str] = set(used or ())

    def unique(base: str) -> str:
        candidate = base or "section"
        if candidate not in seen:
            seen.add(candidate)
            return candidate
        index = 2
        while f"{candidate}-{index}" in seen:
            index += 1
        result = f"{candidate}-{index}"
        seen.add(result)
        return result

    return unique


def normalize_whitespace(text: Optional[str]) -> str:
    """
    Normalize whitespace in text (collapse multiple spaces, trim).

    Args:
        text: Input text

    Returns:
        Normalized text
    """
    if not text:
        return ""
    return " ".join(text.split())


# ---------------------------------------------------------------------------
# lxml lookup helpers (namespace-agnostic)
# ---------------------------------------------------------------------------

def local_name(element: Any) -> str:
    """
    Extract local name from element tag, stripping any namespace prefix.

    Args:
        element: XML element

    Returns:
        Local tag name without namespace; empty for comments and PIs
    """
    tag = getattr(element, "tag", None)
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def iter_by_local_name(root: Any, name: str) -> Iterator[Any]:
    """Yield every element under ``root`` whose local name matches."""
    if root is None:
        return
    for elem in root.iter():
        if local_name(elem) == name:
            yield elem


def first_by_local_name(root: Any, name: str) -> Optional[Any]:
    """Return the first element with the given local name, or None."""
    return next(iter_by_local_name(root, name), None)
