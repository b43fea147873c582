"""
XML Processing Utilities
========================

Escaping, slugs, unique ids and namespace-agnostic lxml helpers.
"""

from storpub_core.xml.utils import (
    escape_xml,
    escape_comment,
    xml_comment,
    strip_markup,
    strip_diacritics,
    slugify,
    make_unique_id_factory,
    normalize_whitespace,
    local_name,
    iter_by_local_name,
    first_by_local_name,
)

__all__ = [
    "escape_xml",
    "escape_comment",
    "xml_comment",
    "strip_markup",
    "strip_diacritics",
    "slugify",
    "make_unique_id_factory",
    "normalize_whitespace",
    "local_name",
    "iter_by_local_name",
    "first_by_local_name",
]
