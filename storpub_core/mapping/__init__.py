"""
Metadata Mapping
================

Contributor notation parsing and DOCX property to metadata mapping.
"""

from storpub_core.mapping.contributors import (
    affiliation_for_unit,
    contributor_key,
    display_name,
    merge_contributors,
    parse_contributor_entry,
    parse_contributors,
)
from storpub_core.mapping.docx_metadata import apply_metadata_patch, map_docx_properties

__all__ = [
    "parse_contributors",
    "parse_contributor_entry",
    "contributor_key",
    "merge_contributors",
    "affiliation_for_unit",
    "display_name",
    "map_docx_properties",
    "apply_metadata_patch",
]
