"""
Input Adapters
==============

.docx import: body conversion, property extraction and the importer that
ties them to the metadata mapping.
"""

from storpub_core.adapters.base import BodyConverter, ConversionOutput, ImportResult
from storpub_core.adapters.docx_import import DocxImporter
from storpub_core.adapters.docx_properties import (
    DocxProperties,
    extract_docx_properties,
    parse_core_properties,
    parse_custom_properties,
    to_iso_datetime,
)
from storpub_core.adapters.mammoth_converter import DEFAULT_STYLE_MAP, MammothBodyConverter

__all__ = [
    "BodyConverter",
    "ConversionOutput",
    "ImportResult",
    "DocxImporter",
    "DocxProperties",
    "extract_docx_properties",
    "parse_core_properties",
    "parse_custom_properties",
    "to_iso_datetime",
    "MammothBodyConverter",
    "DEFAULT_STYLE_MAP",
]
