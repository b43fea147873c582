"""
Export Packaging
================

Export artifacts, filename suggestions and ZIP bundles.
"""

from storpub_core.packaging.exporter import (
    BundleResult,
    ExportArtifact,
    ExportFormat,
    Exporter,
    call_serializer,
)
from storpub_core.packaging.naming import sanitize_version, suggest_filename

__all__ = [
    "ExportFormat",
    "ExportArtifact",
    "BundleResult",
    "Exporter",
    "call_serializer",
    "suggest_filename",
    "sanitize_version",
]
