"""
Stór Publisher Core Library
===========================

A reusable library for the document-and-metadata publishing pipeline that
provides:

- The canonical document tree and metadata record
- Metadata publication rules (validation with errors and warnings)
- Contributor notation parsing
- DOCX property extraction and import
- HTML, house XML and DocBook 5 serializers
- Export artifacts and ZIP bundles

Architecture
------------

The library is organized into independent, composable modules:

    storpub_core/
    ├── xml/           - Escaping, slugs, ids, lxml helpers
    ├── model/         - Document tree, metadata record, units registry
    ├── validation/    - Metadata validation framework
    ├── mapping/       - Contributor parsing, DOCX property mapping
    ├── adapters/      - DOCX import (body converter, property extractor)
    ├── serializers/   - Inline/block renderers, section builder, outputs
    ├── packaging/     - Export artifacts, filenames, bundles
    └── config/        - Configuration management

Usage
-----

    from storpub_core import DocxImporter, Exporter, validate_metadata

    # Import a Word document
    result = DocxImporter().import_docx(docx_bytes, current=metadata)

    # Check the metadata
    report = validate_metadata(result.metadata)

    # Export DocBook (blocked when the report has errors)
    artifact = Exporter().export("docbook", tree, result.metadata)

Extensibility
-------------

The library uses abstract base classes for key interfaces, allowing you to:

- Plug in a different .docx body converter (BodyConverter)
- Add validation rules (BaseValidator)
- Replace the serializer of an export format (Exporter.register_serializer)

"""

__version__ = "1.0.0"
__author__ = "Stór Publisher Team"

# Import key classes for convenience
from storpub_core.errors import (
    StorPubError,
    DocxImportError,
    ExportBlockedError,
    UnsupportedFormatError,
)

from storpub_core.model import (
    Node,
    Mark,
    Metadata,
    Contributor,
    Affiliation,
    Unit,
    DocumentStatus,
    load_metadata,
    migrate_legacy_metadata,
    unit_from_code,
)

from storpub_core.validation import (
    BaseValidator,
    ValidationReport,
    MetadataValidator,
    validate_metadata,
)

from storpub_core.mapping import (
    parse_contributors,
    merge_contributors,
    map_docx_properties,
    apply_metadata_patch,
)

from storpub_core.adapters import (
    BodyConverter,
    MammothBodyConverter,
    DocxImporter,
    DocxProperties,
    extract_docx_properties,
)

from storpub_core.serializers import (
    InlineRenderer,
    build_sections,
    serialize_house_xml,
    serialize_docbook,
    wrap_html,
    render_html_body,
    build_jsonld,
)

from storpub_core.packaging import (
    ExportFormat,
    ExportArtifact,
    Exporter,
    suggest_filename,
)

from storpub_core.config import (
    PipelineConfig,
    load_config,
    save_config,
    get_default_config,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "StorPubError",
    "DocxImportError",
    "ExportBlockedError",
    "UnsupportedFormatError",
    # Model
    "Node",
    "Mark",
    "Metadata",
    "Contributor",
    "Affiliation",
    "Unit",
    "DocumentStatus",
    "load_metadata",
    "migrate_legacy_metadata",
    "unit_from_code",
    # Validation
    "BaseValidator",
    "ValidationReport",
    "MetadataValidator",
    "validate_metadata",
    # Mapping
    "parse_contributors",
    "merge_contributors",
    "map_docx_properties",
    "apply_metadata_patch",
    # Adapters
    "BodyConverter",
    "MammothBodyConverter",
    "DocxImporter",
    "DocxProperties",
    "extract_docx_properties",
    # Serializers
    "InlineRenderer",
    "build_sections",
    "serialize_house_xml",
    "serialize_docbook",
    "wrap_html",
    "render_html_body",
    "build_jsonld",
    # Packaging
    "ExportFormat",
    "ExportArtifact",
    "Exporter",
    "suggest_filename",
    # Config
    "PipelineConfig",
    "load_config",
    "save_config",
    "get_default_config",
]
