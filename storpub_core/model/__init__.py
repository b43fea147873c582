"""
Data Model
==========

Document tree, metadata record and the units registry.
"""

from storpub_core.model.document import (
    LIST_TYPES,
    TABLE_CELL_TYPES,
    Mark,
    MarkType,
    Node,
    NodeType,
    document,
)
from storpub_core.model.metadata import (
    DEFAULT_SCHEMA_VERSION,
    Affiliation,
    Contributor,
    DataLink,
    DocumentStatus,
    Metadata,
    RelatedItem,
    Series,
    Unit,
    load_metadata,
    migrate_legacy_metadata,
    split_keywords,
    split_name,
)
from storpub_core.model.units import (
    COMMITTEE_UNIT_CODE,
    DEFAULT_COUNTRY,
    DEFAULT_LICENSE,
    FALLBACK_UNIT_CODE,
    ORGANIZATION_NAME,
    UNITS,
    UnitOption,
    is_committee_token,
    unit_from_code,
    unit_options,
)

__all__ = [
    # Document tree
    "Node",
    "Mark",
    "NodeType",
    "MarkType",
    "LIST_TYPES",
    "TABLE_CELL_TYPES",
    "document",
    # Metadata
    "Metadata",
    "Contributor",
    "Affiliation",
    "Unit",
    "Series",
    "RelatedItem",
    "DataLink",
    "DocumentStatus",
    "DEFAULT_SCHEMA_VERSION",
    "load_metadata",
    "migrate_legacy_metadata",
    "split_keywords",
    "split_name",
    # Units
    "UnitOption",
    "UNITS",
    "ORGANIZATION_NAME",
    "DEFAULT_COUNTRY",
    "DEFAULT_LICENSE",
    "COMMITTEE_UNIT_CODE",
    "FALLBACK_UNIT_CODE",
    "unit_from_code",
    "unit_options",
    "is_committee_token",
]
