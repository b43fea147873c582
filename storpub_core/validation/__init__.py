"""
Validation Framework
====================

Metadata publication rules and the report/validator base classes.
"""

from storpub_core.validation.base import BaseValidator, ValidationReport
from storpub_core.validation.metadata_validator import (
    MetadataValidator,
    parse_date,
    validate_metadata,
)

__all__ = [
    "BaseValidator",
    "ValidationReport",
    "MetadataValidator",
    "validate_metadata",
    "parse_date",
]
