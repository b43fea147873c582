"""
Exceptions
==========

Exception hierarchy of the pipeline. Invalid metadata is reported through
ValidationReport; exceptions are used only where an operation cannot
produce its result.
"""

from typing import Any, Optional


class StorPubError(Exception):
    """Base class for pipeline errors."""


class DocxImportError(StorPubError):
    """A .docx package could not be read or converted."""


class UnsupportedFormatError(StorPubError):
    """An export format name is not known."""

    def __init__(self, fmt: Any):
        self.format = fmt
        super().__init__(f"Unsupported export format: {fmt!r}")


class ExportBlockedError(StorPubError):
    """
    Export refused because the metadata does not validate.

    Attributes:
        report: The ValidationReport explaining the refusal
        format: Format that was requested
    """

    def __init__(self, report: Any, fmt: Optional[str] = None):
        self.report = report
        self.format = fmt
        reasons = "; ".join(getattr(report, "errors", []) or [])
        target = f"{fmt} export" if fmt else "Export"
        super().__init__(f"{target} blocked by metadata validation: {reasons}")
