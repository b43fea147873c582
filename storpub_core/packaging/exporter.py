"""
Exporter
========

Turns a document and its metadata into downloadable artifacts, one per
output format, and gates the XML formats on metadata validation.

Formats:
    html     standalone HTML page (never gated)
    xml      house research-document XML
    docbook  DocBook 5 article
    jsonld   schema.org JSON-LD sidecar

Usage:
    exporter = Exporter()
    try:
        artifact = exporter.export("docbook", tree, metadata)
    except ExportBlockedError as e:
        print(e.report.summary())
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union
import io
import json
import logging
import zipfile

from storpub_core.config.settings import PipelineConfig, get_default_config
from storpub_core.errors import ExportBlockedError, UnsupportedFormatError
from storpub_core.model.metadata import Metadata, load_metadata, migrate_legacy_metadata
from storpub_core.packaging.naming import suggest_filename
from storpub_core.serializers.docbook import serialize_docbook
from storpub_core.serializers.house_xml import serialize_house_xml
from storpub_core.serializers.html import render_html_body, wrap_html
from storpub_core.serializers.jsonld import build_jsonld, jsonld_script
from storpub_core.validation.base import ValidationReport
from storpub_core.validation.metadata_validator import validate_metadata

logger = logging.getLogger(__name__)

Serializer = Callable[..., str]

MANIFEST_NAME = "manifest.json"


class ExportFormat(str, Enum):
    """Supported export formats."""
    HTML = "html"
    XML = "xml"
    DOCBOOK = "docbook"
    JSONLD = "jsonld"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @classmethod
    def parse(cls, value: Union[str, "ExportFormat"]) -> "ExportFormat":
        """
        Look up a format by name (case-insensitive).

        Raises:
            UnsupportedFormatError: If the name is not a known format
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(value) from None


_EXTENSIONS = {
    ExportFormat.HTML: "html",
    ExportFormat.XML: "xml",
    ExportFormat.DOCBOOK: "docbook.xml",
    ExportFormat.JSONLD: "jsonld",
}

_MIME_TYPES = {
    ExportFormat.HTML: "text/html;charset=utf-8",
    ExportFormat.XML: "application/xml;charset=utf-8",
    ExportFormat.DOCBOOK: "application/xml;charset=utf-8",
    ExportFormat.JSONLD: "application/ld+json",
}


@dataclass
class ExportArtifact:
    """
    A file ready to be saved or downloaded.

    Attributes:
        filename: Suggested filename
        content: Text (or binary) content
        mime_type: MIME type including charset where relevant
        format: Export format name
        report: Validation report the export was checked against
    """
    filename: str
    content: Union[str, bytes]
    mime_type: str
    format: str = ""
    report: Optional[ValidationReport] = None

    @property
    def data(self) -> bytes:
        """Content as UTF-8 bytes."""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")

    @property
    def size(self) -> int:
        return len(self.data)


def call_serializer(serializer: Serializer, document: Any, metadata: Any) -> str:
    """
    Call a serializer that may or may not accept metadata.

    Tries ``serializer(document, metadata)`` first, then
    ``serializer(document)``. If both fail, the error of the first call
    propagates.
    """
    try:
        return serializer(document, metadata)
    except Exception as first_error:
        logger.debug(f"Serializer failed with (document, metadata): {first_error}; retrying with document only")
        try:
            return serializer(document)
        except Exception:
            raise first_error


def _validation_input(metadata: Any, meta: Metadata) -> Any:
    if isinstance(metadata, Mapping):
        return migrate_legacy_metadata(metadata)
    return meta


@dataclass
class BundleResult:
    """Artifacts written to a bundle and the formats that were skipped."""
    artifacts: List[ExportArtifact] = field(default_factory=list)
    skipped: Dict[str, List[str]] = field(default_factory=dict)


class Exporter:
    """
    Export documents in any supported format.

    Args:
        config: Pipeline configuration (gated formats, filename rules)
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_default_config()
        self.serializers: Dict[ExportFormat, Serializer] = {
            ExportFormat.XML: partial(serialize_house_xml, config=self.config),
            ExportFormat.DOCBOOK: partial(serialize_docbook, config=self.config),
        }

    def register_serializer(self, fmt: Union[str, ExportFormat], serializer: Serializer) -> None:
        """Replace the serializer used for an XML format."""
        self.serializers[ExportFormat.parse(fmt)] = serializer

    def is_gated(self, fmt: Union[str, ExportFormat]) -> bool:
        return ExportFormat.parse(fmt).value in self.config.export.gated_formats

    def validate(self, metadata: Any, now: Optional[datetime] = None) -> ValidationReport:
        return validate_metadata(_validation_input(metadata, load_metadata(metadata)), now=now)

    def filename_for(self, fmt: ExportFormat, meta: Metadata) -> str:
        settings = self.config.export
        version = meta.version if settings.include_version_in_filename else None
        return suggest_filename(meta.title, fmt.extension, version, settings.filename_length)

    def render(self, fmt: ExportFormat, document: Any, meta: Metadata, body_html: Optional[str] = None) -> str:
        """Produce the content of one format without validation."""
        if fmt == ExportFormat.HTML:
            body = body_html if body_html is not None else render_html_body(document)
            return wrap_html(body, meta)
        if fmt == ExportFormat.JSONLD:
            return jsonld_script(build_jsonld(meta))
        return call_serializer(self.serializers[fmt], document, meta)

    def export(self,
               fmt: Union[str, ExportFormat],
               document: Any,
               metadata: Any = None,
               body_html: Optional[str] = None,
               now: Optional[datetime] = None) -> ExportArtifact:
        """
        Export a document.

        Args:
            fmt: Format name or ExportFormat
            document: Document tree (Node or editor JSON)
            metadata: Metadata record (Metadata, mapping or None)
            body_html: Editor HTML for the HTML export; rendered from the
                tree when omitted
            now: Evaluation time for validation

        Returns:
            ExportArtifact

        Raises:
            UnsupportedFormatError: If the format is unknown
            ExportBlockedError: If the format is gated and validation fails
        """
        fmt = ExportFormat.parse(fmt)
        meta = load_metadata(metadata)
        report = self.validate(metadata, now=now)

        if self.is_gated(fmt) and not report.ok:
            logger.warning(f"{fmt.value} export blocked: {report.errors}")
            raise ExportBlockedError(report, fmt.value)

        content = self.render(fmt, document, meta, body_html)
        artifact = ExportArtifact(
            filename=self.filename_for(fmt, meta),
            content=content,
            mime_type=fmt.mime_type,
            format=fmt.value,
            report=report,
        )
        logger.info(f"Exported {artifact.filename} ({artifact.size} bytes)")
        return artifact

    def export_all(self,
                   document: Any,
                   metadata: Any = None,
                   body_html: Optional[str] = None,
                   now: Optional[datetime] = None,
                   formats: Optional[Iterable[Union[str, ExportFormat]]] = None) -> BundleResult:
        """Export every allowed format; blocked formats are recorded, not raised."""
        result = BundleResult()
        for fmt in formats or list(ExportFormat):
            fmt = ExportFormat.parse(fmt)
            try:
                result.artifacts.append(self.export(fmt, document, metadata, body_html, now))
            except ExportBlockedError as e:
                result.skipped[fmt.value] = list(e.report.errors)
        return result

    def export_bundle(self,
                      document: Any,
                      metadata: Any = None,
                      body_html: Optional[str] = None,
                      now: Optional[datetime] = None,
                      formats: Optional[Iterable[Union[str, ExportFormat]]] = None) -> bytes:
        """
        Export every allowed format into one ZIP archive.

        The archive holds one file per exported format plus ``manifest.json``
        listing the files, the skipped formats and the validation report.

        Returns:
            ZIP archive bytes
        """
        meta = load_metadata(metadata)
        result = self.export_all(document, metadata, body_html, now, formats)
        report = self.validate(metadata, now=now)
        generated = (now or datetime.now(timezone.utc)).isoformat()

        manifest = {
            'title': meta.title,
            'version': meta.version,
            'generated': generated,
            'files': [
                {'format': a.format, 'filename': a.filename, 'mimeType': a.mime_type, 'bytes': a.size}
                for a in result.artifacts
            ],
            'skipped': [
                {'format': fmt, 'errors': errors} for fmt, errors in result.skipped.items()
            ],
            'validation': report.to_dict(),
        }

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as archive:
            for artifact in result.artifacts:
                archive.writestr(artifact.filename, artifact.data)
            archive.writestr(MANIFEST_NAME, json.dumps(manifest, indent=2, ensure_ascii=False))

        logger.info(
            f"Bundled {len(result.artifacts)} file(s); skipped {len(result.skipped)} blocked format(s)"
        )
        return buffer.getvalue()
