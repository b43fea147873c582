"""
DOCX Import
===========

Imports a .docx package: converts the body to HTML, extracts its
properties and merges them into the current metadata record.

Either everything succeeds and a new ImportResult is returned, or
DocxImportError is raised and nothing the caller holds has changed.
"""

from typing import Any, Optional
import io
import logging
import zipfile

from storpub_core.adapters.base import BodyConverter, ImportResult
from storpub_core.adapters.docx_properties import extract_docx_properties
from storpub_core.errors import DocxImportError
from storpub_core.mapping.docx_metadata import apply_metadata_patch, map_docx_properties

logger = logging.getLogger(__name__)


class DocxImporter:
    """
    Import .docx packages.

    Args:
        converter: Body converter; defaults to MammothBodyConverter
        config: Optional PipelineConfig (style map, organization, upload limit)

    Example:
        importer = DocxImporter()
        result = importer.import_docx(Path("report.docx").read_bytes(), current=metadata)
        print(result.summary())
    """

    def __init__(self, converter: Optional[BodyConverter] = None, config: Any = None):
        if converter is None:
            from storpub_core.adapters.mammoth_converter import MammothBodyConverter
            if config is not None:
                converter = MammothBodyConverter(
                    style_map=config.importing.style_map,
                    include_default_style_map=config.importing.include_default_style_map,
                )
            else:
                converter = MammothBodyConverter()
        self.converter = converter
        self.config = config

    def _check_archive(self, archive_bytes: bytes) -> None:
        if not archive_bytes:
            raise DocxImportError("Failed to import .docx: the file is empty")
        limit = self.config.importing.max_upload_bytes if self.config is not None else 0
        if limit and len(archive_bytes) > limit:
            raise DocxImportError(
                f"Failed to import .docx: file is larger than {limit} bytes"
            )
        if not zipfile.is_zipfile(io.BytesIO(archive_bytes)):
            raise DocxImportError("Failed to import .docx: not a valid .docx package")

    def import_docx(self, archive_bytes: bytes, current: Any = None) -> ImportResult:
        """
        Import a .docx package.

        Args:
            archive_bytes: Raw .docx bytes
            current: Current metadata (Metadata, mapping or None)

        Returns:
            ImportResult with body HTML, merged metadata, raw properties
            and converter messages

        Raises:
            DocxImportError: If the package cannot be read or converted
        """
        self._check_archive(archive_bytes)

        style_map = self.config.importing.style_map if self.config is not None else ()
        try:
            output = self.converter.convert(archive_bytes, style_map)
        except Exception as e:
            logger.error(f"{self.converter.converter_name} failed: {e}")
            raise DocxImportError(f"Failed to import .docx: {e}") from e

        properties = extract_docx_properties(archive_bytes)
        patch = map_docx_properties(properties, current, self.config)
        metadata = apply_metadata_patch(current, patch)

        logger.info(f"Imported .docx '{metadata.title}' ({len(output.html)} characters of HTML)")
        return ImportResult(
            html=output.html,
            metadata=metadata,
            properties=properties.to_dict(),
            messages=list(output.messages),
        )
