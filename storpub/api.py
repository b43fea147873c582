#!/usr/bin/env python3
"""
Stór Publisher REST API

This module provides a FastAPI-based REST API for the document-and-metadata
publishing pipeline. It supports:

- Importing .docx files (body HTML plus mapped document properties)
- Validating metadata records before publication
- Parsing contributor notation
- Exporting HTML, house XML, DocBook 5 and JSON-LD, singly or as a ZIP bundle

API Flow:
1. POST /api/v1/import - Upload a .docx, receive body HTML and metadata
2. POST /api/v1/metadata/validate - Check the edited metadata
3. POST /api/v1/export/{format} - Download one export
   - xml and docbook are refused (422) while validation has errors
4. POST /api/v1/export/bundle - Download every allowed export in one ZIP

Usage:
    # Start the API server
    uvicorn storpub.api:app --host 0.0.0.0 --port 8000

    # Or programmatically
    from storpub.api import create_app
    app = create_app()
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from storpub import __version__
from storpub.config import ServiceConfig, configure_logging, get_config
from storpub_core.adapters import BodyConverter, DocxImporter
from storpub_core.errors import DocxImportError, ExportBlockedError, UnsupportedFormatError
from storpub_core.mapping import parse_contributors
from storpub_core.model import load_metadata
from storpub_core.model.units import unit_options
from storpub_core.packaging import ExportFormat, Exporter, suggest_filename

logger = logging.getLogger(__name__)

DOCX_EXTENSION = ".docx"
BUNDLE_MIME_TYPE = "application/zip"


# ============================================================================
# REQUEST MODELS
# ============================================================================

class MetadataRequest(BaseModel):
    """Metadata record to validate."""
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Metadata record (camelCase)")


class ContributorsRequest(BaseModel):
    """Contributor notation to parse."""
    text: str = Field(default="", description="Entries 'Name|role|unit|email|orcid' separated by ';'")
    unit_code: Optional[str] = Field(default=None, description="Unit for entries without a unit token")
    committee_code: Optional[str] = Field(default=None, description="Committee for COM entries without a token")


class ExportRequest(BaseModel):
    """Document and metadata to export."""
    model_config = ConfigDict(populate_by_name=True)

    document: Dict[str, Any] = Field(default_factory=lambda: {"type": "doc", "content": []})
    metadata: Optional[Dict[str, Any]] = None
    body_html: Optional[str] = Field(default=None, alias="bodyHtml", description="Editor HTML for the HTML export")


class BundleRequest(ExportRequest):
    """Document and metadata to export as a ZIP bundle."""
    formats: Optional[List[str]] = Field(default=None, description="Formats to include (default: all)")


# ============================================================================
# HELPERS
# ============================================================================

def _attachment(content: bytes, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(content)),
        },
    )


def _blocked_detail(error: ExportBlockedError) -> Dict[str, Any]:
    return {
        "message": str(error),
        "format": error.format,
        "validation": error.report.to_dict(),
    }


def _parse_metadata_form(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Metadata is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Metadata must be a JSON object")
    return data


# ============================================================================
# APPLICATION
# ============================================================================

def create_app(config: Optional[ServiceConfig] = None,
               converter: Optional[BodyConverter] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Service configuration (default: from environment)
        converter: Body converter for imports (default: mammoth)
    """
    service_config = config or get_config()
    configure_logging(service_config.log_level)

    pipeline = service_config.load_pipeline_config()
    importer = DocxImporter(converter=converter, config=pipeline)
    exporter = Exporter(config=pipeline)

    app = FastAPI(
        title="Stór Publisher API",
        description="""
REST API for importing Word documents and exporting research publications.

## Workflow

1. **Import**: `POST /api/v1/import` - Upload a .docx, returns body HTML and metadata
2. **Validate**: `POST /api/v1/metadata/validate` - Errors block XML exports, warnings do not
3. **Export**: `POST /api/v1/export/{format}` - html, xml, docbook or jsonld
4. **Bundle**: `POST /api/v1/export/bundle` - Every allowed format plus a manifest
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=service_config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================================
    # IMPORT ENDPOINTS
    # ========================================================================

    @app.post("/api/v1/import", tags=["Import"])
    async def import_docx(
        file: UploadFile = File(..., description=".docx file to import"),
        metadata: Optional[str] = Form(default=None, description="Current metadata as JSON"),
    ):
        """
        Import a .docx file.

        The body is converted to HTML and the document properties are merged
        into the current metadata. The caller's record is left unchanged
        when the import fails.
        """
        if not file.filename or not file.filename.lower().endswith(DOCX_EXTENSION):
            raise HTTPException(status_code=400, detail="File must be a .docx document")

        current = _parse_metadata_form(metadata)
        content = await file.read()

        try:
            result = importer.import_docx(content, current=current)
        except DocxImportError as e:
            logger.warning(f"Import of {file.filename} failed: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        report = exporter.validate(result.metadata)
        return {
            "filename": file.filename,
            "html": result.html,
            "metadata": result.metadata.to_dict(),
            "properties": result.properties,
            "messages": result.messages,
            "validation": report.to_dict(),
        }

    # ========================================================================
    # METADATA ENDPOINTS
    # ========================================================================

    @app.post("/api/v1/metadata/validate", tags=["Metadata"])
    async def validate_metadata_record(request: MetadataRequest):
        """
        Validate a metadata record.

        Returns the normalized record and a report of errors (which block
        XML exports) and warnings.
        """
        report = exporter.validate(request.metadata)
        return {
            "metadata": load_metadata(request.metadata).to_dict(),
            "validation": report.to_dict(),
            "summary": report.summary(),
        }

    @app.post("/api/v1/contributors/parse", tags=["Metadata"])
    async def parse_contributor_notation(request: ContributorsRequest):
        """Parse contributor notation into structured contributors."""
        people = parse_contributors(request.text, request.unit_code, request.committee_code)
        return {"contributors": [person.to_dict() for person in people]}

    @app.get("/api/v1/units", tags=["Metadata"])
    async def list_units():
        """List the publishing units."""
        return [asdict(option) for option in unit_options()]

    # ========================================================================
    # EXPORT ENDPOINTS
    # ========================================================================

    # Declared before /export/{format} so "bundle" is not taken as a format
    @app.post("/api/v1/export/bundle", tags=["Export"])
    async def export_bundle(request: BundleRequest):
        """
        Export every allowed format into one ZIP archive.

        Gated formats whose metadata does not validate are listed as skipped
        in the bundle manifest.
        """
        try:
            data = exporter.export_bundle(
                request.document,
                request.metadata,
                body_html=request.body_html,
                formats=request.formats,
            )
        except UnsupportedFormatError as e:
            raise HTTPException(status_code=400, detail=str(e))

        meta = load_metadata(request.metadata)
        filename = suggest_filename(
            meta.title, "zip", meta.version, pipeline.export.filename_length
        )
        return _attachment(data, filename, BUNDLE_MIME_TYPE)

    @app.post("/api/v1/export/{fmt}", tags=["Export"])
    async def export_document(fmt: str, request: ExportRequest):
        """
        Export a document in one format.

        Returns the file as an attachment. XML formats answer 422 with the
        validation report while the metadata has errors.
        """
        try:
            artifact = exporter.export(
                fmt,
                request.document,
                request.metadata,
                body_html=request.body_html,
            )
        except UnsupportedFormatError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ExportBlockedError as e:
            raise HTTPException(status_code=422, detail=_blocked_detail(e))

        return _attachment(artifact.data, artifact.filename, artifact.mime_type)

    # ========================================================================
    # HEALTH & INFO ENDPOINTS
    # ========================================================================

    @app.get("/api/v1/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "converter": importer.converter.converter_name,
        }

    @app.get("/api/v1/info", tags=["System"])
    async def pipeline_info():
        """Export formats and pipeline settings."""
        return {
            "name": app.title,
            "version": __version__,
            "organization": pipeline.organization.name,
            "house_schema_version": pipeline.export.house_schema_version,
            "max_upload_bytes": pipeline.importing.max_upload_bytes,
            "formats": [
                {
                    "format": fmt.value,
                    "extension": fmt.extension,
                    "mime_type": fmt.mime_type,
                    "gated": exporter.is_gated(fmt),
                }
                for fmt in ExportFormat
            ],
        }

    return app


# Create default app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    _config = get_config()
    uvicorn.run(app, host=_config.api.host, port=_config.api.port)
