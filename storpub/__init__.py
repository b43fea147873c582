"""
Stór Publisher Service

HTTP service around the storpub_core import/export pipeline. Authors
upload a Word document, edit the content and metadata in the browser, and
download HTML, house XML, DocBook 5 or JSON-LD exports.

Main Components:
- api: FastAPI application (import, validation, export endpoints)
- config: Service configuration from environment variables
- storpub_core: Document model, validation, mapping and serializers

Example Usage:
    # Start the API server
    uvicorn storpub.api:app --host 0.0.0.0 --port 8000

    # Programmatic usage
    from storpub import get_api
    app = get_api().create_app()
"""

__version__ = "1.0.0"
__author__ = "Stór Publisher Team"

from typing import Any, Dict

from storpub_core import __version__ as _core_version
from storpub_core.packaging import ExportFormat


def get_version() -> str:
    """Return the package version."""
    return __version__


def get_pipeline_info() -> Dict[str, Any]:
    """Return information about the pipeline and its export formats."""
    from storpub.config import get_config

    pipeline = get_config().load_pipeline_config()
    return {
        "version": __version__,
        "core_version": _core_version,
        "organization": pipeline.organization.name,
        "formats": [fmt.value for fmt in ExportFormat],
        "gated_formats": list(pipeline.export.gated_formats),
        "house_schema_version": pipeline.export.house_schema_version,
    }


# Lazy imports for heavy modules
def get_api():
    """Get the REST API module (lazy import)."""
    from . import api
    return api


__all__ = [
    "__version__",
    "get_version",
    "get_pipeline_info",
    "get_api",
]
