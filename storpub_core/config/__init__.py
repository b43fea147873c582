"""
Configuration Management
========================

Configuration utilities for the import/export pipeline.
"""

from storpub_core.config.settings import (
    PipelineConfig,
    OrganizationConfig,
    ImportConfig,
    ExportConfig,
    load_config,
    save_config,
    get_default_config,
)

__all__ = [
    "PipelineConfig",
    "OrganizationConfig",
    "ImportConfig",
    "ExportConfig",
    "load_config",
    "save_config",
    "get_default_config",
]
