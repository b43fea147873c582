"""
Configuration Settings
======================

Configuration dataclasses for the import/export pipeline.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, List, Dict, Any
import json
import logging

import yaml

from storpub_core.adapters.mammoth_converter import DEFAULT_STYLE_MAP
from storpub_core.model.metadata import DEFAULT_SCHEMA_VERSION
from storpub_core.model.units import DEFAULT_COUNTRY, DEFAULT_LICENSE, ORGANIZATION_NAME

logger = logging.getLogger(__name__)


@dataclass
class OrganizationConfig:
    """Publishing organization."""

    name: str = ORGANIZATION_NAME
    country: str = DEFAULT_COUNTRY
    default_license: str = DEFAULT_LICENSE
    vendor_namespace: str = "https://oireachtas.ie/ns/docbook-oireachtas"
    vendor_prefix: str = "oor"


@dataclass
class ImportConfig:
    """DOCX import configuration."""

    style_map: List[str] = field(default_factory=lambda: list(DEFAULT_STYLE_MAP))
    include_default_style_map: bool = True
    max_upload_bytes: int = 25 * 1024 * 1024  # 0 disables the limit


@dataclass
class ExportConfig:
    """Export configuration."""

    house_schema_version: str = DEFAULT_SCHEMA_VERSION
    default_version: str = "0.1"
    docbook_schema_location: str = (
        "http://docbook.org/ns/docbook http://docbook.org/xml/5.0/rng/docbook.rng"
    )
    slug_length: int = 60
    filename_length: int = 80
    include_version_in_filename: bool = True
    gated_formats: List[str] = field(default_factory=lambda: ['xml', 'docbook'])


@dataclass
class PipelineConfig:
    """
    Complete pipeline configuration.

    Contains all configuration for document import and export:
    - Organization defaults (publisher, licence, vendor namespace)
    - DOCX import (style map, upload limit)
    - Export (schema versions, slugs, filenames, validation gating)

    Example:
        config = PipelineConfig()
        config.export.gated_formats = ['docbook']
        config.importing.style_map.append("p[style-name='Quote'] => blockquote")
        save_config(config, Path("storpub.yaml"))
    """

    organization: OrganizationConfig = field(default_factory=OrganizationConfig)
    importing: ImportConfig = field(default_factory=ImportConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # General settings
    log_level: str = "INFO"

    # Custom extensions
    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'organization': asdict(self.organization),
            'import': asdict(self.importing),
            'export': asdict(self.export),
            'log_level': self.log_level,
            'custom': self.custom,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'PipelineConfig':
        """Create from dictionary."""
        config = cls()
        data = data or {}

        if 'organization' in data:
            config.organization = OrganizationConfig(**data['organization'])
        if 'import' in data:
            config.importing = ImportConfig(**data['import'])
        if 'export' in data:
            config.export = ExportConfig(**data['export'])

        if 'log_level' in data:
            config.log_level = data['log_level']
        if 'custom' in data:
            config.custom = data['custom']

        return config


def load_config(config_path: Path) -> PipelineConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        PipelineConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return PipelineConfig.from_dict(data)


def save_config(config: PipelineConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config: PipelineConfig to save
        config_path: Path to save config file

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    if suffix not in ['.yaml', '.yml', '.json']:
        raise ValueError(f"Unsupported config format: {suffix}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    logger.info(f"Saved configuration to {config_path}")


def get_default_config() -> PipelineConfig:
    """Get default configuration."""
    return PipelineConfig()
