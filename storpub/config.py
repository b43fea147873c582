#!/usr/bin/env python3
"""
Configuration Management for the Stór Publisher Service

This module provides centralized configuration for the HTTP service that
wraps the import/export pipeline. It supports:

- Environment variable configuration
- Pipeline configuration file loading (JSON/YAML)
- Default values with override capability
- Validation of configuration values

Example Usage:
    from storpub.config import get_config

    config = get_config()
    print(config.api.port)  # 8000

    pipeline = config.load_pipeline_config()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from storpub_core.config import PipelineConfig, get_default_config, load_config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================================
# CONFIGURATION DATACLASSES
# ============================================================================

@dataclass
class APIConfig:
    """Configuration for the REST API."""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    max_upload_bytes: Optional[int] = None  # None = use pipeline import limit

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ServiceConfig:
    """
    Service configuration.

    Attributes:
        api: REST API settings
        pipeline_config_path: Optional JSON/YAML pipeline configuration file
        log_level: Root log level
    """
    api: APIConfig = field(default_factory=APIConfig)
    pipeline_config_path: Optional[Path] = None
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api": self.api.to_dict(),
            "pipeline_config_path": str(self.pipeline_config_path) if self.pipeline_config_path else None,
            "log_level": self.log_level,
        }

    def load_pipeline_config(self) -> PipelineConfig:
        """
        Load the pipeline configuration.

        Reads ``pipeline_config_path`` when set, otherwise returns defaults.
        The API upload limit, when set, overrides the pipeline import limit.
        """
        if self.pipeline_config_path:
            pipeline = load_config(self.pipeline_config_path)
        else:
            pipeline = get_default_config()
        if self.api.max_upload_bytes is not None:
            pipeline.importing.max_upload_bytes = self.api.max_upload_bytes
        return pipeline

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """
        Create configuration from environment variables.

        Environment variable naming:
        - STORPUB_HOST
        - STORPUB_PORT
        - STORPUB_CORS_ORIGINS (comma-separated)
        - STORPUB_MAX_UPLOAD_BYTES
        - STORPUB_PIPELINE_CONFIG
        - STORPUB_LOG_LEVEL
        """
        config = cls()

        # API settings
        if env_host := os.environ.get("STORPUB_HOST"):
            config.api.host = env_host
        if env_port := os.environ.get("STORPUB_PORT"):
            config.api.port = int(env_port)
        if env_origins := os.environ.get("STORPUB_CORS_ORIGINS"):
            config.api.cors_origins = [o.strip() for o in env_origins.split(",") if o.strip()]
        if env_upload := os.environ.get("STORPUB_MAX_UPLOAD_BYTES"):
            config.api.max_upload_bytes = int(env_upload)

        # Pipeline settings
        if env_pipeline := os.environ.get("STORPUB_PIPELINE_CONFIG"):
            config.pipeline_config_path = Path(env_pipeline)

        if env_level := os.environ.get("STORPUB_LOG_LEVEL"):
            config.log_level = env_level.upper()

        return config


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

_global_config: Optional[ServiceConfig] = None


def get_config() -> ServiceConfig:
    """
    Get the global configuration instance.

    Returns the cached configuration or creates a new one from environment.
    """
    global _global_config
    if _global_config is None:
        _global_config = ServiceConfig.from_env()
    return _global_config


def set_config(config: ServiceConfig):
    """Set the global configuration instance."""
    global _global_config
    _global_config = config


def reset_config():
    """Reset the global configuration to default."""
    global _global_config
    _global_config = None


# ============================================================================
# CONFIGURATION VALIDATION
# ============================================================================

def validate_config(config: ServiceConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if config.api.port < 1 or config.api.port > 65535:
        errors.append("API port must be between 1 and 65535")
    if not config.api.cors_origins:
        errors.append("At least one CORS origin is required")
    if config.api.max_upload_bytes is not None and config.api.max_upload_bytes < 0:
        errors.append("Max upload bytes must not be negative")

    if config.pipeline_config_path and not Path(config.pipeline_config_path).exists():
        errors.append(f"Pipeline config file not found: {config.pipeline_config_path}")

    if config.log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(f"Unknown log level: {config.log_level}")

    return errors


# ============================================================================
# LOGGING
# ============================================================================

def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for the service."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
