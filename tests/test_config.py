"""
Tests for pipeline and service configuration.

Run with: pytest tests/test_config.py -v
"""

import json

import pytest
import yaml

from storpub.config import (
    APIConfig,
    ServiceConfig,
    get_config,
    reset_config,
    set_config,
    validate_config,
)
from storpub_core.config import PipelineConfig, get_default_config, load_config, save_config


class TestPipelineConfig:
    """Tests for PipelineConfig."""

    def test_defaults(self):
        config = get_default_config()
        assert config.organization.vendor_prefix == "oor"
        assert config.export.default_version == "0.1"
        assert config.export.gated_formats == ["xml", "docbook"]
        assert config.importing.max_upload_bytes == 25 * 1024 * 1024
        assert "p[style-name='Heading 1'] => h1" in config.importing.style_map

    def test_to_dict_uses_import_key(self):
        data = PipelineConfig().to_dict()
        assert set(data) == {"organization", "import", "export", "log_level", "custom"}

    def test_from_dict(self):
        config = PipelineConfig.from_dict({
            "export": {"slug_length": 40},
            "import": {"max_upload_bytes": 0},
            "log_level": "DEBUG",
        })
        assert config.export.slug_length == 40
        assert config.importing.max_upload_bytes == 0
        assert config.log_level == "DEBUG"

    def test_from_none(self):
        assert PipelineConfig.from_dict(None).to_dict() == PipelineConfig().to_dict()

    @pytest.mark.parametrize("suffix", [".yaml", ".json"])
    def test_save_and_load(self, tmp_path, suffix):
        config = PipelineConfig()
        config.organization.name = "Test House"
        config.export.gated_formats = ["docbook"]
        path = tmp_path / "conf" / f"storpub{suffix}"
        save_config(config, path)
        loaded = load_config(path)
        assert loaded.organization.name == "Test House"
        assert loaded.export.gated_formats == ["docbook"]

    def test_yaml_file_is_readable(self, tmp_path):
        path = tmp_path / "storpub.yml"
        save_config(PipelineConfig(), path)
        assert yaml.safe_load(path.read_text(encoding="utf-8"))["export"]["slug_length"] == 60

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ValueError):
            save_config(PipelineConfig(), tmp_path / "storpub.toml")
        bad = tmp_path / "storpub.ini"
        bad.write_text("[x]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(bad)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


class TestServiceConfig:
    """Tests for ServiceConfig and environment parsing."""

    def test_from_env(self, monkeypatch, tmp_path):
        """STORPUB_* variables override the defaults."""
        pipeline_path = tmp_path / "pipeline.json"
        pipeline_path.write_text(json.dumps({"organization": {"name": "Env House"}}), encoding="utf-8")
        monkeypatch.setenv("STORPUB_HOST", "127.0.0.1")
        monkeypatch.setenv("STORPUB_PORT", "9000")
        monkeypatch.setenv("STORPUB_CORS_ORIGINS", "https://a.ie, https://b.ie")
        monkeypatch.setenv("STORPUB_MAX_UPLOAD_BYTES", "1024")
        monkeypatch.setenv("STORPUB_PIPELINE_CONFIG", str(pipeline_path))
        monkeypatch.setenv("STORPUB_LOG_LEVEL", "debug")

        config = ServiceConfig.from_env()
        assert config.api.host == "127.0.0.1"
        assert config.api.port == 9000
        assert config.api.cors_origins == ["https://a.ie", "https://b.ie"]
        assert config.log_level == "DEBUG"
        assert validate_config(config) == []

        pipeline = config.load_pipeline_config()
        assert pipeline.organization.name == "Env House"
        assert pipeline.importing.max_upload_bytes == 1024

    def test_default_pipeline(self):
        assert ServiceConfig().load_pipeline_config().to_dict() == PipelineConfig().to_dict()

    def test_validate_config(self, tmp_path):
        config = ServiceConfig(
            api=APIConfig(port=0, cors_origins=[], max_upload_bytes=-1),
            pipeline_config_path=tmp_path / "missing.yaml",
            log_level="LOUD",
        )
        errors = validate_config(config)
        assert len(errors) == 5

    def test_global_config(self):
        custom = ServiceConfig(log_level="WARNING")
        set_config(custom)
        try:
            assert get_config() is custom
        finally:
            reset_config()
        assert get_config() is not custom
        reset_config()

    def test_to_dict(self):
        data = ServiceConfig().to_dict()
        assert data["api"]["port"] == 8000
        assert data["pipeline_config_path"] is None
