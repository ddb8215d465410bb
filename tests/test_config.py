# tests/test_config.py
"""Tests for SynthConfig, the Pydantic Settings source of truth."""

from pathlib import Path

import pytest


class TestSynthConfig:
    """Defaults and environment overrides."""

    def test_default_values(self):
        from typesynth.config import SynthConfig

        cfg = SynthConfig()
        assert cfg.auto_generate_array_items is True
        assert cfg.auto_generate_enum_values is True
        assert cfg.discriminator_property_name == "type"
        assert cfg.infer_variants_from_nested is True
        assert cfg.openapi_version == "3.1.0"
        assert cfg.output_format == "yaml"
        assert cfg.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        """Environment variables with the TYPESYNTH_ prefix override defaults."""
        from typesynth.config import SynthConfig

        monkeypatch.setenv("TYPESYNTH_AUTO_GENERATE_ARRAY_ITEMS", "false")
        monkeypatch.setenv("TYPESYNTH_DISCRIMINATOR_PROPERTY_NAME", "kind")
        monkeypatch.setenv("TYPESYNTH_OUTPUT_FORMAT", "json")
        cfg = SynthConfig()
        assert cfg.auto_generate_array_items is False
        assert cfg.discriminator_property_name == "kind"
        assert cfg.output_format == "json"

    def test_invalid_output_format_rejected(self, monkeypatch):
        from pydantic import ValidationError

        from typesynth.config import SynthConfig

        monkeypatch.setenv("TYPESYNTH_OUTPUT_FORMAT", "xml")
        with pytest.raises(ValidationError):
            SynthConfig()

    def test_home_dir_default(self, monkeypatch):
        """home_dir defaults to ~/.typesynth."""
        from typesynth.config import SynthConfig

        monkeypatch.delenv("TYPESYNTH_HOME_DIR", raising=False)
        cfg = SynthConfig()
        assert cfg.home_dir == Path.home() / ".typesynth"

    def test_log_dir_derives_from_home(self, tmp_path, monkeypatch):
        from typesynth.config import SynthConfig

        monkeypatch.setenv("TYPESYNTH_HOME_DIR", str(tmp_path))
        cfg = SynthConfig()
        assert cfg.log_dir == tmp_path / "logs"

    def test_get_config_singleton(self):
        """get_config() returns the same instance until the cache is cleared."""
        from typesynth.config import get_config

        c1 = get_config()
        c2 = get_config()
        assert c1 is c2

    def test_model_copy_leaves_singleton_untouched(self):
        from typesynth.config import get_config

        cfg = get_config()
        copy = cfg.model_copy(update={"auto_generate_enum_values": False})
        assert copy.auto_generate_enum_values is False
        assert get_config().auto_generate_enum_values is True
