# typesynth/config.py
"""
typesynth configuration, single source of truth via Pydantic Settings.

Resolution order: CLI flags > env vars (TYPESYNTH_*) > .env file > defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SynthConfig(BaseSettings):
    """Settings consumed by the schema synthesis engine and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="TYPESYNTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Synthesis ---
    # Infer ``items`` for list/set fields from their type arguments.
    auto_generate_array_items: bool = True
    # Emit the literal constant list for enumerations.
    auto_generate_enum_values: bool = True
    discriminator_property_name: str = "type"
    # Treat nested declarations as variants when a variant set declares none.
    infer_variants_from_nested: bool = True

    # --- Document ---
    openapi_version: str = "3.1.0"
    output_format: Literal["yaml", "json"] = "yaml"

    # --- Logging ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # --- Paths ---
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".typesynth")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"


@lru_cache(maxsize=1)
def get_config() -> SynthConfig:
    """Return the global config singleton."""
    return SynthConfig()
