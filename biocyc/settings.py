"""BioCyc client configuration using Pydantic.

Loads settings from, in increasing priority:
1. Default values
2. ``BIOCYC_*`` environment variables and ``.env``
3. An optional YAML file (``BioCycSettings.from_yaml``)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BioCycSettings(BaseSettings):
    """Central configuration for the BioCyc web-service client."""

    model_config = SettingsConfigDict(
        env_prefix="BIOCYC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Web services ---
    base_url: str = Field(default="https://websvc.biocyc.org", description="getxml/apixml/xmlquery host")
    atom_mappings_url: str = Field(default="https://biocyc.org", description="download-atom-mappings host")
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0

    # --- Resolution ---
    default_detail: Optional[str] = Field(default=None, description="Detail tag used by the CLI: none, low or full")

    # --- Logging ---
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/biocyc.yaml") -> "BioCycSettings":
        """Load settings from a YAML file; a missing file gives the defaults."""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)


_settings: Optional[BioCycSettings] = None


def get_settings() -> BioCycSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = BioCycSettings.from_yaml()
    return _settings


def reload_settings(yaml_path: Optional[str | Path] = None) -> BioCycSettings:
    """Reload settings, optionally from a specific YAML file."""
    global _settings
    _settings = BioCycSettings.from_yaml(yaml_path) if yaml_path else BioCycSettings.from_yaml()
    return _settings
