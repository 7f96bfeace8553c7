"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from mdcompare.core.models import Algorithm, Granularity


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDCOMPARE_"


class Settings(BaseModel):
    app_name:    str = "mdcompare"
    db_url:      str = "sqlite:///mdcompare.db"
    granularity: Granularity = Field(default=Granularity.lines, description="Default comparison unit: lines or words")
    algorithm:   Algorithm = Field(default=Algorithm.myers, description="Edit-script algorithm: myers or difflib")
    preview_limit:        int = Field(default=5,  ge=0, description="Changes shown in a comparison preview")
    upload_preview_limit: int = Field(default=10, ge=0, description="Changes kept in an upload comparison preview")
    preview_chars:   int = Field(default=100, ge=1, description="Characters per preview entry before truncation")
    max_diff_tokens: int = Field(default=4_000_000, ge=0, description="Max old*new token product; 0 = unlimited")
    log_level: str  = Field(default="WARNING", description="Root log level")
    json_logs: bool = Field(default=False, description="Render logs as JSON instead of console text")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDCOMPARE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValueError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
