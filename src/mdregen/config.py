"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:      str = "mdregen"
    template:      Optional[str] = Field(default=None, description="Template HTML used instead of the destination's own layout")
    offline:       bool = Field(default=False, description="Skip link title and Open Graph lookups")
    fetch_timeout: float = Field(default=10.0, gt=0, description="Seconds allowed per remote lookup")
    user_agent:    str = Field(default="mdregen", description="User-Agent header for remote lookups")
    log_level:     str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDREGEN_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDREGEN_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
