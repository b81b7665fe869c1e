"""Application configuration: settings schema and coil.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "coil.yaml"


class Settings(BaseModel):
    app_name:   str = "coil"
    output_dir: str = Field(default=".",       description="Root directory that emitted files must stay inside")
    encoding:   str = Field(default="utf-8",   description="Encoding used to read the input document")
    log_level:  str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$", description="Logging level")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from coil.yaml, then COIL_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"COIL_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
