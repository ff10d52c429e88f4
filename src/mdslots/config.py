"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    parser_config: str = Field(default="gfm-like",    description="MarkdownIt parser preset name")
    music_lang:    str = Field(default="music-abc",   min_length=1, description="Fence language rewritten to a score node")
    score_tag:     str = Field(default="music-score", min_length=1, description="Element name the score node renders as")
    slot_prefix:   str = Field(default="meta-",       min_length=1, description="Tag prefix marking top-level slot elements")
    output_dir:    str = Field(default="dist",        description="Directory for transformed JSON documents")
    indent:        int = Field(default=2, ge=0,       description="JSON indent for written results; 0 = compact")
    log_level:     str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSLOTS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSLOTS_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
