"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from mdnav.core.metadata.rules import InferenceRules


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDNAV_"


class Settings(BaseModel):
    app_name:         str = "mdnav"
    content_dir:      str = Field(default="docs",     description="Root directory of markdown content")
    output_dir:       str = Field(default="dist",     description="Directory for rendered HTML + TOC JSON files")
    parser_config:    str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    grouped_category: str = Field(default="build",    description="Category nested into groups; empty disables grouping")
    toc_min_level:    int = Field(default=1, ge=1, le=6, description="Shallowest heading level listed in a TOC")
    toc_max_level:    int = Field(default=4, ge=1, le=6, description="Deepest heading level listed in a TOC")
    toc_title:        str = Field(default="Table of Contents", description="Default TOC heading")
    cache_enabled:    bool = Field(default=True, description="Reuse results for identical documents within a run")
    workers:          int = Field(default=4, ge=1, description="Render worker threads")
    rules:            InferenceRules = Field(default_factory=InferenceRules, description="Filename inference keyword tables")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDNAV_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if name == "rules":
            continue
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
