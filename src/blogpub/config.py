"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"

DEFAULT_KNOWN_FIELDS = [
    "title", "date", "draft", "tags",
    "slug", "description", "summary", "aliases", "categories", "lastmod",
]


class Settings(BaseModel):
    app_name:      str = "blogpub"
    content_dir:   str = Field(default="content", description="Root of the content tree")
    posts_dir:     str = Field(default="posts",   description="Top-level directory whose files are posts")
    db_url:        str = "sqlite:///blogpub.db"
    output_dir:    str = Field(default="dist",    description="Directory for the published pages.json manifest")
    max_versions:  int = Field(default=10, ge=0,  description="Max stored versions per page; 0 disables pruning")
    strict_fields: bool = Field(default=False,    description="Warn on front matter keys outside known_fields")
    known_fields:  list[str] = Field(default_factory=lambda: list(DEFAULT_KNOWN_FIELDS))
    parser_config: str = Field(default="commonmark", description="MarkdownIt parser preset name")


def _env_value(name: str, val: str) -> Any:
    """List-valued settings arrive from the environment as comma-separated strings."""
    if Settings.model_fields[name].annotation == list[str]:
        return [v.strip() for v in val.split(",") if v.strip()]
    return val


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then BLOGPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"BLOGPUB_{name.upper()}"):
            data[name] = _env_value(name, val)

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
