"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from mdblog.corpus.feed import ChannelConfig
from mdblog.deploy.trigger import TriggerMode


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDBLOG_"


class Settings(BaseModel):
    app_name:        str = "mdblog"
    content_dir:     str = Field(default="content", description="Root holding blog-pages/, pages/, templates/, syntaxes/, static/")
    host:            str = Field(default="127.0.0.1", description="Address the HTTP server binds to")
    port:            int = Field(default=8000, ge=1, le=65535)
    webhook_secret:  Optional[str] = Field(default=None, description="HMAC secret for POST /deploy; unset rejects every trigger")
    trigger_mode:    TriggerMode = Field(default=TriggerMode.shutdown, description="shutdown or refresh")
    base_url:        str = Field(default="http://localhost:8000/blog", description="Public blog url used for feed links")
    preview_limit:   int = Field(default=200, ge=1, description="Max characters in a derived description")
    highlight_style: str = Field(default="default", description="Pygments style for /highlight.css")
    feed_title:       str = "mdblog"
    feed_description: str = "Latest posts"
    feed_author:      Optional[str] = None
    feed_webmaster:   Optional[str] = None
    feed_copyright:   Optional[str] = None
    feed_image:       Optional[str] = None
    log_level:       str = Field(default="INFO", pattern="^(TRACE|DEBUG|INFO|SUCCESS|WARNING|ERROR|CRITICAL)$")

    @property
    def posts_dir(self) -> Path:
        return Path(self.content_dir) / "blog-pages"

    @property
    def pages_dir(self) -> Path:
        return Path(self.content_dir) / "pages"

    @property
    def templates_dir(self) -> Path:
        return Path(self.content_dir) / "templates"

    @property
    def syntaxes_dir(self) -> Path:
        return Path(self.content_dir) / "syntaxes"

    @property
    def static_dir(self) -> Path:
        return Path(self.content_dir) / "static"

    def channel(self) -> ChannelConfig:
        return ChannelConfig(
            title=self.feed_title,
            link=self.base_url,
            description=self.feed_description,
            author=self.feed_author,
            webmaster=self.feed_webmaster,
            managing_editor=self.feed_webmaster,
            copyright=self.feed_copyright,
            image_url=self.feed_image,
        )


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDBLOG_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValueError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
