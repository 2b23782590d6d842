"""Front-matter metadata schemas and the immutable Post value"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


NO_DESCRIPTION = "(no description provided)"


class DocumentKind(str, Enum):
    """Which template a document renders with"""
    post = "post"
    page = "page"


class PageMetadata(BaseModel):
    """Front matter for standalone pages (home, about)."""
    model_config = ConfigDict(extra="ignore")

    title:       str
    description: str


class PostMetadata(BaseModel):
    """Front matter for blog posts; `published` is required and timezone-aware."""
    model_config = ConfigDict(extra="ignore")

    title:       str
    description: Optional[str] = None
    published:   datetime

    @field_validator("published", mode="before")
    @classmethod
    def _date_to_datetime(cls, value: Any) -> Any:
        # YAML turns a bare `2024-01-01` into a date, not a datetime
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time())
        return value

    @field_validator("published")
    @classmethod
    def _attach_local_offset(cls, value: datetime) -> datetime:
        """Naive timestamps are read as local time."""
        if value.tzinfo is None:
            return value.astimezone()
        return value


@dataclass(frozen=True)
class Post:
    """A fully rendered document. Built once per refresh, never mutated."""
    slug:          str
    title:         str
    description:   str
    rendered_html: str
    kind:          DocumentKind = DocumentKind.post
    published:     Optional[datetime] = None     # None for pages

    @property
    def template_name(self) -> str:
        return self.kind.value

    def context(self) -> dict[str, Any]:
        """Template context for the renderer."""
        ctx: dict[str, Any] = {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "content": self.rendered_html,
        }
        if self.kind is DocumentKind.post:
            ctx["published"] = self.published.isoformat() if self.published else None
            ctx["is_blog_post"] = True
        return ctx
