"""Pydantic schemas for Note endpoints."""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACE_RE = re.compile(r"\s+")


def slugify(title: str) -> str:
    """Lowercase *title*, drop punctuation and join words with hyphens."""
    slug = _SLUG_STRIP_RE.sub("", title.lower().strip())
    return _SLUG_SPACE_RE.sub("-", slug)


class Note(BaseModel):
    """A user annotation on an article, with a snapshot of the article at save time."""

    id: str
    article_title: str
    article_slug: str
    article_url: str | None = None
    article_date: str | None = None
    source_name: str | None = None
    content: str
    created_at: datetime


class NoteCreateRequest(BaseModel):
    article_title: str = Field(..., min_length=1)
    article_slug: str = ""
    article_url: str | None = None
    article_date: str | None = None
    source_name: str | None = None
    content: str

    @field_validator("article_title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Article title must not be empty")
        return stripped

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Note content must not be empty")
        return stripped

    @model_validator(mode="after")
    def default_slug(self) -> "NoteCreateRequest":
        if not self.article_slug:
            self.article_slug = slugify(self.article_title)
        return self


class NoteUpdateRequest(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Note content must not be empty")
        return stripped


class NoteListResponse(BaseModel):
    notes: list[Note]
    total: int
