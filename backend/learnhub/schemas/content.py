"""
Content request/response schemas.
"""
from datetime import datetime
from pydantic import BaseModel, field_validator


def _clean_labels(v: list[str] | None) -> list[str] | None:
    if v is None:
        return None
    out = []
    for s in v:
        s = (s or "").strip()
        if s and s not in out:
            out.append(s)
    return out


class ContentCreateRequest(BaseModel):
    id: str | None = None
    title: str
    short_blurb: str | None = None
    topic_id: str | None = None
    parent_id: str | None = None
    subjects: list[str] = []
    tags: list[str] = []
    prompt: str | None = None
    display_order: int = 0

    @field_validator("subjects", "tags")
    @classmethod
    def labels_clean(cls, v: list[str]) -> list[str]:
        return _clean_labels(v)


class ContentUpdateRequest(BaseModel):
    title: str | None = None
    short_blurb: str | None = None
    topic_id: str | None = None
    parent_id: str | None = None
    subjects: list[str] | None = None
    tags: list[str] | None = None
    prompt: str | None = None
    display_order: int | None = None

    @field_validator("subjects", "tags")
    @classmethod
    def labels_clean(cls, v: list[str] | None) -> list[str] | None:
        return _clean_labels(v)


class ContentResponse(BaseModel):
    id: str
    title: str
    short_blurb: str | None = None
    topic_id: str | None = None
    parent_id: str | None = None
    subjects: list[str] = []
    tags: list[str] = []
    prompt: str | None = None
    display_order: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True
