"""
Topic request/response schemas.
"""
from datetime import datetime
from pydantic import BaseModel, field_validator


class TopicCreateRequest(BaseModel):
    id: str | None = None  # optional: imports keep their legacy ids
    title: str
    short_summary: str | None = None
    parent_id: str | None = None
    subject: str | None = None
    tags: list[str] = []
    showstudent: bool = True
    display_order: int = 0

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v.strip()


class TopicUpdateRequest(BaseModel):
    title: str | None = None
    short_summary: str | None = None
    parent_id: str | None = None
    subject: str | None = None
    tags: list[str] | None = None
    showstudent: bool | None = None
    display_order: int | None = None


class TopicResponse(BaseModel):
    id: str
    title: str
    short_summary: str | None = None
    parent_id: str | None = None
    subject: str | None = None
    tags: list[str] = []
    showstudent: bool
    display_order: int
    level: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ReorderItem(BaseModel):
    id: str
    position: int


class ReorderRequest(BaseModel):
    items: list[ReorderItem]


class ReorderResponse(BaseModel):
    success: bool
    message: str
    updated: int = 0
