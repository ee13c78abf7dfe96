"""
Record types the resolver works on. Built from ORM rows (from_attributes) or plain dicts,
so one hierarchy build runs on an immutable snapshot independent of the session.
"""
from typing import Any, Literal
from pydantic import BaseModel, field_validator


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _as_list(v):
    if v is None:
        return []
    if isinstance(v, str):
        return [v] if v.strip() else []
    return v


class TopicRecord(BaseModel):
    id: str
    title: str = ""
    parent_id: str | None = None
    subject: str | None = None
    display_order: int = 0
    short_summary: str | None = None
    showstudent: bool = True
    tags: list[str] = []

    @field_validator("parent_id", "subject", mode="before")
    @classmethod
    def empty_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("title", mode="before")
    @classmethod
    def title_text(cls, v):
        return v or ""

    @field_validator("display_order", mode="before")
    @classmethod
    def order_default(cls, v):
        return 0 if v is None else v

    @field_validator("showstudent", mode="before")
    @classmethod
    def showstudent_default(cls, v):
        return True if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def tags_list(cls, v):
        return _as_list(v)

    class Config:
        from_attributes = True


class ContentRecord(BaseModel):
    id: str
    title: str = ""
    topic_id: str | None = None
    parent_id: str | None = None
    subjects: list[str] = []
    tags: list[str] = []
    display_order: int = 0
    short_blurb: str | None = None
    prompt: str | None = None

    @field_validator("topic_id", "parent_id", mode="before")
    @classmethod
    def empty_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("title", mode="before")
    @classmethod
    def title_text(cls, v):
        return v or ""

    @field_validator("subjects", "tags", mode="before")
    @classmethod
    def string_lists(cls, v):
        return _as_list(v)

    @field_validator("display_order", mode="before")
    @classmethod
    def order_default(cls, v):
        return 0 if v is None else v

    @property
    def resolved_parent_id(self) -> str | None:
        """Explicit parent_id wins over topic_id."""
        return self.parent_id or self.topic_id

    class Config:
        from_attributes = True


class CollectionRecord(BaseModel):
    id: str
    name: str = ""
    description: str | None = None
    page_route: str | None = None
    display_type: str = "list"
    filter_criteria: Any = None
    sort_field: str = "title"
    sort_order: str = "asc"
    is_active: bool = True

    class Config:
        from_attributes = True


class MappingRecord(BaseModel):
    """One collection_content row. Not validated here: malformed rows must reach the resolver to be reported."""
    id: str
    collection_id: str
    topic_id: str | None = None
    content_id: str | None = None
    groupcard_id: str | None = None
    display_order: int = 0
    is_featured: bool = False

    @field_validator("topic_id", "content_id", "groupcard_id", mode="before")
    @classmethod
    def empty_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("display_order", mode="before")
    @classmethod
    def order_default(cls, v):
        return 0 if v is None else v

    def references(self) -> list[str]:
        """Entity ids this row points at, in topic/content/groupcard order."""
        return [r for r in (self.topic_id, self.content_id, self.groupcard_id) if r]

    class Config:
        from_attributes = True


class FilterRuleRecord(BaseModel):
    # filter_type / filter_logic stay plain strings: unknown values must fail closed, not fail validation.
    id: str
    name: str = ""
    level: int
    parent_level: int | None = None
    filter_type: str
    column_name: str | None = None
    column_value: str | None = None
    filter_logic: str = "equals"
    is_active: bool = True

    class Config:
        from_attributes = True


class HierarchyNode(BaseModel):
    id: str
    title: str
    kind: Literal["topic", "content"]
    level: int
    parent_id: str | None = None
    subject: str | None = None
    children: list["HierarchyNode"] = []
    display_order: int = 0


HierarchyNode.model_rebuild()


class Diagnostic(BaseModel):
    """Input the resolver skipped or repaired; returned instead of raising."""
    kind: Literal["malformed_mapping", "dangling_mapping", "orphan", "cycle"]
    entity_id: str | None = None
    message: str


class SubjectGroup(BaseModel):
    subject_name: str
    slug: str
    items: list[ContentRecord]
    item_count: int


class TopicSubjectGroup(BaseModel):
    subject: str
    items: list[TopicRecord]
    type: Literal["subject_group"] = "subject_group"
