"""
Collection and collection-mapping schemas. A mapping must reference exactly one entity.
"""
from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, field_validator, model_validator

from learnhub.schemas.records import TopicRecord, TopicSubjectGroup

DisplayType = Literal["alphabetical", "by_subject", "custom", "grid", "list"]
SortOrder = Literal["asc", "desc"]


def _normalize_route(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    return v if v.startswith("/") else f"/{v}"


class CollectionCreateRequest(BaseModel):
    id: str | None = None
    name: str
    description: str | None = None
    page_route: str | None = None
    display_type: DisplayType = "list"
    filter_criteria: dict[str, Any] | None = None
    sort_field: str = "title"
    sort_order: SortOrder = "asc"
    is_active: bool = True

    @field_validator("page_route")
    @classmethod
    def route_slash(cls, v: str | None) -> str | None:
        return _normalize_route(v)


class CollectionUpdateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    page_route: str | None = None
    display_type: DisplayType | None = None
    filter_criteria: dict[str, Any] | None = None
    sort_field: str | None = None
    sort_order: SortOrder | None = None
    is_active: bool | None = None

    @field_validator("page_route")
    @classmethod
    def route_slash(cls, v: str | None) -> str | None:
        return _normalize_route(v)


class CollectionResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    page_route: str | None = None
    display_type: str
    filter_criteria: dict[str, Any] | None = None
    sort_field: str
    sort_order: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class MappingCreateRequest(BaseModel):
    topic_id: str | None = None
    content_id: str | None = None
    groupcard_id: str | None = None
    display_order: int = 0
    is_featured: bool = False

    @model_validator(mode="after")
    def exactly_one_reference(self):
        refs = [r for r in (self.topic_id, self.content_id, self.groupcard_id) if r]
        if len(refs) != 1:
            raise ValueError("exactly one of topic_id, content_id, groupcard_id must be set")
        return self


class MappingResponse(BaseModel):
    id: str
    collection_id: str
    topic_id: str | None = None
    content_id: str | None = None
    groupcard_id: str | None = None
    display_order: int
    is_featured: bool

    class Config:
        from_attributes = True


class CollectionItemResponse(BaseModel):
    """One mapped entity resolved for display, in collection order."""
    id: str
    type: Literal["topic", "content", "groupcard"]
    title: str
    display_order: int
    is_featured: bool
    mapping_id: str
    parent_id: str | None = None
    topic_id: str | None = None
    subject: str | None = None
    subjects: list[str] = []


class FilteredTopicsResponse(BaseModel):
    """Topics chosen by a collection's filter_criteria; groups is set instead of topics for by_subject."""
    collection_id: str
    display_type: str
    topics: list[TopicRecord] = []
    groups: list[TopicSubjectGroup] = []
