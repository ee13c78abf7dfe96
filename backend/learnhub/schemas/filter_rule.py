"""
CMS filter rule (cms_filter_config) schemas.
"""
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, model_validator

FilterType = Literal["parent_id", "column_value", "custom"]
FilterLogic = Literal["equals", "contains", "in_array"]


class FilterRuleCreateRequest(BaseModel):
    name: str
    level: int
    parent_level: int | None = None
    filter_type: FilterType
    column_name: str | None = None
    column_value: str | None = None
    filter_logic: FilterLogic = "equals"
    is_active: bool = True

    @model_validator(mode="after")
    def column_rule_needs_column(self):
        if self.filter_type == "column_value" and not (self.column_name or "").strip():
            raise ValueError("column_value rules need column_name")
        return self


class FilterRuleUpdateRequest(BaseModel):
    name: str | None = None
    level: int | None = None
    parent_level: int | None = None
    filter_type: FilterType | None = None
    column_name: str | None = None
    column_value: str | None = None
    filter_logic: FilterLogic | None = None
    is_active: bool | None = None


class FilterRuleResponse(BaseModel):
    id: str
    name: str
    level: int
    parent_level: int | None = None
    filter_type: str
    column_name: str | None = None
    column_value: str | None = None
    filter_logic: str
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True
