"""
CMS filter rule (table cms_filter_config): narrows one hierarchy level by parent or column value.
"""
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from learnhub.database import Base
from learnhub.models.types import ID_LENGTH, new_id


class CmsFilterConfig(Base):
    __tablename__ = "cms_filter_config"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    parent_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    filter_type: Mapped[str] = mapped_column(String(20), nullable=False)  # parent_id | column_value | custom
    column_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    column_value: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    filter_logic: Mapped[str] = mapped_column(String(20), nullable=False, default="equals")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("filter_type IN ('parent_id', 'column_value', 'custom')", name="cms_filter_config_type_check"),
        CheckConstraint("filter_logic IN ('equals', 'contains', 'in_array')", name="cms_filter_config_logic_check"),
    )
