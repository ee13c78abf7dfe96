"""
Collection: a curated set of topics/content bound to a page route. Soft-deleted via is_active.
CollectionContent: one mapping row; exactly one of topic_id / content_id / groupcard_id is set.
"""
from datetime import datetime
from sqlalchemy import String, Integer, Text, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from learnhub.database import Base
from learnhub.models.types import ID_LENGTH, new_id

DISPLAY_TYPES = ("alphabetical", "by_subject", "custom", "grid", "list")


class Collection(Base):
    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_route: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    display_type: Mapped[str] = mapped_column(String(30), nullable=False, default="list")
    filter_criteria: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # free-form, see services.criteria
    sort_field: Mapped[str] = mapped_column(String(50), nullable=False, default="title")
    sort_order: Mapped[str] = mapped_column(String(4), nullable=False, default="asc")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "display_type IN ('alphabetical', 'by_subject', 'custom', 'grid', 'list')",
            name="collections_display_type_check",
        ),
        CheckConstraint("sort_order IN ('asc', 'desc')", name="collections_sort_order_check"),
    )


class CollectionContent(Base):
    __tablename__ = "collection_content"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    collection_id: Mapped[str] = mapped_column(
        String(ID_LENGTH), ForeignKey("collections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Exactly one reference per row. Enforced on write by the API; legacy rows are
    # skipped and reported by the resolver instead of failing a whole collection.
    topic_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True)
    content_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True)
    groupcard_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
