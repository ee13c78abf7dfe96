"""
Content: a leaf learning item. Linked to a topic (topic_id) and optionally to another
content item (parent_id, takes precedence). subjects is a JSON list of subject names; one item may
carry several subjects. tags is a free JSON list of labels. prompt == "groupcard" marks a group card.
"""
from datetime import datetime
from sqlalchemy import String, Integer, Text, DateTime
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from learnhub.database import Base
from learnhub.models.types import ID_LENGTH, new_id

GROUPCARD_PROMPT = "groupcard"


class Content(Base):
    __tablename__ = "content"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    short_blurb: Mapped[str | None] = mapped_column(Text, nullable=True)
    topic_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True, index=True)
    parent_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True, index=True)
    subjects: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    prompt: Mapped[str | None] = mapped_column(String(50), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
