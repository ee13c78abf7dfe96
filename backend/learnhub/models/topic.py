"""
Topic: one node of the topic tree. parent_id links a subtopic to its parent topic;
level is derived (1 without parent, 2 with), never stored. Deleting a topic does not cascade.
"""
from datetime import datetime
from sqlalchemy import String, Integer, Text, Boolean, DateTime
from sqlalchemy.types import JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from learnhub.database import Base
from learnhub.models.types import ID_LENGTH, new_id


class Topic(Base):
    __tablename__ = "topic"

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    short_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    # No FK: orphaned children must survive deletes and are reported by the resolver.
    parent_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True, index=True)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    showstudent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
