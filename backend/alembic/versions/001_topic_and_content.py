"""Topic and content tables.

Revision ID: 001
Revises:
Create Date: Initial

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "topic",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(512), nullable=False, server_default=""),
        sa.Column("short_summary", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.String(64), nullable=True),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("showstudent", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_topic_parent_id", "topic", ["parent_id"], unique=False)
    op.create_index("ix_topic_subject", "topic", ["subject"], unique=False)

    op.create_table(
        "content",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(512), nullable=False, server_default=""),
        sa.Column("short_blurb", sa.Text(), nullable=True),
        sa.Column("topic_id", sa.String(64), nullable=True),
        sa.Column("parent_id", sa.String(64), nullable=True),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("prompt", sa.String(50), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_topic_id", "content", ["topic_id"], unique=False)
    op.create_index("ix_content_parent_id", "content", ["parent_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_content_parent_id", table_name="content")
    op.drop_index("ix_content_topic_id", table_name="content")
    op.drop_table("content")
    op.drop_index("ix_topic_subject", table_name="topic")
    op.drop_index("ix_topic_parent_id", table_name="topic")
    op.drop_table("topic")
