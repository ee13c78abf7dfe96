"""collections and collection_content.

Revision ID: 003
Revises: 002
Create Date: Collections

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "collections",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("page_route", sa.String(255), nullable=True),
        sa.Column("display_type", sa.String(30), nullable=False, server_default="list"),
        sa.Column("filter_criteria", sa.JSON(), nullable=True),
        sa.Column("sort_field", sa.String(50), nullable=False, server_default="title"),
        sa.Column("sort_order", sa.String(4), nullable=False, server_default="asc"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint(
            "display_type IN ('alphabetical', 'by_subject', 'custom', 'grid', 'list')",
            name="collections_display_type_check",
        ),
        sa.CheckConstraint("sort_order IN ('asc', 'desc')", name="collections_sort_order_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_collections_page_route", "collections", ["page_route"], unique=False)

    op.create_table(
        "collection_content",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("collection_id", sa.String(64), nullable=False),
        sa.Column("topic_id", sa.String(64), nullable=True),
        sa.Column("content_id", sa.String(64), nullable=True),
        sa.Column("groupcard_id", sa.String(64), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["collection_id"], ["collections.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_collection_content_collection_id", "collection_content", ["collection_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_collection_content_collection_id", table_name="collection_content")
    op.drop_table("collection_content")
    op.drop_index("ix_collections_page_route", table_name="collections")
    op.drop_table("collections")
