"""Add tags (JSON list) to topic and content.

Revision ID: 004
Revises: 003
Create Date: Tags

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("topic", sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"))
    op.add_column("content", sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"))


def downgrade() -> None:
    op.drop_column("content", "tags")
    op.drop_column("topic", "tags")
