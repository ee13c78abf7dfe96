"""cms_filter_config: per-level hierarchy filter rules.

Revision ID: 002
Revises: 001
Create Date: CMS filters

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "cms_filter_config",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("parent_level", sa.Integer(), nullable=True),
        sa.Column("filter_type", sa.String(20), nullable=False),
        sa.Column("column_name", sa.String(100), nullable=True),
        sa.Column("column_value", sa.String(1024), nullable=True),
        sa.Column("filter_logic", sa.String(20), nullable=False, server_default="equals"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint("filter_type IN ('parent_id', 'column_value', 'custom')", name="cms_filter_config_type_check"),
        sa.CheckConstraint("filter_logic IN ('equals', 'contains', 'in_array')", name="cms_filter_config_logic_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cms_filter_config_level", "cms_filter_config", ["level"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_cms_filter_config_level", table_name="cms_filter_config")
    op.drop_table("cms_filter_config")
