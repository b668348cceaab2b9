"""create properties table

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 10:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("price", sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column("project_id", sa.String(length=50), nullable=False),
        sa.Column(
            "broker_id",
            sa.String(length=64),
            nullable=False,
            comment="Identity of the broker who uploaded the row",
        ),
        sa.Column(
            "import_id",
            postgresql.UUID(as_uuid=True),
            nullable=True,
            comment="Bulk import run that created the row",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_properties_project_id", "properties", ["project_id"], unique=False)
    op.create_index("ix_properties_broker_id", "properties", ["broker_id"], unique=False)
    op.create_index("ix_properties_import_id", "properties", ["import_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_properties_import_id", table_name="properties")
    op.drop_index("ix_properties_broker_id", table_name="properties")
    op.drop_index("ix_properties_project_id", table_name="properties")
    op.drop_table("properties")
