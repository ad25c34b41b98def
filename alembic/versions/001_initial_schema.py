"""Initial schema — authorities, issues and the assignment log.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Authorities
    op.create_table(
        "authorities",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "pincodes", ARRAY(sa.String(10)), nullable=False, server_default="{}"
        ),
        sa.Column("polygon", sa.JSON, nullable=True),
        sa.Column("center_lat", sa.Float, nullable=True),
        sa.Column("center_lon", sa.Float, nullable=True),
        sa.Column("jurisdiction_code", sa.String(8), nullable=True),
        sa.Column(
            "endpoint_tokens", ARRAY(sa.Text), nullable=False, server_default="{}"
        ),
    )
    op.create_index(
        "idx_authorities_pincodes", "authorities", ["pincodes"], postgresql_using="gin"
    )
    op.create_index("idx_authorities_jurisdiction", "authorities", ["jurisdiction_code"])

    # Issues
    op.create_table(
        "issues",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("pincode", sa.String(20), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("assigned_to", sa.String(100), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assignment_method", sa.String(30), nullable=True),
        sa.Column("assignment_error", sa.Text, nullable=True),
        sa.Column("reassigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reassigned_by", sa.String(200), nullable=True),
    )
    op.create_index("idx_issues_assigned_to", "issues", ["assigned_to"])
    op.create_index("idx_issues_method", "issues", ["assignment_method"])

    # Assignment log (append-only)
    op.create_table(
        "assignment_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("issue_id", sa.String(64), nullable=False),
        sa.Column("assigned_to", sa.String(100), nullable=False),
        sa.Column("method", sa.String(30), nullable=False),
        sa.Column("inputs", sa.JSON, nullable=False),
        sa.Column("error", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_assignment_logs_issue", "assignment_logs", ["issue_id"])


def downgrade() -> None:
    op.drop_table("assignment_logs")
    op.drop_table("issues")
    op.drop_table("authorities")
