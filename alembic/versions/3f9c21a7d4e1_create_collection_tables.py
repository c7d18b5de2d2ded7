"""create collection tables

Revision ID: 3f9c21a7d4e1
Revises:
Create Date: 2026-10-19 10:12:41.508213

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c21a7d4e1"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create projects, collections and collections_projects tables."""
    op.create_table(
        "projects",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Project ID (UUID)"),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "collections",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Collection ID (UUID)"),
        sa.Column(
            "owner_user_id",
            sa.String(length=36),
            nullable=False,
            comment="ID of the creating user",
        ),
        sa.Column(
            "title",
            sa.String(length=64),
            nullable=False,
            comment="Collection title (3-64 chars)",
        ),
        sa.Column(
            "description",
            sa.Text(),
            nullable=False,
            comment="Collection description (3-255 chars)",
        ),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            comment="Visibility/moderation status",
        ),
        sa.Column("icon_url", sa.String(length=2048), nullable=True),
        sa.Column(
            "color",
            sa.Integer(),
            nullable=True,
            comment="Dominant icon colour (0xRRGGBB)",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_collections_owner_user_id"), "collections", ["owner_user_id"], unique=False
    )

    op.create_table(
        "collections_projects",
        sa.Column(
            "collection_id",
            sa.String(length=36),
            nullable=False,
            comment="Foreign key to collections table",
        ),
        sa.Column(
            "project_id",
            sa.String(length=36),
            nullable=False,
            comment="Foreign key to projects table",
        ),
        sa.ForeignKeyConstraint(["collection_id"], ["collections.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("collection_id", "project_id"),
    )
    op.create_index(
        op.f("ix_collections_projects_project_id"),
        "collections_projects",
        ["project_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop collection tables."""
    op.drop_index(op.f("ix_collections_projects_project_id"), table_name="collections_projects")
    op.drop_table("collections_projects")
    op.drop_index(op.f("ix_collections_owner_user_id"), table_name="collections")
    op.drop_table("collections")
    op.drop_table("projects")
