"""create user, user_metadata, album and asset tables

Revision ID: 4f1c2a9d7e30
Revises:
Create Date: 2026-10-18 09:12:41.503112

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f1c2a9d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema - user accounts with metadata, and the owned album/asset rows."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False, server_default=""),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column(
            "should_change_password",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("quota_size_in_bytes", sa.BigInteger(), nullable=True),
        sa.Column(
            "quota_usage_in_bytes",
            sa.BigInteger(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column("storage_label", sa.String(), nullable=True),
        sa.Column("profile_image_path", sa.String(), nullable=False, server_default=""),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("storage_label"),
    )
    op.create_index("ix_app_user_deleted_at", "app_user", ["deleted_at"])

    op.create_table(
        "user_metadata",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "key"),
    )

    for table, extra in (
        (
            "album",
            [
                sa.Column("album_name", sa.String(), nullable=False, server_default=""),
                sa.Column("description", sa.Text(), nullable=False, server_default=""),
            ],
        ),
        (
            "asset",
            [
                sa.Column("original_path", sa.String(), nullable=False),
                sa.Column(
                    "file_size_in_bytes",
                    sa.BigInteger(),
                    nullable=False,
                    server_default=sa.text("0"),
                ),
            ],
        ),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.String(), nullable=False),
            sa.Column("owner_id", sa.String(), nullable=False),
            *extra,
            *_timestamps(),
            sa.ForeignKeyConstraint(["owner_id"], ["app_user.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_owner_id", table, ["owner_id"])
        op.create_index(f"ix_{table}_deleted_at", table, ["deleted_at"])


def downgrade() -> None:
    """Downgrade schema - drop all tables."""
    for table in ("asset", "album"):
        op.drop_index(f"ix_{table}_deleted_at", table_name=table)
        op.drop_index(f"ix_{table}_owner_id", table_name=table)
        op.drop_table(table)
    op.drop_table("user_metadata")
    op.drop_index("ix_app_user_deleted_at", table_name="app_user")
    op.drop_table("app_user")
