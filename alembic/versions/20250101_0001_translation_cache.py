"""Language registry and localized string cache."""

import uuid

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20250101_0001"
down_revision = None
branch_labels = None
depends_on = None

DEFAULT_LANGUAGE_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


def upgrade() -> None:
    languages = op.create_table(
        "languages",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("code", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("native_name", sa.String(length=64), nullable=False),
        sa.Column("flag", sa.String(length=16), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code", name="uq_languages_code"),
    )

    op.create_table(
        "localized_strings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("language_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("key", sa.String(length=128), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("context", sa.String(length=32), server_default="ui_translation", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["language_id"], ["languages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("language_id", "key", name="uq_localized_strings_language_key"),
    )
    op.create_index(
        "ix_localized_strings_language",
        "localized_strings",
        ["language_id"],
        unique=False,
    )

    op.bulk_insert(
        languages,
        [
            {
                "id": DEFAULT_LANGUAGE_ID,
                "code": "en",
                "name": "English",
                "native_name": "English",
                "flag": "🇺🇸",
                "is_active": True,
            }
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_localized_strings_language", table_name="localized_strings")
    op.drop_table("localized_strings")
    op.drop_table("languages")
