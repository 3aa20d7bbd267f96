"""create_secure_download_tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create documents, download tokens and the attempt trail."""
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "project_documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "name",
            sa.String(length=255),
            nullable=False,
            comment="Document display name",
        ),
        sa.Column(
            "url",
            sa.String(length=2048),
            nullable=False,
            comment="Storage location of the document",
        ),
        sa.Column(
            "type",
            sa.String(length=100),
            nullable=True,
            comment="MIME type or file extension",
        ),
        sa.Column("size", sa.BigInteger(), nullable=True, comment="Size in bytes"),
        sa.Column("document_category", sa.String(length=100), nullable=True),
        sa.Column("review_stage", sa.String(length=100), nullable=True),
        sa.Column(
            "deleted_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="Soft delete timestamp (NULL while the document is available)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "secure_download_tokens",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "token",
            sa.String(length=128),
            nullable=False,
            comment="Unguessable token string (at least 32 characters)",
        ),
        sa.Column(
            "document_id",
            sa.Uuid(),
            nullable=False,
            comment="Document this token unlocks",
        ),
        sa.Column(
            "recipient_email",
            sa.String(length=255),
            nullable=False,
            comment="Normalized (lower-cased, trimmed) recipient email",
        ),
        sa.Column(
            "order_id",
            sa.String(length=255),
            nullable=False,
            comment="Purchase the token was issued for",
        ),
        sa.Column(
            "expires_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Timestamp when the link stops working",
        ),
        sa.Column(
            "max_downloads",
            sa.Integer(),
            nullable=False,
            comment="Successful downloads allowed",
        ),
        sa.Column(
            "download_count",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
            comment="Successful downloads so far",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
            comment="False after expiry, revocation or cleanup",
        ),
        sa.CheckConstraint(
            "download_count >= 0", name="ck_download_count_non_negative"
        ),
        sa.CheckConstraint("max_downloads > 0", name="ck_max_downloads_positive"),
        sa.CheckConstraint(
            "download_count <= max_downloads", name="ck_download_count_within_quota"
        ),
        sa.CheckConstraint("char_length(token) >= 32", name="ck_token_min_length"),
        sa.ForeignKeyConstraint(
            ["document_id"], ["project_documents.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_secure_download_tokens_token"),
        "secure_download_tokens",
        ["token"],
        unique=True,
    )
    op.create_index(
        "idx_download_tokens_order", "secure_download_tokens", ["order_id"]
    )
    op.create_index(
        "idx_download_tokens_cleanup",
        "secure_download_tokens",
        ["is_active", "expires_at"],
    )

    op.create_table(
        "download_attempts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "token_id",
            sa.Uuid(),
            nullable=True,
            comment="Resolved token (NULL when the token was not found)",
        ),
        sa.Column(
            "attempted_email",
            sa.String(length=255),
            nullable=False,
            comment="Normalized email supplied by the requester",
        ),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column(
            "failure_reason",
            sa.String(length=255),
            nullable=True,
            comment="Failure taxonomy value or informational note",
        ),
        sa.CheckConstraint(
            "(success AND failure_reason IS NULL) OR "
            "(NOT success AND failure_reason IS NOT NULL)",
            name="ck_failure_reason_iff_failed",
        ),
        sa.ForeignKeyConstraint(
            ["token_id"], ["secure_download_tokens.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_download_attempts_token", "download_attempts", ["token_id"])
    op.create_index(
        "idx_download_attempts_email", "download_attempts", ["attempted_email"]
    )
    op.create_index(
        "idx_download_attempts_created_at", "download_attempts", ["created_at"]
    )

    # Attempt trail is append-only
    op.execute(
        "CREATE RULE download_attempts_no_update AS "
        "ON UPDATE TO download_attempts DO INSTEAD NOTHING"
    )
    op.execute(
        "CREATE RULE download_attempts_no_delete AS "
        "ON DELETE TO download_attempts DO INSTEAD NOTHING"
    )

    # 48 random bytes, base64url without padding: 64 characters
    op.execute(
        """
        CREATE OR REPLACE FUNCTION generate_secure_token()
        RETURNS text
        LANGUAGE sql
        VOLATILE
        AS $$
            SELECT rtrim(
                translate(encode(gen_random_bytes(48), 'base64'), '+/', '-_'),
                '='
            )
        $$
        """
    )


def downgrade() -> None:
    """Drop the secure download schema."""
    op.execute("DROP FUNCTION IF EXISTS generate_secure_token()")
    op.execute("DROP RULE IF EXISTS download_attempts_no_delete ON download_attempts")
    op.execute("DROP RULE IF EXISTS download_attempts_no_update ON download_attempts")
    op.drop_index("idx_download_attempts_created_at", table_name="download_attempts")
    op.drop_index("idx_download_attempts_email", table_name="download_attempts")
    op.drop_index("idx_download_attempts_token", table_name="download_attempts")
    op.drop_table("download_attempts")
    op.drop_index("idx_download_tokens_cleanup", table_name="secure_download_tokens")
    op.drop_index("idx_download_tokens_order", table_name="secure_download_tokens")
    op.drop_index(
        op.f("ix_secure_download_tokens_token"), table_name="secure_download_tokens"
    )
    op.drop_table("secure_download_tokens")
    op.drop_table("project_documents")
