"""Initial schema – texts

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

One row per shared text.  cipher_text / iv are opaque base64url strings;
timestamps are Unix seconds.  idx_expires_at serves the expiry sweep.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "texts",
        sa.Column("id", sa.Text(), primary_key=True),
        # base64url( salt || ciphertext || 16-byte GCM tag ) – never plaintext
        sa.Column("cipher_text", sa.Text(), nullable=False),
        # base64url( 12-byte AES-GCM nonce )
        sa.Column("iv", sa.Text(), nullable=False),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.Integer(), nullable=False),
    )

    op.create_index("idx_expires_at", "texts", ["expires_at"])


def downgrade() -> None:
    op.drop_index("idx_expires_at", table_name="texts")
    op.drop_table("texts")
