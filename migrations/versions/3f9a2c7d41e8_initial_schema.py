"""initial schema

Revision ID: 3f9a2c7d41e8
Revises:
Create Date: 2026-10-19 09:12:40.218311
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3f9a2c7d41e8"
down_revision = None
branch_labels = None
depends_on = None


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _timestamp_indexes(batch_op, table: str) -> None:
    batch_op.create_index(batch_op.f(f"ix_{table}_created_at"), ["created_at"], unique=False)
    batch_op.create_index(batch_op.f(f"ix_{table}_updated_at"), ["updated_at"], unique=False)


def upgrade():
    # --- programs ---
    op.create_table(
        "programs",
        sa.Column("id", sa.String(length=32), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image", sa.String(length=500), nullable=False),
        *_timestamps(),
    )
    with op.batch_alter_table("programs") as batch_op:
        batch_op.create_index(batch_op.f("ix_programs_title"), ["title"], unique=False)
        _timestamp_indexes(batch_op, "programs")

    # --- blog_posts ---
    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=80), nullable=False),
        sa.Column("excerpt", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read_time", sa.Integer(), nullable=False),
        sa.Column("published_at", sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    with op.batch_alter_table("blog_posts") as batch_op:
        batch_op.create_index(batch_op.f("ix_blog_posts_category"), ["category"], unique=False)
        batch_op.create_index(batch_op.f("ix_blog_posts_published_at"), ["published_at"], unique=False)
        _timestamp_indexes(batch_op, "blog_posts")

    # --- contact_messages ---
    op.create_table(
        "contact_messages",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("email", sa.String(length=160), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        *_timestamps(),
    )
    with op.batch_alter_table("contact_messages") as batch_op:
        batch_op.create_index(batch_op.f("ix_contact_messages_email"), ["email"], unique=False)
        _timestamp_indexes(batch_op, "contact_messages")

    # --- donations ---
    op.create_table(
        "donations",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("program", sa.String(length=40), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("email", sa.String(length=160), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("amount_cents >= 0", name="ck_donations_amount_nonneg"),
    )
    with op.batch_alter_table("donations") as batch_op:
        batch_op.create_index(batch_op.f("ix_donations_email"), ["email"], unique=False)
        batch_op.create_index("ix_donations_program_created", ["program", "created_at"], unique=False)
        _timestamp_indexes(batch_op, "donations")


def downgrade():
    for table in ("donations", "contact_messages", "blog_posts", "programs"):
        op.drop_table(table)
