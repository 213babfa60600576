"""Initial schema — users, gigs, applications, reviews, verification_tokens.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("email_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("skills", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("experience", sa.Text, nullable=True),
        sa.Column("company", sa.String(200), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "gigs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "owner_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("budget", sa.String(100), nullable=True),
        sa.Column("timeline", sa.String(100), nullable=True),
        sa.Column("skills", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        *_timestamps(),
    )
    op.create_index("ix_gigs_owner_id", "gigs", ["owner_id"])
    op.create_index("ix_gigs_status", "gigs", ["status"])

    op.create_table(
        "applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "gig_id", UUID(as_uuid=True),
            sa.ForeignKey("gigs.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "author_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        *_timestamps(),
        sa.UniqueConstraint("gig_id", "author_id", name="uq_applications_gig_author"),
    )
    op.create_index("ix_applications_gig_id", "applications", ["gig_id"])
    op.create_index("ix_applications_author_id", "applications", ["author_id"])

    op.create_table(
        "reviews",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("gig_id", UUID(as_uuid=True), sa.ForeignKey("gigs.id"), nullable=False),
        sa.Column("reviewer_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reviewee_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("gig_id", "reviewer_id", name="uq_reviews_gig_reviewer"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        sa.CheckConstraint("reviewer_id <> reviewee_id", name="ck_reviews_not_self"),
    )
    op.create_index("ix_reviews_gig_id", "reviews", ["gig_id"])
    op.create_index("ix_reviews_reviewee_id", "reviews", ["reviewee_id"])

    op.create_table(
        "verification_tokens",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("identifier", sa.String(320), nullable=False),
        sa.Column("token", sa.String(128), nullable=False, unique=True),
        sa.Column("expires", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_verification_tokens_identifier", "verification_tokens", ["identifier"],
    )


def downgrade() -> None:
    op.drop_table("verification_tokens")
    op.drop_table("reviews")
    op.drop_table("applications")
    op.drop_table("gigs")
    op.drop_table("users")
