"""Create resume and account tables (user_resumes, resume_tailoring_history, profiles, user_credits, events)

Revision ID: 003
Revises: 002
Create Date: 2025-01-24

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user_resumes",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False, server_default="My Resume"),
        sa.Column("latex_content", sa.Text(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_resumes_user_id", "user_resumes", ["user_id"])
    # At most one primary resume per user
    op.create_index(
        "uq_user_resumes_primary",
        "user_resumes",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("is_primary"),
    )

    op.create_table(
        "resume_tailoring_history",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("job_title", sa.String(length=500), nullable=True),
        sa.Column("company_name", sa.String(length=500), nullable=True),
        sa.Column("job_description", sa.Text(), nullable=False),
        sa.Column("job_url", sa.String(length=2000), nullable=True),
        sa.Column("tailoring_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("original_resume_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("original_resume_content", sa.Text(), nullable=True),
        sa.Column("generation_options", postgresql.JSON(), nullable=True),
        sa.Column("tailored_resume_content", sa.Text(), nullable=False),
        sa.Column("cover_letter_content", sa.Text(), nullable=True),
        sa.Column("standard_answers", postgresql.JSON(), nullable=True),
        sa.Column("custom_answers", postgresql.JSON(), nullable=True),
        sa.Column("llm_provider", sa.String(length=50), nullable=False),
        sa.Column("model_used", sa.String(length=100), nullable=False),
        sa.Column("prompt_version", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="created"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("applied_with_this_version", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_resume_tailoring_history_user_id", "resume_tailoring_history", ["user_id"])
    op.create_index("ix_resume_tailoring_history_status", "resume_tailoring_history", ["status"])
    op.create_index(
        "ix_tailoring_history_user_date", "resume_tailoring_history", ["user_id", "tailoring_date"]
    )

    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("avatar_url", sa.String(length=1000), nullable=True),
        sa.Column("subscription_tier", sa.String(length=50), nullable=False, server_default="free"),
        sa.Column("subscription_status", sa.String(length=50), nullable=False, server_default="inactive"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_user_id", "profiles", ["user_id"], unique=True)

    op.create_table(
        "user_credits",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("total_credits", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("used_credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_reset_date", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("subscription_type", sa.String(length=50), nullable=False, server_default="free"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("used_credits >= 0", name="ck_user_credits_used_non_negative"),
    )
    op.create_index("ix_user_credits_user_id", "user_credits", ["user_id"], unique=True)

    op.create_table(
        "events",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("is_error", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("is_dev", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_user_id", "events", ["user_id"])
    op.create_index("ix_events_name", "events", ["name"])


def downgrade() -> None:
    op.drop_index("ix_events_name", table_name="events")
    op.drop_index("ix_events_user_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_user_credits_user_id", table_name="user_credits")
    op.drop_table("user_credits")
    op.drop_index("ix_profiles_user_id", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("ix_tailoring_history_user_date", table_name="resume_tailoring_history")
    op.drop_index("ix_resume_tailoring_history_status", table_name="resume_tailoring_history")
    op.drop_index("ix_resume_tailoring_history_user_id", table_name="resume_tailoring_history")
    op.drop_table("resume_tailoring_history")
    op.drop_index("uq_user_resumes_primary", table_name="user_resumes")
    op.drop_index("ix_user_resumes_user_id", table_name="user_resumes")
    op.drop_table("user_resumes")
