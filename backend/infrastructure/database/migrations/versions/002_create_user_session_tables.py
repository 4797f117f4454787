"""Create user session tables (preferences, session history, activity log, workspaces)

Revision ID: 002
Revises: 001
Create Date: 2025-01-17

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user_preferences",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("default_tone", sa.String(length=20), nullable=False, server_default="professional"),
        sa.Column("default_word_count", sa.Integer(), nullable=False, server_default="800"),
        sa.Column("include_images", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("include_references", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("theme", sa.String(length=10), nullable=False, server_default="system"),
        sa.Column("language", sa.String(length=5), nullable=False, server_default="en"),
        sa.Column("auto_save", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("auto_preview", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("preferred_categories", postgresql.JSON(), nullable=False, server_default="[]"),
        sa.Column("blocked_domains", postgresql.JSON(), nullable=False, server_default="[]"),
        sa.Column("favorite_topics", postgresql.JSON(), nullable=False, server_default="[]"),
        sa.Column("email_notifications", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("browser_notifications", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("weekly_digest", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("max_generation_time", sa.Integer(), nullable=False, server_default="300"),
        sa.Column("retry_attempts", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("quality_threshold", sa.Float(), nullable=False, server_default="0.7"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_preferences_user_id", "user_preferences", ["user_id"], unique=True)

    op.create_table(
        "user_session_history",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("session_id", sa.String(length=255), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("blog_posts_created", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("blog_posts_edited", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("images_searched", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("references_added", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("user_agent", sa.String(length=1000), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("device_type", sa.String(length=50), nullable=True),
        sa.Column("browser", sa.String(length=100), nullable=True),
        sa.Column("os", sa.String(length=100), nullable=True),
        sa.Column("session_data", postgresql.JSON(), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_session_history_user_id", "user_session_history", ["user_id"])
    op.create_index("ix_user_session_history_session_id", "user_session_history", ["session_id"])

    op.create_table(
        "user_activity_log",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("session_id", sa.String(length=255), nullable=True),
        sa.Column("activity_type", sa.String(length=100), nullable=False),
        sa.Column("activity_data", postgresql.JSON(), nullable=False, server_default="{}"),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        sa.Column("success", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("blog_post_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_activity_log_user_id", "user_activity_log", ["user_id"])
    op.create_index("ix_user_activity_log_activity_type", "user_activity_log", ["activity_type"])
    op.create_index("ix_user_activity_log_user_created", "user_activity_log", ["user_id", "created_at"])

    op.create_table(
        "user_workspace_state",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("workspace_id", sa.String(length=255), nullable=False),
        sa.Column("draft_content", sa.Text(), nullable=True),
        sa.Column("draft_metadata", postgresql.JSON(), nullable=False, server_default="{}"),
        sa.Column("last_activity", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("collaborators", postgresql.JSON(), nullable=False, server_default="[]"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "workspace_id", name="uq_user_workspace"),
    )
    op.create_index("ix_user_workspace_state_user_id", "user_workspace_state", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_user_workspace_state_user_id", table_name="user_workspace_state")
    op.drop_table("user_workspace_state")
    op.drop_index("ix_user_activity_log_user_created", table_name="user_activity_log")
    op.drop_index("ix_user_activity_log_activity_type", table_name="user_activity_log")
    op.drop_index("ix_user_activity_log_user_id", table_name="user_activity_log")
    op.drop_table("user_activity_log")
    op.drop_index("ix_user_session_history_session_id", table_name="user_session_history")
    op.drop_index("ix_user_session_history_user_id", table_name="user_session_history")
    op.drop_table("user_session_history")
    op.drop_index("ix_user_preferences_user_id", table_name="user_preferences")
    op.drop_table("user_preferences")
