"""
User session, preference, activity and workspace database models.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String, Text, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, utcnow


class UserPreferences(Base, TimestampMixin):
    """Per-user generation and UI defaults. One row per user."""

    __tablename__ = "user_preferences"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        nullable=False,
        unique=True,
        index=True,
    )

    # Generation defaults
    default_tone: Mapped[str] = mapped_column(String(20), default="professional", nullable=False)
    default_word_count: Mapped[int] = mapped_column(Integer, default=800, nullable=False)
    include_images: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    include_references: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # UI
    theme: Mapped[str] = mapped_column(String(10), default="system", nullable=False)
    language: Mapped[str] = mapped_column(String(5), default="en", nullable=False)
    auto_save: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    auto_preview: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Content filters
    preferred_categories: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    blocked_domains: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    favorite_topics: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Notifications
    email_notifications: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    browser_notifications: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    weekly_digest: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Generation tuning
    max_generation_time: Mapped[int] = mapped_column(Integer, default=300, nullable=False)  # seconds
    retry_attempts: Mapped[int] = mapped_column(Integer, default=3, nullable=False)
    quality_threshold: Mapped[float] = mapped_column(Float, default=0.7, nullable=False)


class UserSessionHistory(Base, TimestampMixin):
    """A browser session with usage counters recorded when it ends."""

    __tablename__ = "user_session_history"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    session_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Counters
    blog_posts_created: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    blog_posts_edited: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    images_searched: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    references_added: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Client
    user_agent: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    device_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    browser: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    os: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    session_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)


class UserActivityLog(Base):
    """Append-only log of user actions."""

    __tablename__ = "user_activity_log"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    activity_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    """Values: 'blog_generated', 'blog_edited', 'image_search', 'reference_added', ..."""

    activity_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    success: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    blog_post_id: Mapped[Optional[str]] = mapped_column(UUID(as_uuid=False), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_user_activity_log_user_created", "user_id", "created_at"),
    )


class UserWorkspaceState(Base, TimestampMixin):
    """Unsaved editor draft for a named workspace."""

    __tablename__ = "user_workspace_state"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    workspace_id: Mapped[str] = mapped_column(String(255), nullable=False)

    draft_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    draft_metadata: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    last_activity: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    collaborators: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "workspace_id", name="uq_user_workspace"),
    )
