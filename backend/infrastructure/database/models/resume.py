"""
Resume and tailoring-history database models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Index, String, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, utcnow


class TailoringStatus(str, Enum):
    """Lifecycle of a tailored application."""

    CREATED = "created"
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    REJECTED = "rejected"
    OFFER = "offer"


class UserResume(Base, TimestampMixin):
    """A LaTeX resume stored for a user. At most one is primary."""

    __tablename__ = "user_resumes"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(255), default="My Resume", nullable=False)
    latex_content: Mapped[str] = mapped_column(Text, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<UserResume(id={self.id}, title={self.title}, primary={self.is_primary})>"


class ResumeTailoringHistory(Base, TimestampMixin):
    """One resume tailoring run against a job offer."""

    __tablename__ = "resume_tailoring_history"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)

    # Job
    job_title: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    company_name: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    job_description: Mapped[str] = mapped_column(Text, nullable=False)
    job_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    tailoring_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Input
    original_resume_id: Mapped[Optional[str]] = mapped_column(UUID(as_uuid=False), nullable=True)
    original_resume_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    generation_options: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Output
    tailored_resume_content: Mapped[str] = mapped_column(Text, nullable=False)
    cover_letter_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    standard_answers: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    custom_answers: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    # Generation
    llm_provider: Mapped[str] = mapped_column(String(50), nullable=False)
    model_used: Mapped[str] = mapped_column(String(100), nullable=False)
    prompt_version: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Tracking
    status: Mapped[str] = mapped_column(
        String(50),
        default=TailoringStatus.CREATED.value,
        nullable=False,
        index=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    applied_with_this_version: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_tailoring_history_user_date", "user_id", "tailoring_date"),
    )
