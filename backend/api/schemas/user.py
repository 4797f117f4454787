"""
User session, preference, activity, workspace, profile and credit schemas.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Sessions
# ============================================================================


class SessionStartRequest(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=255)
    device_type: str | None = Field(None, max_length=50)
    browser: str | None = Field(None, max_length=100)
    os: str | None = Field(None, max_length=100)


class SessionEndRequest(BaseModel):
    session_id: str | None = Field(None, min_length=1, max_length=255)
    blog_posts_created: int = Field(default=0, ge=0)
    blog_posts_edited: int = Field(default=0, ge=0)
    images_searched: int = Field(default=0, ge=0)
    references_added: int = Field(default=0, ge=0)
    session_data: dict[str, Any] = Field(default_factory=dict)


class SessionResponse(BaseModel):
    id: str
    session_id: str
    started_at: datetime
    ended_at: datetime | None
    duration_seconds: int | None
    blog_posts_created: int
    blog_posts_edited: int
    images_searched: int
    references_added: int
    device_type: str | None
    browser: str | None
    os: str | None

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Preferences
# ============================================================================


class PreferencesUpdateRequest(BaseModel):
    """Partial preferences update."""

    default_tone: Literal["academic", "casual", "professional"] | None = None
    default_word_count: int | None = Field(None, ge=100, le=2000)
    include_images: bool | None = None
    include_references: bool | None = None
    theme: Literal["light", "dark", "system"] | None = None
    language: str | None = Field(None, max_length=5)
    auto_save: bool | None = None
    auto_preview: bool | None = None
    preferred_categories: list[str] | None = None
    blocked_domains: list[str] | None = None
    favorite_topics: list[str] | None = None
    email_notifications: bool | None = None
    browser_notifications: bool | None = None
    weekly_digest: bool | None = None
    max_generation_time: int | None = Field(None, ge=30, le=3600)
    retry_attempts: int | None = Field(None, ge=0, le=10)
    quality_threshold: float | None = Field(None, ge=0, le=1)


class PreferencesResponse(BaseModel):
    default_tone: str
    default_word_count: int
    include_images: bool
    include_references: bool
    theme: str
    language: str
    auto_save: bool
    auto_preview: bool
    preferred_categories: list[str]
    blocked_domains: list[str]
    favorite_topics: list[str]
    email_notifications: bool
    browser_notifications: bool
    weekly_digest: bool
    max_generation_time: int
    retry_attempts: int
    quality_threshold: float
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Activity
# ============================================================================


class ActivityCreateRequest(BaseModel):
    activity_type: str = Field(..., min_length=1, max_length=100)
    activity_data: dict[str, Any] = Field(default_factory=dict)
    session_id: str | None = Field(None, max_length=255)
    duration_ms: int | None = Field(None, ge=0)
    success: bool = True
    error_message: str | None = None
    blog_post_id: str | None = None


class ActivityResponse(BaseModel):
    id: str
    session_id: str | None
    activity_type: str
    activity_data: dict[str, Any]
    duration_ms: int | None
    success: bool
    error_message: str | None
    blog_post_id: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Workspaces
# ============================================================================


class WorkspaceSaveRequest(BaseModel):
    workspace_id: str = Field(..., min_length=1, max_length=255)
    draft_content: str | None = None
    draft_metadata: dict[str, Any] = Field(default_factory=dict)
    is_public: bool | None = None
    collaborators: list[str] | None = None


class WorkspaceResponse(BaseModel):
    workspace_id: str
    draft_content: str | None
    draft_metadata: dict[str, Any]
    last_activity: datetime
    is_public: bool
    collaborators: list[str]

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Profile and credits
# ============================================================================


class ProfileUpdateRequest(BaseModel):
    email: str | None = Field(None, max_length=255)
    full_name: str | None = Field(None, max_length=255)
    avatar_url: str | None = Field(None, max_length=1000)


class ProfileResponse(BaseModel):
    user_id: str
    email: str | None
    full_name: str | None
    avatar_url: str | None
    subscription_tier: str
    subscription_status: str

    model_config = ConfigDict(from_attributes=True)


class CreditsResponse(BaseModel):
    total_credits: int
    used_credits: int
    remaining_credits: int
    subscription_type: str
    last_reset_date: datetime

    model_config = ConfigDict(from_attributes=True)
