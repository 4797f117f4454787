"""
SQLAlchemy database models.
"""

from .account import FREE_TIER_CREDITS, Event, Profile, UserCredits
from .base import Base, TimestampMixin
from .blog import BlogImageMetadata, BlogPost, BlogReference, BlogTone
from .resume import ResumeTailoringHistory, TailoringStatus, UserResume
from .session import UserActivityLog, UserPreferences, UserSessionHistory, UserWorkspaceState

__all__ = [
    "Base",
    "TimestampMixin",
    "BlogPost",
    "BlogReference",
    "BlogImageMetadata",
    "BlogTone",
    "UserPreferences",
    "UserSessionHistory",
    "UserActivityLog",
    "UserWorkspaceState",
    "UserResume",
    "ResumeTailoringHistory",
    "TailoringStatus",
    "Profile",
    "UserCredits",
    "Event",
    "FREE_TIER_CREDITS",
]
