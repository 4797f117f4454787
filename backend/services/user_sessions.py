"""
User session service: preferences, session history, activity log and
editor workspaces.
"""

import logging
from collections import defaultdict
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError
from infrastructure.database.models import (
    UserActivityLog,
    UserPreferences,
    UserSessionHistory,
    UserWorkspaceState,
)
from infrastructure.database.models.base import utcnow

logger = logging.getLogger(__name__)

PREFERENCE_FIELDS = {
    "default_tone",
    "default_word_count",
    "include_images",
    "include_references",
    "theme",
    "language",
    "auto_save",
    "auto_preview",
    "preferred_categories",
    "blocked_domains",
    "favorite_topics",
    "email_notifications",
    "browser_notifications",
    "weekly_digest",
    "max_generation_time",
    "retry_attempts",
    "quality_threshold",
}

SESSION_COUNTERS = ("blog_posts_created", "blog_posts_edited", "images_searched", "references_added")


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class UserSessionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # Preferences

    async def get_preferences(self, user_id: str) -> UserPreferences:
        """Return the user's preferences, creating the default row on first read."""
        result = await self.db.execute(
            select(UserPreferences).where(UserPreferences.user_id == user_id)
        )
        prefs = result.scalar_one_or_none()
        if prefs:
            return prefs

        prefs = UserPreferences(user_id=user_id)
        self.db.add(prefs)
        await self.db.commit()
        await self.db.refresh(prefs)
        return prefs

    async def update_preferences(self, user_id: str, updates: Dict[str, Any]) -> UserPreferences:
        prefs = await self.get_preferences(user_id)
        for field, value in updates.items():
            if field in PREFERENCE_FIELDS and value is not None:
                setattr(prefs, field, value)
        await self.db.commit()
        await self.db.refresh(prefs)
        return prefs

    # Sessions

    async def start_session(
        self,
        user_id: str,
        session_id: str,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        device_type: Optional[str] = None,
        browser: Optional[str] = None,
        os: Optional[str] = None,
    ) -> UserSessionHistory:
        session = UserSessionHistory(
            user_id=user_id,
            session_id=session_id,
            user_agent=user_agent,
            ip_address=ip_address,
            device_type=device_type,
            browser=browser,
            os=os,
        )
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        logger.info("Started session %s for user %s", session_id, user_id)
        return session

    async def end_session(
        self,
        user_id: str,
        session_id: Optional[str] = None,
        counters: Optional[Dict[str, int]] = None,
        session_data: Optional[Dict[str, Any]] = None,
    ) -> UserSessionHistory:
        """
        Close the user's most recent open session with this id.

        Without an id the most recent open session of any id is closed.
        """
        query = select(UserSessionHistory).where(
            UserSessionHistory.user_id == user_id,
            UserSessionHistory.ended_at.is_(None),
        )
        if session_id:
            query = query.where(UserSessionHistory.session_id == session_id)
        result = await self.db.execute(
            query
            .order_by(UserSessionHistory.started_at.desc())
            .limit(1)
        )
        session = result.scalar_one_or_none()
        if not session:
            raise NotFoundError("Session not found")

        ended_at = utcnow()
        session.ended_at = ended_at
        session.duration_seconds = int((ended_at - _aware(session.started_at)).total_seconds())
        for name in SESSION_COUNTERS:
            setattr(session, name, (counters or {}).get(name, 0))
        session.session_data = session_data or {}

        await self.db.commit()
        await self.db.refresh(session)
        return session

    async def get_session_history(self, user_id: str, limit: int = 10) -> List[UserSessionHistory]:
        result = await self.db.execute(
            select(UserSessionHistory)
            .where(UserSessionHistory.user_id == user_id)
            .order_by(UserSessionHistory.started_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_session_stats(self, user_id: str) -> Dict[str, Any]:
        result = await self.db.execute(
            select(UserSessionHistory).where(UserSessionHistory.user_id == user_id)
        )
        sessions = result.scalars().all()
        total_duration = sum(s.duration_seconds or 0 for s in sessions)
        completed = [s for s in sessions if s.duration_seconds is not None]
        return {
            "total_sessions": len(sessions),
            "total_duration_seconds": total_duration,
            "avg_session_duration": round(total_duration / len(completed)) if completed else 0,
            **{f"total_{name}": sum(getattr(s, name) for s in sessions) for name in SESSION_COUNTERS},
        }

    # Activity

    async def log_activity(
        self,
        user_id: str,
        activity_type: str,
        activity_data: Optional[Dict[str, Any]] = None,
        session_id: Optional[str] = None,
        duration_ms: Optional[int] = None,
        success: bool = True,
        error_message: Optional[str] = None,
        blog_post_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> UserActivityLog:
        entry = UserActivityLog(
            user_id=user_id,
            session_id=session_id,
            activity_type=activity_type,
            activity_data=activity_data or {},
            duration_ms=duration_ms,
            success=success,
            error_message=error_message,
            blog_post_id=blog_post_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def get_activity_log(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        activity_type: Optional[str] = None,
    ) -> List[UserActivityLog]:
        query = select(UserActivityLog).where(UserActivityLog.user_id == user_id)
        if activity_type:
            query = query.where(UserActivityLog.activity_type == activity_type)
        result = await self.db.execute(
            query.order_by(UserActivityLog.created_at.desc()).offset(offset).limit(limit)
        )
        return list(result.scalars().all())

    async def get_recent_activity_summary(self, user_id: str, days: int = 7) -> Dict[str, Any]:
        """Count activities per type over the last ``days`` days."""
        since = utcnow() - timedelta(days=days)
        result = await self.db.execute(
            select(UserActivityLog.activity_type, UserActivityLog.success)
            .where(UserActivityLog.user_id == user_id, UserActivityLog.created_at >= since)
        )
        by_type: Dict[str, Dict[str, int]] = defaultdict(lambda: {"total": 0, "success": 0, "failure": 0})
        for activity_type, success in result.all():
            counts = by_type[activity_type]
            counts["total"] += 1
            counts["success" if success else "failure"] += 1
        return {
            "days": days,
            "total": sum(counts["total"] for counts in by_type.values()),
            "by_type": dict(by_type),
        }

    # Workspaces

    async def save_workspace(
        self,
        user_id: str,
        workspace_id: str,
        draft_content: Optional[str] = None,
        draft_metadata: Optional[Dict[str, Any]] = None,
        is_public: Optional[bool] = None,
        collaborators: Optional[List[str]] = None,
    ) -> UserWorkspaceState:
        workspace = await self._find_workspace(user_id, workspace_id)
        if workspace is None:
            workspace = UserWorkspaceState(user_id=user_id, workspace_id=workspace_id)
            self.db.add(workspace)

        workspace.draft_content = draft_content
        workspace.draft_metadata = draft_metadata or {}
        if is_public is not None:
            workspace.is_public = is_public
        if collaborators is not None:
            workspace.collaborators = collaborators
        workspace.last_activity = utcnow()

        await self.db.commit()
        await self.db.refresh(workspace)
        return workspace

    async def get_workspace(self, user_id: str, workspace_id: str) -> UserWorkspaceState:
        workspace = await self._find_workspace(user_id, workspace_id)
        if workspace is None:
            raise NotFoundError("Workspace not found")
        return workspace

    async def list_workspaces(self, user_id: str) -> List[UserWorkspaceState]:
        result = await self.db.execute(
            select(UserWorkspaceState)
            .where(UserWorkspaceState.user_id == user_id)
            .order_by(UserWorkspaceState.last_activity.desc())
        )
        return list(result.scalars().all())

    async def delete_workspace(self, user_id: str, workspace_id: str) -> None:
        workspace = await self.get_workspace(user_id, workspace_id)
        await self.db.delete(workspace)
        await self.db.commit()

    async def _find_workspace(self, user_id: str, workspace_id: str) -> Optional[UserWorkspaceState]:
        result = await self.db.execute(
            select(UserWorkspaceState).where(
                UserWorkspaceState.user_id == user_id,
                UserWorkspaceState.workspace_id == workspace_id,
            )
        )
        return result.scalar_one_or_none()

    # Maintenance

    async def cleanup_old_session_data(self, days_to_keep: int = 90) -> int:
        """Delete session history and activity older than the cutoff. Returns rows removed."""
        cutoff = utcnow() - timedelta(days=days_to_keep)
        sessions = await self.db.execute(
            delete(UserSessionHistory).where(UserSessionHistory.started_at < cutoff)
        )
        activity = await self.db.execute(
            delete(UserActivityLog).where(UserActivityLog.created_at < cutoff)
        )
        await self.db.commit()
        removed = (sessions.rowcount or 0) + (activity.rowcount or 0)
        logger.info("Removed %d session rows older than %d days", removed, days_to_keep)
        return removed
