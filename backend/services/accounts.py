"""
Profiles and client event logging.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError
from infrastructure.database.models import Event, Profile

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {"email", "full_name", "avatar_url"}


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: str) -> Profile:
        result = await self.db.execute(select(Profile).where(Profile.user_id == user_id))
        profile = result.scalar_one_or_none()
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    async def upsert_profile(self, user_id: str, updates: Dict[str, Any]) -> Profile:
        result = await self.db.execute(select(Profile).where(Profile.user_id == user_id))
        profile = result.scalar_one_or_none()
        if profile is None:
            profile = Profile(user_id=user_id)
            self.db.add(profile)
        for field, value in updates.items():
            if field in PROFILE_FIELDS and value is not None:
                setattr(profile, field, value)
        await self.db.commit()
        await self.db.refresh(profile)
        return profile


class EventService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def log_event(
        self,
        user_id: str,
        name: str,
        category: Optional[str] = None,
        is_error: bool = False,
        error_message: Optional[str] = None,
        is_dev: bool = False,
    ) -> Event:
        event = Event(
            user_id=user_id,
            name=name,
            category=category,
            is_error=is_error,
            error_message=error_message,
            is_dev=is_dev,
        )
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        if is_error:
            logger.warning("Client error event %r for user %s: %s", name, user_id, error_message)
        return event
