"""
Credit ledger consumed by resume tailoring.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import InsufficientCreditsError
from infrastructure.database.models import FREE_TIER_CREDITS, UserCredits
from infrastructure.database.models.base import utcnow

logger = logging.getLogger(__name__)


class CreditsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_credits(self, user_id: str) -> Optional[UserCredits]:
        result = await self.db.execute(select(UserCredits).where(UserCredits.user_id == user_id))
        return result.scalar_one_or_none()

    async def initialize_credits(self, user_id: str) -> UserCredits:
        """Create the free-tier ledger, or return the existing one."""
        credits = await self.get_credits(user_id)
        if credits:
            return credits
        credits = UserCredits(
            user_id=user_id,
            total_credits=FREE_TIER_CREDITS,
            used_credits=0,
            subscription_type="free",
        )
        self.db.add(credits)
        await self.db.commit()
        await self.db.refresh(credits)
        logger.info("Initialized %d free credits for user %s", FREE_TIER_CREDITS, user_id)
        return credits

    async def has_credits(self, user_id: str, required: int = 1) -> bool:
        credits = await self.get_credits(user_id)
        return bool(credits) and credits.remaining_credits >= required

    async def deduct_credits(self, user_id: str, amount: int = 1) -> UserCredits:
        credits = await self.get_credits(user_id)
        if not credits or credits.remaining_credits < amount:
            raise InsufficientCreditsError(
                "Insufficient credits. Please upgrade your plan or purchase more credits."
            )
        credits.used_credits += amount
        await self.db.commit()
        await self.db.refresh(credits)
        return credits

    async def add_credits(self, user_id: str, amount: int) -> UserCredits:
        credits = await self.initialize_credits(user_id)
        credits.total_credits += amount
        await self.db.commit()
        await self.db.refresh(credits)
        return credits

    async def reset_credits(self, user_id: str, total_credits: int, subscription_type: str) -> UserCredits:
        """Start a new billing period after a subscription change."""
        credits = await self.initialize_credits(user_id)
        credits.total_credits = total_credits
        credits.used_credits = 0
        credits.subscription_type = subscription_type
        credits.last_reset_date = utcnow()
        await self.db.commit()
        await self.db.refresh(credits)
        logger.info("Reset credits for user %s to %d (%s)", user_id, total_credits, subscription_type)
        return credits
