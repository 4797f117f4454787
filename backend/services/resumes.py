"""
Resume storage and tailoring history.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from api.utils import escape_like
from core.exceptions import NotFoundError
from infrastructure.database.models import ResumeTailoringHistory, TailoringStatus, UserResume

logger = logging.getLogger(__name__)

DEFAULT_RESUME_TITLE = "My Resume"

HISTORY_UPDATE_FIELDS = {"status", "notes", "applied_with_this_version", "cover_letter_content"}


class ResumeService:
    """A user's LaTeX resumes, at most one of them primary."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_resumes(self, user_id: str) -> List[UserResume]:
        result = await self.db.execute(
            select(UserResume)
            .where(UserResume.user_id == user_id)
            .order_by(UserResume.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_resume(self, user_id: str, resume_id: str) -> UserResume:
        result = await self.db.execute(
            select(UserResume).where(UserResume.id == resume_id, UserResume.user_id == user_id)
        )
        resume = result.scalar_one_or_none()
        if not resume:
            raise NotFoundError("Resume not found")
        return resume

    async def get_primary_resume(self, user_id: str) -> Optional[UserResume]:
        result = await self.db.execute(
            select(UserResume).where(UserResume.user_id == user_id, UserResume.is_primary.is_(True))
        )
        return result.scalars().first()

    async def save_resume(
        self,
        user_id: str,
        latex_content: str,
        title: Optional[str] = None,
        is_primary: bool = False,
        resume_id: Optional[str] = None,
    ) -> UserResume:
        """Insert a resume, or update ``resume_id`` when given."""
        if is_primary:
            await self._clear_primary(user_id, except_id=resume_id)

        if resume_id:
            resume = await self.get_resume(user_id, resume_id)
            resume.latex_content = latex_content
            resume.title = title or resume.title
            resume.is_primary = is_primary
        else:
            resume = UserResume(
                user_id=user_id,
                title=title or DEFAULT_RESUME_TITLE,
                latex_content=latex_content,
                is_primary=is_primary,
            )
            self.db.add(resume)

        await self.db.commit()
        await self.db.refresh(resume)
        return resume

    async def set_primary_resume(self, user_id: str, resume_id: str) -> UserResume:
        resume = await self.get_resume(user_id, resume_id)
        await self._clear_primary(user_id, except_id=resume_id)
        resume.is_primary = True
        await self.db.commit()
        await self.db.refresh(resume)
        return resume

    async def delete_resume(self, user_id: str, resume_id: str) -> None:
        resume = await self.get_resume(user_id, resume_id)
        await self.db.delete(resume)
        await self.db.commit()

    async def auto_save_first_resume(self, user_id: str, latex_content: str) -> Optional[UserResume]:
        """Store the resume as primary if the user has none yet."""
        result = await self.db.execute(
            select(UserResume.id).where(UserResume.user_id == user_id).limit(1)
        )
        if result.first() is not None:
            return None
        return await self.save_resume(user_id, latex_content, is_primary=True)

    async def _clear_primary(self, user_id: str, except_id: Optional[str] = None) -> None:
        stmt = update(UserResume).where(
            UserResume.user_id == user_id, UserResume.is_primary.is_(True)
        )
        if except_id:
            stmt = stmt.where(UserResume.id != except_id)
        await self.db.execute(stmt.values(is_primary=False))


class TailoringHistoryService:
    """Records of tailored resumes and where they were sent."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_entry(self, user_id: str, data: Dict[str, Any]) -> ResumeTailoringHistory:
        entry = ResumeTailoringHistory(
            user_id=user_id,
            job_title=data.get("job_title"),
            company_name=data.get("company_name"),
            job_description=data["job_description"],
            job_url=data.get("job_url"),
            original_resume_id=data.get("original_resume_id"),
            original_resume_content=data.get("original_resume_content"),
            generation_options=data.get("generation_options"),
            tailored_resume_content=data["tailored_resume_content"],
            cover_letter_content=data.get("cover_letter_content"),
            standard_answers=data.get("standard_answers"),
            custom_answers=data.get("custom_answers"),
            llm_provider=data["llm_provider"],
            model_used=data["model_used"],
            prompt_version=data.get("prompt_version"),
            status=TailoringStatus.CREATED.value,
            applied_with_this_version=False,
        )
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def list_entries(
        self,
        user_id: str,
        status: Optional[str] = None,
        applied_only: bool = False,
        company: Optional[str] = None,
        job_title: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ResumeTailoringHistory]:
        query = select(ResumeTailoringHistory).where(ResumeTailoringHistory.user_id == user_id)
        if status:
            query = query.where(ResumeTailoringHistory.status == status)
        if applied_only:
            query = query.where(ResumeTailoringHistory.applied_with_this_version.is_(True))
        if company:
            query = query.where(ResumeTailoringHistory.company_name.ilike(f"%{escape_like(company)}%"))
        if job_title:
            query = query.where(ResumeTailoringHistory.job_title.ilike(f"%{escape_like(job_title)}%"))

        result = await self.db.execute(
            query.order_by(ResumeTailoringHistory.tailoring_date.desc()).offset(offset).limit(limit)
        )
        return list(result.scalars().all())

    async def get_entry(self, user_id: str, entry_id: str) -> ResumeTailoringHistory:
        result = await self.db.execute(
            select(ResumeTailoringHistory).where(
                ResumeTailoringHistory.id == entry_id,
                ResumeTailoringHistory.user_id == user_id,
            )
        )
        entry = result.scalar_one_or_none()
        if not entry:
            raise NotFoundError("Tailoring history not found")
        return entry

    async def update_entry(self, user_id: str, entry_id: str, updates: Dict[str, Any]) -> ResumeTailoringHistory:
        entry = await self.get_entry(user_id, entry_id)
        for field, value in updates.items():
            if field in HISTORY_UPDATE_FIELDS and value is not None:
                setattr(entry, field, value)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        entry = await self.get_entry(user_id, entry_id)
        await self.db.delete(entry)
        await self.db.commit()
