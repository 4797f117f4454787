"""
Resume library, resume tailoring, tailoring history and client events.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.ai.anthropic_adapter import AIConfigurationError
from api.dependencies import CurrentUser
from api.schemas.resumes import (
    EventCreateRequest,
    EventResponse,
    ResumePatchRequest,
    ResumeResponse,
    ResumeSaveRequest,
    TailoringHistoryCreateRequest,
    TailoringHistoryResponse,
    TailoringHistoryUpdateRequest,
    TailorResumeRequest,
    TailorResumeResponse,
)
from core.exceptions import InsufficientCreditsError
from infrastructure.database.connection import get_db
from infrastructure.database.models import TailoringStatus
from services.accounts import EventService
from services.prompt_versions import GenerationOptions
from services.resume_tailoring import LLM_PROVIDER, ResumeTailoringService
from services.resumes import ResumeService, TailoringHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Resumes"])


# ============================================================================
# Resumes
# ============================================================================


@router.get("/resumes")
async def list_resumes(current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    resumes = await ResumeService(db).list_resumes(current_user.sub)
    return {"resumes": [ResumeResponse.model_validate(r) for r in resumes]}


@router.post("/resumes")
async def save_resume(
    body: ResumeSaveRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    resume = await ResumeService(db).save_resume(
        current_user.sub,
        body.latex_content,
        title=body.title,
        is_primary=body.is_primary,
        resume_id=body.resume_id,
    )
    return {"resume": ResumeResponse.model_validate(resume)}


@router.get("/resumes/{resume_id}")
async def get_resume(resume_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    resume = await ResumeService(db).get_resume(current_user.sub, str(resume_id))
    return {"resume": ResumeResponse.model_validate(resume)}


@router.patch("/resumes/{resume_id}")
async def patch_resume(
    resume_id: UUID,
    body: ResumePatchRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """Only ``set_primary`` is supported."""
    if not body.set_primary:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid operation",
        )
    resume = await ResumeService(db).set_primary_resume(current_user.sub, str(resume_id))
    return {"resume": ResumeResponse.model_validate(resume)}


@router.delete("/resumes/{resume_id}")
async def delete_resume(resume_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    await ResumeService(db).delete_resume(current_user.sub, str(resume_id))
    return {"success": True}


# ============================================================================
# Tailoring
# ============================================================================


@router.post("/tailor-resume", response_model=TailorResumeResponse, response_model_exclude_none=True)
async def tailor_resume(
    body: TailorResumeRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    """
    Tailor a LaTeX resume to a job offer.

    Costs one credit, charged after the model answers. Returns 403 when the
    balance is empty.
    """
    if body.llm_provider != LLM_PROVIDER:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported LLM provider: {body.llm_provider}",
        )

    options = GenerationOptions(**body.generation_options.model_dump())
    try:
        return await ResumeTailoringService(db).tailor(
            current_user.sub, body.job_offer, body.resume_latex, options, model=body.model
        )
    except (AIConfigurationError, InsufficientCreditsError):
        raise
    except Exception as e:
        logger.error("Resume tailoring failed for user %s: %s", current_user.sub, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate tailored resume. Please try again.",
        )


# ============================================================================
# Tailoring history
# ============================================================================


@router.get("/tailoring-history")
async def list_tailoring_history(
    current_user: CurrentUser,
    status_filter: TailoringStatus | None = Query(None, alias="status"),
    applied_only: bool = Query(False),
    company: str | None = Query(None),
    job_title: str | None = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    entries = await TailoringHistoryService(db).list_entries(
        current_user.sub,
        status=status_filter.value if status_filter else None,
        applied_only=applied_only,
        company=company,
        job_title=job_title,
        limit=limit,
        offset=offset,
    )
    return {"history": [TailoringHistoryResponse.model_validate(e) for e in entries]}


@router.post("/tailoring-history", status_code=status.HTTP_201_CREATED)
async def create_tailoring_history(
    body: TailoringHistoryCreateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    entry = await TailoringHistoryService(db).create_entry(current_user.sub, body.model_dump())
    return {"entry": TailoringHistoryResponse.model_validate(entry)}


@router.get("/tailoring-history/{entry_id}")
async def get_tailoring_history(entry_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    entry = await TailoringHistoryService(db).get_entry(current_user.sub, str(entry_id))
    return {"entry": TailoringHistoryResponse.model_validate(entry)}


@router.put("/tailoring-history/{entry_id}")
async def update_tailoring_history(
    entry_id: UUID,
    body: TailoringHistoryUpdateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    updates = body.model_dump(mode="json", exclude_unset=True)
    entry = await TailoringHistoryService(db).update_entry(current_user.sub, str(entry_id), updates)
    return {"entry": TailoringHistoryResponse.model_validate(entry)}


@router.delete("/tailoring-history/{entry_id}")
async def delete_tailoring_history(entry_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    await TailoringHistoryService(db).delete_entry(current_user.sub, str(entry_id))
    return {"success": True}


# ============================================================================
# Events
# ============================================================================


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def log_event(
    body: EventCreateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).log_event(current_user.sub, **body.model_dump())
