"""
User session, preference, activity, workspace, profile and credit routes.
"""

import logging
from collections import Counter

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import CurrentUser
from api.middleware.rate_limit import get_client_ip
from api.schemas.user import (
    ActivityCreateRequest,
    ActivityResponse,
    CreditsResponse,
    PreferencesResponse,
    PreferencesUpdateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    SessionEndRequest,
    SessionResponse,
    SessionStartRequest,
    WorkspaceResponse,
    WorkspaceSaveRequest,
)
from infrastructure.database.connection import get_db
from services.accounts import ProfileService
from services.credits import CreditsService
from services.user_sessions import SESSION_COUNTERS, UserSessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["User"])

ACTIVITY_STATS_WINDOW = 100


def _client(request: Request) -> tuple[str | None, str | None]:
    return get_client_ip(request), request.headers.get("user-agent")


# ============================================================================
# Sessions
# ============================================================================


@router.post("/session", status_code=status.HTTP_201_CREATED)
async def start_session(
    body: SessionStartRequest,
    request: Request,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    ip_address, user_agent = _client(request)
    session = await UserSessionService(db).start_session(
        current_user.sub,
        body.session_id,
        user_agent=user_agent,
        ip_address=ip_address,
        device_type=body.device_type,
        browser=body.browser,
        os=body.os,
    )
    return {
        "message": "Session started successfully",
        "session": SessionResponse.model_validate(session),
    }


@router.put("/session")
async def end_session(
    body: SessionEndRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    counters = {name: getattr(body, name) for name in SESSION_COUNTERS}
    session = await UserSessionService(db).end_session(
        current_user.sub, body.session_id, counters=counters, session_data=body.session_data
    )
    return {
        "message": "Session ended successfully",
        "session": SessionResponse.model_validate(session),
    }


# ============================================================================
# Preferences
# ============================================================================


@router.get("/preferences")
async def get_preferences(current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    preferences = await UserSessionService(db).get_preferences(current_user.sub)
    return {"preferences": PreferencesResponse.model_validate(preferences)}


@router.put("/preferences")
async def update_preferences(
    body: PreferencesUpdateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    preferences = await UserSessionService(db).update_preferences(
        current_user.sub, body.model_dump(exclude_unset=True)
    )
    return {
        "message": "Preferences updated successfully",
        "preferences": PreferencesResponse.model_validate(preferences),
    }


# ============================================================================
# Stats
# ============================================================================


@router.get("/stats")
async def get_stats(
    current_user: CurrentUser,
    type: str = Query("session"),
    days: int = Query(7, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
):
    """Session totals, a breakdown of recent activity, or a per-type summary over ``days``."""
    service = UserSessionService(db)

    if type == "session":
        stats = await service.get_session_stats(current_user.sub)
    elif type == "activity":
        activities = await service.get_activity_log(current_user.sub, limit=ACTIVITY_STATS_WINDOW)
        succeeded = sum(1 for activity in activities if activity.success)
        stats = {
            "total_activities": len(activities),
            "activities_by_type": dict(Counter(activity.activity_type for activity in activities)),
            "success_rate": succeeded / len(activities) if activities else 0,
        }
    elif type == "recent":
        stats = await service.get_recent_activity_summary(current_user.sub, days)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid stats type. Use: session, activity, or recent",
        )

    return {"stats": stats}


# ============================================================================
# Activity
# ============================================================================


@router.get("/activity")
async def get_activity(
    current_user: CurrentUser,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    activity_type: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    activities = await UserSessionService(db).get_activity_log(
        current_user.sub, limit=limit, offset=offset, activity_type=activity_type
    )
    return {"activities": [ActivityResponse.model_validate(a) for a in activities]}


@router.post("/activity", status_code=status.HTTP_201_CREATED)
async def log_activity(
    body: ActivityCreateRequest,
    request: Request,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    ip_address, user_agent = _client(request)
    entry = await UserSessionService(db).log_activity(
        current_user.sub,
        body.activity_type,
        activity_data=body.activity_data,
        session_id=body.session_id,
        duration_ms=body.duration_ms,
        success=body.success,
        error_message=body.error_message,
        blog_post_id=body.blog_post_id,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    return {
        "message": "Activity logged successfully",
        "activity": ActivityResponse.model_validate(entry),
    }


# ============================================================================
# Workspaces
# ============================================================================


@router.get("/workspace")
async def get_workspace(
    current_user: CurrentUser,
    workspace_id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """One workspace when ``workspace_id`` is given, otherwise all of them."""
    service = UserSessionService(db)
    if workspace_id:
        workspace = await service.get_workspace(current_user.sub, workspace_id)
        return {"workspace": WorkspaceResponse.model_validate(workspace)}

    workspaces = await service.list_workspaces(current_user.sub)
    return {"workspaces": [WorkspaceResponse.model_validate(w) for w in workspaces]}


@router.post("/workspace")
async def save_workspace(
    body: WorkspaceSaveRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    workspace = await UserSessionService(db).save_workspace(
        current_user.sub,
        body.workspace_id,
        draft_content=body.draft_content,
        draft_metadata=body.draft_metadata,
        is_public=body.is_public,
        collaborators=body.collaborators,
    )
    return {
        "message": "Workspace state saved successfully",
        "workspace": WorkspaceResponse.model_validate(workspace),
    }


@router.delete("/workspace")
async def delete_workspace(
    current_user: CurrentUser,
    workspace_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    await UserSessionService(db).delete_workspace(current_user.sub, workspace_id)
    return {"message": "Workspace deleted successfully"}


# ============================================================================
# Profile and credits
# ============================================================================


@router.get("/profile")
async def get_profile(current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    profile = await ProfileService(db).get_profile(current_user.sub)
    return {"profile": ProfileResponse.model_validate(profile)}


@router.put("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    updates = body.model_dump(exclude_unset=True)
    if "email" not in updates and current_user.email:
        updates["email"] = current_user.email
    profile = await ProfileService(db).upsert_profile(current_user.sub, updates)
    return {"profile": ProfileResponse.model_validate(profile)}


@router.get("/credits", response_model=CreditsResponse)
async def get_credits(current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    """The caller's credit balance; first access grants the free tier."""
    return await CreditsService(db).initialize_credits(current_user.sub)
