"""
API dependencies for authentication and agent construction.

Users live in Supabase Auth; a request is authenticated by its bearer
token alone, without a user table lookup.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from core.security import TokenPayload, TokenService
from infrastructure.config.settings import settings
from services.content_agent import ContentGenerationAgent
from services.image_agent import ImageRetrievalAgent
from services.orchestrator import AgentOrchestrator
from services.reference_agent import ReferenceManagementAgent
from services.research_agent import ResearchAgent

token_service = TokenService(
    secret_key=settings.supabase_jwt_secret,
    algorithm=settings.jwt_algorithm,
    audience=settings.supabase_jwt_audience,
)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.startswith("Bearer "):
        parts = authorization.split(" ", 1)
        return parts[1].strip() or None if len(parts) > 1 else None
    return None


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> TokenPayload:
    """Require a valid Supabase access token."""
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = token_service.verify_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


async def get_optional_user(
    authorization: Annotated[str | None, Header()] = None,
) -> Optional[TokenPayload]:
    """The caller's token claims, or None for anonymous or invalid tokens."""
    token = _bearer_token(authorization)
    if not token:
        return None
    return token_service.verify_access_token(token)


CurrentUser = Annotated[TokenPayload, Depends(get_current_user)]
OptionalUser = Annotated[Optional[TokenPayload], Depends(get_optional_user)]


# Agents are built per request so tests can swap them with dependency_overrides.


def get_research_agent() -> ResearchAgent:
    return ResearchAgent()


def get_image_agent() -> ImageRetrievalAgent:
    return ImageRetrievalAgent()


def get_reference_agent() -> ReferenceManagementAgent:
    return ReferenceManagementAgent()


def get_content_agent() -> ContentGenerationAgent:
    return ContentGenerationAgent()


def get_orchestrator(
    research_agent: Annotated[ResearchAgent, Depends(get_research_agent)],
    content_agent: Annotated[ContentGenerationAgent, Depends(get_content_agent)],
    image_agent: Annotated[ImageRetrievalAgent, Depends(get_image_agent)],
    reference_agent: Annotated[ReferenceManagementAgent, Depends(get_reference_agent)],
) -> AgentOrchestrator:
    return AgentOrchestrator(research_agent, content_agent, image_agent, reference_agent)
