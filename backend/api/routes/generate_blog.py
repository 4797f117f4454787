"""
Blog generation and editing routes.
"""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import OptionalUser, get_content_agent, get_orchestrator
from api.middleware.rate_limit import get_rate_limiter, rate_limit_identity
from api.schemas.generation import (
    EditBlogRequest,
    EditBlogResponse,
    GenerateBlogRequest,
    GenerateBlogResponse,
    GenerationSummaryResponse,
)
from core.domain import BlogGenerationRequest, Tone
from infrastructure.database.connection import get_db
from services.blog_posts import BlogPostsService
from services.content_agent import ContentGenerationAgent
from services.orchestrator import AgentOrchestrator, BlogGenerationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Generation"])

MIN_WORDS = 100
MAX_WORDS = 2000
STREAM_MAX_WORDS = 1000
MAX_ORIGINAL_CONTENT = 10_000
MAX_EDIT_REQUEST = 1_000

_VALID_TONES = {tone.value for tone in Tone}


def _validate_generation(tone: str, max_words: int) -> None:
    if tone not in _VALID_TONES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid tone. Must be one of: academic, casual, professional",
        )
    if max_words < MIN_WORDS or max_words > MAX_WORDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Word count must be between 100 and 2000",
        )


@router.post("/generate-blog", response_model=GenerateBlogResponse)
async def generate_blog(
    body: GenerateBlogRequest,
    request: Request,
    user: OptionalUser,
    orchestrator: Annotated[AgentOrchestrator, Depends(get_orchestrator)],
    db: AsyncSession = Depends(get_db),
):
    """
    Run the full research, writing, image and reference pipeline.

    Authenticated callers get the post saved to their library; a failed
    save is logged and does not fail the request.
    """
    _validate_generation(body.tone, body.max_words)

    user_id = user.sub if user else None
    get_rate_limiter("blog_generation").enforce(rate_limit_identity(request, user_id))

    generation_request = BlogGenerationRequest(
        topic=body.topic,
        tone=Tone(body.tone),
        max_words=min(body.max_words, MAX_WORDS),
        include_images=body.include_images,
    )
    try:
        result = await orchestrator.generate_blog(generation_request)
    except BlogGenerationError as e:
        logger.error("Blog generation error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate blog post",
        )

    response = {
        "title": result.title,
        "content": result.content,
        "images": [image.to_dict() for image in result.images],
        "references": [reference.to_dict() for reference in result.references],
        "metadata": result.metadata,
    }

    if user_id:
        try:
            post = await BlogPostsService(db).save_blog_post(
                user_id,
                title=result.title,
                content=result.content,
                topic=body.topic,
                tone=body.tone,
                model_used=result.metadata.get("model_used") or "",
                word_count=result.metadata.get("word_count"),
                generation_time=result.metadata.get("generation_time"),
                metadata=result.metadata,
            )
            response["post_id"] = post.id
        except Exception as e:
            logger.error("Error saving blog post for user %s: %s", user_id, e)
            await db.rollback()

    return response


@router.post("/generate-blog/progress")
async def generate_blog_progress(
    body: GenerateBlogRequest,
    orchestrator: Annotated[AgentOrchestrator, Depends(get_orchestrator)],
):
    """Stream generation progress as server-sent events."""
    _validate_generation(body.tone, body.max_words)

    generation_request = BlogGenerationRequest(
        topic=body.topic,
        tone=Tone(body.tone),
        max_words=min(body.max_words, STREAM_MAX_WORDS),
        include_images=body.include_images,
    )
    return StreamingResponse(
        orchestrator.stream_blog_generation(generation_request),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.get("/generate-blog/summary", response_model=GenerationSummaryResponse)
async def generation_summary(
    topic: str = Query(..., min_length=1),
    tone: str = Query("professional"),
    max_words: int = Query(800),
    include_images: bool = Query(True),
):
    """Describe what a generation run would do, without running it."""
    _validate_generation(tone, max_words)
    return AgentOrchestrator.get_generation_summary(
        BlogGenerationRequest(
            topic=topic, tone=Tone(tone), max_words=max_words, include_images=include_images
        )
    )


@router.post("/edit-blog", response_model=EditBlogResponse)
async def edit_blog(
    body: EditBlogRequest,
    request: Request,
    user: OptionalUser,
    content_agent: Annotated[ContentGenerationAgent, Depends(get_content_agent)],
):
    """Apply a natural-language edit request to an existing post."""
    get_rate_limiter("edit").enforce(rate_limit_identity(request, user.sub if user else None))

    if len(body.original_content) > MAX_ORIGINAL_CONTENT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Original content is too long (max 10,000 characters)",
        )
    if len(body.edit_request) > MAX_EDIT_REQUEST:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Edit request is too long (max 1,000 characters)",
        )

    started = time.perf_counter()
    try:
        result = await content_agent.edit_blog(body.original_content, body.edit_request)
    except Exception as e:
        logger.error("Blog editing error: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to edit blog post",
        )

    return {
        "title": result.title,
        "content": result.content,
        "metadata": {
            "edit_time": int((time.perf_counter() - started) * 1000),
            "original_word_count": len(body.original_content.split()),
            "new_word_count": len(result.content.split()),
        },
    }
