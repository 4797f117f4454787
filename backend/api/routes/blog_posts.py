"""
Saved blog post routes.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import CurrentUser
from api.schemas.blog_posts import (
    BlogImageCreateRequest,
    BlogImageResponse,
    BlogPostCreateRequest,
    BlogPostListResponse,
    BlogPostResponse,
    BlogPostStatsResponse,
    BlogPostUpdateRequest,
    BlogReferenceCreateRequest,
    BlogReferenceResponse,
    ImageStatsResponse,
    ReferenceStatsResponse,
)
from core.domain import Tone
from infrastructure.database.connection import get_db
from services.blog_posts import BlogPostsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog-posts", tags=["Blog Posts"])


@router.get("", response_model=BlogPostListResponse)
async def list_blog_posts(
    current_user: CurrentUser,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None),
    tone: Tone | None = Query(None),
    keyword: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    List the caller's posts, newest first.

    ``search``, ``tone`` and ``keyword`` are alternative filters checked in
    that order; filtered results are a single page of up to ``limit`` posts.
    """
    service = BlogPostsService(db)
    user_id = current_user.sub

    if search:
        posts = await service.search_blog_posts(user_id, search, limit)
        total, has_more = len(posts), False
    elif tone:
        posts = await service.get_blog_posts_by_tone(user_id, tone.value, limit)
        total, has_more = len(posts), False
    elif keyword:
        posts = await service.get_blog_posts_by_keyword(user_id, keyword, limit)
        total, has_more = len(posts), False
    else:
        result = await service.get_user_blog_posts(user_id, page, limit)
        posts, total, has_more = result["posts"], result["total"], result["has_more"]

    return {
        "posts": posts,
        "pagination": {"page": page, "limit": limit, "total": total, "has_more": has_more},
    }


@router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_blog_post(
    body: BlogPostCreateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    data = body.model_dump(mode="json")
    return await BlogPostsService(db).save_blog_post(current_user.sub, **data)


# ============================================================================
# Stats
# ============================================================================


@router.get("/stats", response_model=BlogPostStatsResponse)
async def blog_post_stats(current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await BlogPostsService(db).get_blog_post_stats(current_user.sub)


@router.get("/stats/references", response_model=ReferenceStatsResponse)
async def reference_stats(current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await BlogPostsService(db).get_reference_stats(current_user.sub)


@router.get("/stats/images", response_model=ImageStatsResponse)
async def image_stats(current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await BlogPostsService(db).get_image_stats(current_user.sub)


# ============================================================================
# Single post
# ============================================================================


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_blog_post(post_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await BlogPostsService(db).get_blog_post(current_user.sub, str(post_id))


@router.put("/{post_id}", response_model=BlogPostResponse)
async def update_blog_post(
    post_id: UUID,
    body: BlogPostUpdateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    updates = body.model_dump(mode="json", exclude_unset=True)
    return await BlogPostsService(db).update_blog_post(current_user.sub, str(post_id), updates)


@router.delete("/{post_id}")
async def delete_blog_post(post_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    await BlogPostsService(db).delete_blog_post(current_user.sub, str(post_id))
    return {"message": "Blog post deleted successfully"}


# ============================================================================
# Images
# ============================================================================


@router.get("/{post_id}/images", response_model=dict[str, list[BlogImageResponse]])
async def list_post_images(post_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    images = await BlogPostsService(db).get_images(current_user.sub, str(post_id))
    return {"images": images}


@router.post(
    "/{post_id}/images",
    response_model=dict[str, BlogImageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_post_image(
    post_id: UUID,
    body: BlogImageCreateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    image = await BlogPostsService(db).add_image(current_user.sub, str(post_id), body.model_dump())
    return {"image": image}


@router.delete("/{post_id}/images")
async def remove_post_image(
    post_id: UUID,
    current_user: CurrentUser,
    image_id: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
):
    await BlogPostsService(db).remove_image(current_user.sub, str(post_id), image_id)
    return {"message": "Image removed successfully"}


# ============================================================================
# References
# ============================================================================


@router.get("/{post_id}/references", response_model=dict[str, list[BlogReferenceResponse]])
async def list_post_references(post_id: UUID, current_user: CurrentUser, db: AsyncSession = Depends(get_db)):
    references = await BlogPostsService(db).get_references(current_user.sub, str(post_id))
    return {"references": references}


@router.post(
    "/{post_id}/references",
    response_model=dict[str, BlogReferenceResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_post_reference(
    post_id: UUID,
    body: BlogReferenceCreateRequest,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
):
    reference = await BlogPostsService(db).add_reference(current_user.sub, str(post_id), body.model_dump())
    return {"reference": reference}
