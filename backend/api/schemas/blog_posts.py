"""
Saved blog post schemas: posts, their references and their images.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.domain import Tone

# ============================================================================
# Posts
# ============================================================================


class BlogPostCreateRequest(BaseModel):
    """Request to save a generated post."""

    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1, max_length=500)
    tone: Tone = Tone.PROFESSIONAL
    model_used: str = Field(default="", max_length=100)
    word_count: int | None = Field(None, ge=0)
    generation_time: int | None = Field(None, ge=0, description="Milliseconds")
    metadata: dict[str, Any] = Field(default_factory=dict)
    keywords: list[str] = Field(default_factory=list)


class BlogPostUpdateRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=500)
    content: str | None = Field(None, min_length=1)
    topic: str | None = Field(None, min_length=1, max_length=500)
    tone: Tone | None = None
    keywords: list[str] | None = None
    metadata: dict[str, Any] | None = None


class BlogPostResponse(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    topic: str
    tone: str
    word_count: int
    generation_time: int | None
    model_used: str
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="post_metadata")
    keywords: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaginationSchema(BaseModel):
    page: int
    limit: int
    total: int
    has_more: bool


class BlogPostListResponse(BaseModel):
    posts: list[BlogPostResponse]
    pagination: PaginationSchema


class BlogPostStatsResponse(BaseModel):
    total_posts: int
    total_words: int
    avg_words_per_post: int
    most_common_tone: str | None
    generation_time_avg: int


# ============================================================================
# References
# ============================================================================


class BlogReferenceCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=1000)
    url: str = Field(..., min_length=1, max_length=2000)
    source: str = Field(..., min_length=1, max_length=255)
    published_at: str | None = None
    relevance_score: float = Field(default=0.5, ge=0, le=1)
    snippet: str | None = None
    domain: str | None = Field(None, max_length=255)


class BlogReferenceResponse(BaseModel):
    id: str
    blog_post_id: str
    title: str
    url: str
    source: str
    published_at: str | None
    relevance_score: float
    snippet: str | None
    domain: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReferenceStatsResponse(BaseModel):
    total_references: int
    unique_sources: int
    avg_relevance: float


# ============================================================================
# Images
# ============================================================================


class BlogImageCreateRequest(BaseModel):
    image_id: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2000)
    alt_text: str | None = Field(None, max_length=1000)
    photographer: str | None = Field(None, max_length=255)
    photographer_url: str | None = Field(None, max_length=1000)
    download_url: str | None = Field(None, max_length=2000)
    relevance_score: float = Field(default=0.5, ge=0, le=1)
    section_index: int = Field(default=0, ge=0)
    image_type: str = Field(default="unsplash", max_length=50)
    width: int | None = Field(None, gt=0)
    height: int | None = Field(None, gt=0)
    file_size: int | None = Field(None, ge=0)


class BlogImageResponse(BaseModel):
    id: str
    blog_post_id: str
    image_id: str
    url: str
    alt_text: str | None
    photographer: str | None
    photographer_url: str | None
    download_url: str | None
    relevance_score: float
    section_index: int | None
    image_type: str
    width: int | None
    height: int | None
    file_size: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ImageStatsResponse(BaseModel):
    total_images: int
    unique_photographers: int
    avg_relevance: float
