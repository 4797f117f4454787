"""
Schemas for blog generation, editing and the agent endpoints.

Request bodies accept camelCase keys (``maxWords``) as well as snake_case.
"""

from typing import Any

from pydantic import BaseModel, Field

from api.schemas.common import CamelRequest


# ============================================================================
# Blog generation
# ============================================================================


class GenerateBlogRequest(CamelRequest):
    topic: str = Field(..., min_length=1)
    tone: str
    max_words: int
    include_images: bool = True


class ImageSchema(BaseModel):
    id: str
    url: str
    alt: str
    photographer: str
    photographer_username: str
    download_url: str
    relevance_score: int = 0


class ReferenceSchema(BaseModel):
    title: str
    url: str
    source: str
    published_at: str | None = None


class GenerateBlogResponse(BaseModel):
    title: str
    content: str
    images: list[ImageSchema]
    references: list[ReferenceSchema]
    metadata: dict[str, Any]
    post_id: str | None = None


class GenerationSummaryResponse(BaseModel):
    topic: str
    tone: str
    max_words: int
    include_images: bool
    estimated_time_ms: int
    steps: list[str]
    requirements: list[str]


class EditBlogRequest(CamelRequest):
    original_content: str = Field(..., min_length=1)
    edit_request: str = Field(..., min_length=1)


class EditBlogResponse(BaseModel):
    title: str
    content: str
    metadata: dict[str, Any]


# ============================================================================
# Agent endpoints
# ============================================================================


class ResearchRequest(CamelRequest):
    topic: str


class ResearchResultSchema(BaseModel):
    title: str
    url: str
    snippet: str
    source: str
    published_at: str | None = None


class ResearchResponse(BaseModel):
    topic: str
    results: list[ResearchResultSchema]
    summary: dict[str, Any]
    count: int
    timestamp: str


class ImageSearchRequest(CamelRequest):
    query: str | None = None
    blog_content: str | None = None
    topic: str | None = None


class ImageSearchResponse(BaseModel):
    images: list[ImageSchema]
    summary: dict[str, Any] | None = None
    query: str | None = None
    count: int
    timestamp: str


class SearchImagesRequest(CamelRequest):
    query: str | None = None


class SearchImagesResponse(BaseModel):
    images: list[ImageSchema]


class ReferencesRequest(CamelRequest):
    research_data: list[dict[str, Any]]
    blog_content: str


class ReferencesResponse(BaseModel):
    references: list[ReferenceSchema]
    markdown_references: str
    blog_with_references: str
    summary: dict[str, Any]
    validation: dict[str, Any]
    metadata: dict[str, Any]
