"""
API request and response schemas.
"""

from .blog_posts import (
    BlogPostCreateRequest,
    BlogPostListResponse,
    BlogPostResponse,
    BlogPostUpdateRequest,
)
from .generation import (
    EditBlogRequest,
    EditBlogResponse,
    GenerateBlogRequest,
    GenerateBlogResponse,
)

__all__ = [
    "BlogPostCreateRequest",
    "BlogPostUpdateRequest",
    "BlogPostResponse",
    "BlogPostListResponse",
    "GenerateBlogRequest",
    "GenerateBlogResponse",
    "EditBlogRequest",
    "EditBlogResponse",
]
