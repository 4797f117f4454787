"""API Routes."""

from fastapi import APIRouter

from .agents import router as agents_router
from .blog_posts import router as blog_posts_router
from .generate_blog import router as generate_blog_router
from .health import router as health_router
from .monitoring import router as monitoring_router
from .resumes import router as resumes_router
from .user import router as user_router

# Create main API router
api_router = APIRouter()

# Include route modules
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(generate_blog_router)
api_router.include_router(agents_router)
api_router.include_router(blog_posts_router)
api_router.include_router(user_router)
api_router.include_router(resumes_router)
api_router.include_router(monitoring_router)
