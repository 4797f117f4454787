"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from types import SimpleNamespace
from uuid import uuid4

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after path is set
from infrastructure.database.models import Base
from infrastructure.database.connection import get_db
from api.dependencies import token_service
from api.middleware.rate_limit import reset_rate_limiters
from services.llm_monitoring import llm_monitoring


# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_user_id() -> str:
    """Supabase auth user id for the signed-in test user."""
    return str(uuid4())


@pytest.fixture
def auth_headers(test_user_id: str) -> dict:
    """Generate authentication headers for the test user."""
    access_token = token_service.create_access_token(user_id=test_user_id, email="test@example.com")
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def other_auth_headers() -> dict:
    """Authentication headers for a second, unrelated user."""
    access_token = token_service.create_access_token(user_id=str(uuid4()))
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture(autouse=True)
def reset_process_state():
    """Clear in-process rate limit windows and LLM metrics between tests."""
    reset_rate_limiters()
    llm_monitoring.reset_metrics()
    yield
    llm_monitoring.reset_metrics()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here to avoid circular imports
    from main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ============================================================================
# Adapter fixtures
# ============================================================================


@pytest.fixture
def mock_llm() -> MagicMock:
    """A configured Anthropic adapter whose ``complete`` is an AsyncMock."""
    adapter = MagicMock()
    adapter.is_configured = True
    adapter.model = "claude-sonnet-4-20250514"
    adapter.complete = AsyncMock()
    return adapter


@pytest.fixture
def unconfigured_llm() -> MagicMock:
    """An Anthropic adapter without an API key."""
    adapter = MagicMock()
    adapter.is_configured = False
    adapter.model = "claude-sonnet-4-20250514"
    adapter.complete = AsyncMock()
    return adapter


@pytest.fixture
def make_photo():
    """Build a photo payload as returned by the Unsplash search endpoint."""

    def _make(photo_id: str, alt: str | None) -> dict:
        return {
            "id": photo_id,
            "alt_description": alt,
            "urls": {"regular": f"https://images.unsplash.com/{photo_id}"},
            "user": {"name": "Jane Doe", "username": "janedoe"},
            "links": {"download": f"https://unsplash.com/photos/{photo_id}/download"},
        }

    return _make


# ============================================================================
# Agent fixtures for route tests
# ============================================================================


SAMPLE_BLOG = """# Robots on the Factory Floor

Industrial robots now weld, paint and pack in most car plants.

## Automation Today
Robots weld and paint around the clock.

## Conclusion
Robots are here to stay.

**Keywords:** [robots, automation, manufacturing]

**Word Count:** 30
"""


@pytest.fixture
def news_adapter() -> MagicMock:
    adapter = MagicMock()
    adapter.search_everything = AsyncMock(
        return_value=[
            {
                "title": "Industrial robot installations hit a record",
                "url": "https://news.example.com/robots-record",
                "description": "Factories installed more industrial robots than ever last year.",
                "source": {"name": "Example News"},
                "publishedAt": "2024-06-01T00:00:00Z",
            }
        ]
    )
    return adapter


@pytest.fixture
def search_adapter() -> MagicMock:
    adapter = MagicMock()
    adapter.search = AsyncMock(
        return_value=[
            {
                "title": "A practical guide to industrial robots",
                "link": "https://guide.example.org/robots",
                "snippet": "How industrial robots are programmed and maintained on site.",
            }
        ]
    )
    return adapter


@pytest.fixture
def unsplash_adapter(make_photo) -> MagicMock:
    adapter = MagicMock()
    adapter.search_photos = AsyncMock(return_value=[make_photo("p1", "industrial robots welding a car")])
    adapter.track_download = AsyncMock()
    return adapter


@pytest.fixture
def agent_overrides(async_client, news_adapter, search_adapter, unsplash_adapter, mock_llm):
    """
    Route the agent dependencies to real agents backed by mocked providers.

    ``mock_llm`` answers with SAMPLE_BLOG; the overrides are cleared by
    ``async_client`` on teardown.
    """
    from main import app
    from adapters.ai.anthropic_adapter import Completion
    from api.dependencies import get_content_agent, get_image_agent, get_research_agent
    from services.content_agent import ContentGenerationAgent
    from services.image_agent import ImageRetrievalAgent
    from services.research_agent import ResearchAgent

    mock_llm.complete.return_value = Completion(
        text=SAMPLE_BLOG,
        model="claude-sonnet-4-20250514",
        input_tokens=1000,
        output_tokens=2000,
        stop_reason="end_turn",
    )

    app.dependency_overrides[get_research_agent] = lambda: ResearchAgent(
        news_adapter=news_adapter, search_adapter=search_adapter
    )
    app.dependency_overrides[get_image_agent] = lambda: ImageRetrievalAgent(adapter=unsplash_adapter)
    app.dependency_overrides[get_content_agent] = lambda: ContentGenerationAgent(adapter=mock_llm)

    return SimpleNamespace(
        llm=mock_llm, news=news_adapter, search=search_adapter, unsplash=unsplash_adapter
    )
