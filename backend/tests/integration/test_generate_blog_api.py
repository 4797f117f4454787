"""
Integration tests for blog generation, progress streaming and editing.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from api.dependencies import get_content_agent, get_orchestrator
from services.orchestrator import BlogGenerationError

BODY = {"topic": "industrial robots", "tone": "professional", "maxWords": 500, "includeImages": True}


class TestGenerateBlog:
    @pytest.mark.asyncio
    async def test_runs_full_pipeline(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/generate-blog", json=BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Robots on the Factory Floor"
        assert "## References" in data["content"]
        assert "**Keywords:** [robots, automation, manufacturing]" in data["content"]
        assert data["images"][0]["id"] == "p1"
        assert [r["url"] for r in data["references"]] == [
            "https://news.example.com/robots-record",
            "https://guide.example.org/robots",
        ]
        assert data["metadata"]["research_sources"] == 2
        assert data["metadata"]["model_used"] == "claude-sonnet-4-20250514"
        assert data["post_id"] is None

    @pytest.mark.asyncio
    async def test_authenticated_caller_gets_saved_post(
        self, async_client: AsyncClient, agent_overrides, auth_headers
    ):
        response = await async_client.post("/api/v1/generate-blog", json=BODY, headers=auth_headers)

        assert response.status_code == 200
        post_id = response.json()["post_id"]
        assert post_id

        saved = await async_client.get(f"/api/v1/blog-posts/{post_id}", headers=auth_headers)
        assert saved.status_code == 200
        assert saved.json()["title"] == "Robots on the Factory Floor"
        assert saved.json()["topic"] == "industrial robots"

    @pytest.mark.asyncio
    async def test_without_images(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/generate-blog", json={**BODY, "includeImages": False})

        assert response.status_code == 200
        assert response.json()["images"] == []
        agent_overrides.unsplash.search_photos.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_tone(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/generate-blog", json={**BODY, "tone": "snarky"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid tone. Must be one of: academic, casual, professional"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_words", [99, 2001])
    async def test_word_count_out_of_range(self, async_client: AsyncClient, agent_overrides, max_words):
        response = await async_client.post("/api/v1/generate-blog", json={**BODY, "maxWords": max_words})

        assert response.status_code == 400
        assert response.json()["detail"] == "Word count must be between 100 and 2000"

    @pytest.mark.asyncio
    async def test_empty_topic_is_rejected(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/generate-blog", json={**BODY, "topic": ""})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_sixth_request_is_rate_limited(self, async_client: AsyncClient, agent_overrides):
        for _ in range(5):
            assert (await async_client.post("/api/v1/generate-blog", json=BODY)).status_code == 200

        response = await async_client.post("/api/v1/generate-blog", json=BODY)

        assert response.status_code == 429
        assert response.json()["detail"] == "Rate limit exceeded. Please try again later."
        assert response.json()["reset_time"] > 0
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert response.headers["X-RateLimit-Reset"] == str(response.json()["reset_time"])

    @pytest.mark.asyncio
    async def test_rejected_requests_do_not_count(self, async_client: AsyncClient, agent_overrides):
        for _ in range(6):
            await async_client.post("/api/v1/generate-blog", json={**BODY, "tone": "snarky"})

        response = await async_client.post("/api/v1/generate-blog", json=BODY)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_pipeline_failure(self, async_client: AsyncClient):
        from main import app

        orchestrator = MagicMock()
        orchestrator.generate_blog = AsyncMock(side_effect=BlogGenerationError("Content generation failed"))
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator

        response = await async_client.post("/api/v1/generate-blog", json=BODY)

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to generate blog post"


class TestProgressStream:
    @pytest.mark.asyncio
    async def test_streams_progress_then_result(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/generate-blog/progress", json=BODY)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        frames = [
            json.loads(chunk[len("data: "):])
            for chunk in response.text.split("\n\n")
            if chunk.startswith("data: ")
        ]
        steps = [frame.get("step") for frame in frames[:-1]]
        assert steps[0] == "research"
        assert steps[-1] == "complete"
        assert frames[-1]["type"] == "complete"
        assert frames[-1]["result"]["title"] == "Robots on the Factory Floor"

    @pytest.mark.asyncio
    async def test_long_posts_are_capped_for_streaming(self, async_client: AsyncClient, agent_overrides):
        await async_client.post("/api/v1/generate-blog/progress", json={**BODY, "maxWords": 2000})

        prompt = agent_overrides.llm.complete.await_args.args[0]
        assert "Maximum 1000 words" in prompt

    @pytest.mark.asyncio
    async def test_validation_happens_before_streaming(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/generate-blog/progress", json={**BODY, "tone": "snarky"})
        assert response.status_code == 400


class TestSummary:
    @pytest.mark.asyncio
    async def test_summary(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/v1/generate-blog/summary", params={"topic": "robots", "max_words": 500}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["estimated_time_ms"] == 55000
        assert data["tone"] == "professional"
        assert len(data["steps"]) == 4
        assert "ANTHROPIC_API_KEY" in data["requirements"]


class TestEditBlog:
    @pytest.mark.asyncio
    async def test_edit(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post(
            "/api/v1/edit-blog",
            json={"originalContent": "Robots weld cars.", "editRequest": "make it longer"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Robots on the Factory Floor"
        assert data["metadata"]["original_word_count"] == 3
        assert data["metadata"]["new_word_count"] > 3
        assert data["metadata"]["edit_time"] >= 0

    @pytest.mark.asyncio
    async def test_original_content_too_long(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post(
            "/api/v1/edit-blog",
            json={"originalContent": "x" * 10_001, "editRequest": "shorten"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Original content is too long (max 10,000 characters)"

    @pytest.mark.asyncio
    async def test_edit_request_too_long(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post(
            "/api/v1/edit-blog",
            json={"originalContent": "Robots.", "editRequest": "x" * 1001},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Edit request is too long (max 1,000 characters)"

    @pytest.mark.asyncio
    async def test_model_failure(self, async_client: AsyncClient):
        from main import app

        agent = MagicMock()
        agent.edit_blog = AsyncMock(side_effect=RuntimeError("overloaded"))
        app.dependency_overrides[get_content_agent] = lambda: agent

        response = await async_client.post(
            "/api/v1/edit-blog",
            json={"originalContent": "Robots.", "editRequest": "shorten"},
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to edit blog post"

    @pytest.mark.asyncio
    async def test_edit_is_rate_limited(self, async_client: AsyncClient, agent_overrides):
        body = {"originalContent": "Robots.", "editRequest": "shorten"}
        for _ in range(20):
            await async_client.post("/api/v1/edit-blog", json=body)

        response = await async_client.post("/api/v1/edit-blog", json=body)

        assert response.status_code == 429
