"""
Integration tests for the research, image and reference endpoints.
"""

import pytest
from httpx import AsyncClient

from adapters.search import NewsAPIError


class TestResearch:
    @pytest.mark.asyncio
    async def test_post(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/research", json={"topic": "industrial robots"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["results"][0]["source"] == "Example News"
        assert data["results"][1]["source"] == "guide.example.org"
        assert data["summary"]["news_count"] == 1
        assert data["summary"]["final_results"] == 2

    @pytest.mark.asyncio
    async def test_get(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.get("/api/v1/research", params={"topic": "industrial robots"})

        assert response.status_code == 200
        assert response.json()["topic"] == "industrial robots"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("topic", ["ai", "x" * 201])
    async def test_topic_length(self, async_client: AsyncClient, agent_overrides, topic):
        response = await async_client.post("/api/v1/research", json={"topic": topic})

        assert response.status_code == 400
        assert response.json()["detail"] == "Topic must be between 3 and 200 characters"

    @pytest.mark.asyncio
    async def test_provider_outage_still_answers(self, async_client: AsyncClient, agent_overrides):
        agent_overrides.news.search_everything.side_effect = NewsAPIError("quota exceeded")

        response = await async_client.post("/api/v1/research", json={"topic": "industrial robots"})

        assert response.status_code == 200
        assert [r["url"] for r in response.json()["results"]] == ["https://guide.example.org/robots"]


class TestImages:
    @pytest.mark.asyncio
    async def test_manual_query(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/images", json={"query": "welding robots"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["summary"] == {
            "query": "welding robots",
            "total_images_found": 1,
            "type": "manual_search",
        }
        assert data["images"][0]["photographer"] == "Jane Doe"
        agent_overrides.unsplash.search_photos.assert_awaited_once_with("welding robots", per_page=15)

    @pytest.mark.asyncio
    async def test_concepts_from_blog_content(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post(
            "/api/v1/images",
            json={
                "blogContent": "# Robots\n\n## Welding Cells\nText.\n\n## Paint Shops\nText.",
                "topic": "industrial robots",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] >= 1
        assert data["summary"]["topic"] == "industrial robots"

    @pytest.mark.asyncio
    async def test_nothing_to_search(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/images", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Either blogContent and topic, or query is required"

    @pytest.mark.asyncio
    async def test_blog_content_needs_topic(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/images", json={"blogContent": "## Robots"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Topic is required when providing blogContent"

    @pytest.mark.asyncio
    async def test_get(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.get("/api/v1/images", params={"query": "robots"})

        assert response.status_code == 200
        assert response.json()["query"] == "robots"


class TestSearchImages:
    @pytest.mark.asyncio
    async def test_post(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.post("/api/v1/search-images", json={"query": "robots"})

        assert response.status_code == 200
        assert [image["id"] for image in response.json()["images"]] == ["p1"]

    @pytest.mark.asyncio
    async def test_get(self, async_client: AsyncClient, agent_overrides):
        response = await async_client.get("/api/v1/search-images", params={"q": "robots"})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_query(self, async_client: AsyncClient, agent_overrides):
        post = await async_client.post("/api/v1/search-images", json={})
        get = await async_client.get("/api/v1/search-images")

        assert post.status_code == get.status_code == 400
        assert post.json()["detail"] == "Missing query parameter"


class TestReferences:
    @pytest.mark.asyncio
    async def test_process(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/references",
            json={
                "researchData": [
                    {
                        "title": "Robot sales hit record",
                        "url": "https://news.example.com/robots",
                        "source": "Example News",
                        "published_at": "2024-06-01T00:00:00Z",
                    },
                    {"title": "Untitled", "url": "not a url", "source": ""},
                ],
                "blogContent": "# Robots\n\nBody.",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["metadata"]["total_references"] == 2
        assert data["references"][0]["title"] == "Robot sales hit record"
        assert data["blog_with_references"].startswith("# Robots\n\nBody.\n## References")
        assert "(2024)" in data["markdown_references"]
        assert data["validation"]["is_valid"] is False
