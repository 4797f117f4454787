"""
Integration tests for the saved blog post endpoints.
"""

from uuid import uuid4

import pytest
from httpx import AsyncClient

POST = {
    "title": "Robots at Work",
    "content": "Robots weld cars in modern factories.",
    "topic": "industrial robots",
    "tone": "professional",
    "model_used": "claude-sonnet-4-20250514",
    "keywords": ["robots", "factories"],
    "metadata": {"source": "editor"},
}


async def _create(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post("/api/v1/blog-posts", json={**POST, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestAuth:
    @pytest.mark.asyncio
    async def test_requires_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/blog-posts")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_rejects_bad_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/blog-posts", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_and_get(self, async_client: AsyncClient, auth_headers, test_user_id):
        created = await _create(async_client, auth_headers)

        assert created["user_id"] == test_user_id
        assert created["word_count"] == 6
        assert created["metadata"] == {"source": "editor"}

        response = await async_client.get(f"/api/v1/blog-posts/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["keywords"] == ["robots", "factories"]

    @pytest.mark.asyncio
    async def test_list_paginates(self, async_client: AsyncClient, auth_headers):
        for i in range(3):
            await _create(async_client, auth_headers, title=f"Post {i}")

        response = await async_client.get("/api/v1/blog-posts", params={"limit": 2}, headers=auth_headers)

        data = response.json()
        assert len(data["posts"]) == 2
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "has_more": True}

    @pytest.mark.asyncio
    async def test_update(self, async_client: AsyncClient, auth_headers):
        created = await _create(async_client, auth_headers)

        response = await async_client.put(
            f"/api/v1/blog-posts/{created['id']}",
            json={"content": "Shorter now.", "tone": "casual"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["word_count"] == 2
        assert response.json()["tone"] == "casual"
        assert response.json()["title"] == "Robots at Work"

    @pytest.mark.asyncio
    async def test_delete(self, async_client: AsyncClient, auth_headers):
        created = await _create(async_client, auth_headers)

        response = await async_client.delete(f"/api/v1/blog-posts/{created['id']}", headers=auth_headers)

        assert response.json() == {"message": "Blog post deleted successfully"}
        missing = await async_client.get(f"/api/v1/blog-posts/{created['id']}", headers=auth_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_other_users_post_is_hidden(self, async_client: AsyncClient, auth_headers, other_auth_headers):
        created = await _create(async_client, auth_headers)

        response = await async_client.get(f"/api/v1/blog-posts/{created['id']}", headers=other_auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Blog post not found"

    @pytest.mark.asyncio
    async def test_unknown_post(self, async_client: AsyncClient, auth_headers):
        response = await async_client.delete(f"/api/v1/blog-posts/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_tone_is_rejected(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/blog-posts", json={**POST, "tone": "snarky"}, headers=auth_headers
        )
        assert response.status_code == 422


class TestFilters:
    @pytest.mark.asyncio
    async def test_search(self, async_client: AsyncClient, auth_headers):
        await _create(async_client, auth_headers, title="Robots at Work")
        await _create(async_client, auth_headers, title="Pasta", topic="cooking", content="Boil water.")

        response = await async_client.get(
            "/api/v1/blog-posts", params={"search": "pasta"}, headers=auth_headers
        )

        data = response.json()
        assert [p["title"] for p in data["posts"]] == ["Pasta"]
        assert data["pagination"]["total"] == 1
        assert data["pagination"]["has_more"] is False

    @pytest.mark.asyncio
    async def test_tone(self, async_client: AsyncClient, auth_headers):
        await _create(async_client, auth_headers, tone="casual")
        await _create(async_client, auth_headers, tone="academic")

        response = await async_client.get("/api/v1/blog-posts", params={"tone": "academic"}, headers=auth_headers)

        assert [p["tone"] for p in response.json()["posts"]] == ["academic"]

    @pytest.mark.asyncio
    async def test_keyword(self, async_client: AsyncClient, auth_headers):
        await _create(async_client, auth_headers, title="Tagged", keywords=["ai"])
        await _create(async_client, auth_headers, title="Untagged", keywords=[])

        response = await async_client.get("/api/v1/blog-posts", params={"keyword": "ai"}, headers=auth_headers)

        assert [p["title"] for p in response.json()["posts"]] == ["Tagged"]


class TestStats:
    @pytest.mark.asyncio
    async def test_post_stats(self, async_client: AsyncClient, auth_headers):
        await _create(async_client, auth_headers, word_count=100, tone="casual")
        await _create(async_client, auth_headers, word_count=300, tone="casual")

        response = await async_client.get("/api/v1/blog-posts/stats", headers=auth_headers)

        assert response.json() == {
            "total_posts": 2,
            "total_words": 400,
            "avg_words_per_post": 200,
            "most_common_tone": "casual",
            "generation_time_avg": 0,
        }

    @pytest.mark.asyncio
    async def test_empty_reference_and_image_stats(self, async_client: AsyncClient, auth_headers):
        references = await async_client.get("/api/v1/blog-posts/stats/references", headers=auth_headers)
        images = await async_client.get("/api/v1/blog-posts/stats/images", headers=auth_headers)

        assert references.json() == {"total_references": 0, "unique_sources": 0, "avg_relevance": 0}
        assert images.json() == {"total_images": 0, "unique_photographers": 0, "avg_relevance": 0}


class TestReferencesAndImages:
    @pytest.mark.asyncio
    async def test_references(self, async_client: AsyncClient, auth_headers):
        created = await _create(async_client, auth_headers)
        url = f"/api/v1/blog-posts/{created['id']}/references"

        added = await async_client.post(
            url,
            json={"title": "Robot sales", "url": "https://news.example.com/r", "source": "Example News"},
            headers=auth_headers,
        )
        listed = await async_client.get(url, headers=auth_headers)

        assert added.status_code == 201
        assert added.json()["reference"]["relevance_score"] == 0.5
        assert [r["title"] for r in listed.json()["references"]] == ["Robot sales"]

    @pytest.mark.asyncio
    async def test_images(self, async_client: AsyncClient, auth_headers):
        created = await _create(async_client, auth_headers)
        url = f"/api/v1/blog-posts/{created['id']}/images"

        added = await async_client.post(
            url,
            json={"image_id": "p1", "url": "https://images.unsplash.com/p1", "photographer": "Jane Doe"},
            headers=auth_headers,
        )
        listed = await async_client.get(url, headers=auth_headers)
        removed = await async_client.delete(url, params={"image_id": "p1"}, headers=auth_headers)
        again = await async_client.delete(url, params={"image_id": "p1"}, headers=auth_headers)

        assert added.status_code == 201
        assert added.json()["image"]["image_type"] == "unsplash"
        assert [i["image_id"] for i in listed.json()["images"]] == ["p1"]
        assert removed.json() == {"message": "Image removed successfully"}
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_foreign_post_references(self, async_client: AsyncClient, auth_headers, other_auth_headers):
        created = await _create(async_client, auth_headers)

        response = await async_client.post(
            f"/api/v1/blog-posts/{created['id']}/references",
            json={"title": "x", "url": "https://x.com", "source": "X"},
            headers=other_auth_headers,
        )

        assert response.status_code == 404
