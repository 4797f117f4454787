"""
Integration tests for resumes, resume tailoring, tailoring history and events.
"""

from unittest.mock import patch

import pytest
from httpx import AsyncClient

from adapters.ai.anthropic_adapter import Completion
from services.prompt_versions import CURRENT_PROMPT_VERSION

RESUME = r"\documentclass{article}\begin{document}Jane\end{document}"

TAILORED = """===RESUME_START===
\\section{Experience} Lead engineer
===RESUME_END===
===COVER_LETTER_START===
Dear hiring team,
===COVER_LETTER_END==="""


class TestResumes:
    @pytest.mark.asyncio
    async def test_crud(self, async_client: AsyncClient, auth_headers):
        created = await async_client.post(
            "/api/v1/resumes", json={"latex_content": RESUME, "title": "Main"}, headers=auth_headers
        )
        resume_id = created.json()["resume"]["id"]

        listed = await async_client.get("/api/v1/resumes", headers=auth_headers)
        fetched = await async_client.get(f"/api/v1/resumes/{resume_id}", headers=auth_headers)
        primary = await async_client.patch(
            f"/api/v1/resumes/{resume_id}", json={"set_primary": True}, headers=auth_headers
        )
        deleted = await async_client.delete(f"/api/v1/resumes/{resume_id}", headers=auth_headers)
        gone = await async_client.get(f"/api/v1/resumes/{resume_id}", headers=auth_headers)

        assert created.status_code == 200
        assert [r["title"] for r in listed.json()["resumes"]] == ["Main"]
        assert fetched.json()["resume"]["latex_content"] == RESUME
        assert primary.json()["resume"]["is_primary"] is True
        assert deleted.json() == {"success": True}
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_without_operation(self, async_client: AsyncClient, auth_headers):
        created = await async_client.post("/api/v1/resumes", json={"latex_content": RESUME}, headers=auth_headers)

        response = await async_client.patch(
            f"/api/v1/resumes/{created.json()['resume']['id']}", json={}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid operation"

    @pytest.mark.asyncio
    async def test_other_users_resume(self, async_client: AsyncClient, auth_headers, other_auth_headers):
        created = await async_client.post("/api/v1/resumes", json={"latex_content": RESUME}, headers=auth_headers)

        response = await async_client.get(
            f"/api/v1/resumes/{created.json()['resume']['id']}", headers=other_auth_headers
        )

        assert response.status_code == 404


class TestTailorResume:
    BODY = {
        "jobOffer": "Senior backend engineer, Python and FastAPI.",
        "resumeLatex": RESUME,
        "generationOptions": {"includeCoverLetter": True},
    }

    @pytest.mark.asyncio
    async def test_unsupported_provider(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/tailor-resume", json={**self.BODY, "llmProvider": "gpt"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported LLM provider: gpt"

    @pytest.mark.asyncio
    async def test_without_credits(self, async_client: AsyncClient, auth_headers, mock_llm):
        with patch("services.resume_tailoring.anthropic_adapter", mock_llm):
            response = await async_client.post("/api/v1/tailor-resume", json=self.BODY, headers=auth_headers)

        assert response.status_code == 403
        mock_llm.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tailors_and_charges_a_credit(self, async_client: AsyncClient, auth_headers, mock_llm):
        await async_client.get("/api/v1/user/credits", headers=auth_headers)
        mock_llm.complete.return_value = Completion(
            text=TAILORED, model="claude-sonnet-4-20250514", input_tokens=400, output_tokens=900
        )

        with patch("services.resume_tailoring.anthropic_adapter", mock_llm):
            response = await async_client.post("/api/v1/tailor-resume", json=self.BODY, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["tailored_resume"] == "\\section{Experience} Lead engineer"
        assert data["cover_letter"] == "Dear hiring team,"
        assert data["llm_provider"] == "claude"
        assert data["prompt_version"] == CURRENT_PROMPT_VERSION
        assert "standard_answers" not in data

        credits = await async_client.get("/api/v1/user/credits", headers=auth_headers)
        assert credits.json()["used_credits"] == 1

    @pytest.mark.asyncio
    async def test_requires_auth(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/tailor-resume", json=self.BODY)
        assert response.status_code == 401


class TestTailoringHistory:
    ENTRY = {
        "job_title": "Backend Engineer",
        "company_name": "Acme Corp",
        "job_description": "Build APIs.",
        "tailored_resume_content": RESUME,
        "llm_provider": "claude",
        "model_used": "claude-sonnet-4-20250514",
    }

    @pytest.mark.asyncio
    async def test_lifecycle(self, async_client: AsyncClient, auth_headers):
        created = await async_client.post("/api/v1/tailoring-history", json=self.ENTRY, headers=auth_headers)
        entry_id = created.json()["entry"]["id"]

        updated = await async_client.put(
            f"/api/v1/tailoring-history/{entry_id}",
            json={"status": "applied", "applied_with_this_version": True, "notes": "Sent Monday"},
            headers=auth_headers,
        )
        applied = await async_client.get(
            "/api/v1/tailoring-history", params={"applied_only": True}, headers=auth_headers
        )
        by_company = await async_client.get(
            "/api/v1/tailoring-history", params={"company": "globex"}, headers=auth_headers
        )
        deleted = await async_client.delete(f"/api/v1/tailoring-history/{entry_id}", headers=auth_headers)
        gone = await async_client.get(f"/api/v1/tailoring-history/{entry_id}", headers=auth_headers)

        assert created.status_code == 201
        assert created.json()["entry"]["status"] == "created"
        assert updated.json()["entry"]["status"] == "applied"
        assert updated.json()["entry"]["notes"] == "Sent Monday"
        assert [e["id"] for e in applied.json()["history"]] == [entry_id]
        assert by_company.json()["history"] == []
        assert deleted.json() == {"success": True}
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_status(self, async_client: AsyncClient, auth_headers):
        created = await async_client.post("/api/v1/tailoring-history", json=self.ENTRY, headers=auth_headers)

        response = await async_client.put(
            f"/api/v1/tailoring-history/{created.json()['entry']['id']}",
            json={"status": "hired"},
            headers=auth_headers,
        )

        assert response.status_code == 422


class TestEvents:
    @pytest.mark.asyncio
    async def test_log_event(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/events",
            json={"name": "resume_downloaded", "category": "resume"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["name"] == "resume_downloaded"
        assert response.json()["is_error"] is False
