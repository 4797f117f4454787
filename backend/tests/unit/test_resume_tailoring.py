"""
Unit tests for resume tailoring: response parsing and the credit-charging service.
"""

import pytest

from adapters.ai.anthropic_adapter import AIConfigurationError, Completion
from core.exceptions import InsufficientCreditsError
from services.credits import CreditsService
from services.llm_monitoring import LLMMonitoring
from services.prompt_versions import CURRENT_PROMPT_VERSION, STANDARD_QUESTION, GenerationOptions
from services.resume_tailoring import ResumeTailoringService, parse_structured_response

FULL_RESPONSE = f"""===RESUME_START===
```latex
\\documentclass{{article}}
```
===RESUME_END===

===COVER_LETTER_START===
Dear hiring team,
===COVER_LETTER_END===

===STANDARD_QUESTIONS_START===
{STANDARD_QUESTION}
I admire the mission.
===STANDARD_QUESTIONS_END===

===CUSTOM_QUESTIONS_START===
**Custom Question 1: Why Acme?**
Because of the product.
**Custom Question 2: Hardest bug?**
[Answer here] A race condition.
===CUSTOM_QUESTIONS_END===
"""

ALL_OPTIONS = GenerationOptions(
    include_cover_letter=True,
    include_standard_questions=True,
    custom_questions=["Why Acme?", "Hardest bug?"],
)


def _completion(text: str) -> Completion:
    return Completion(text=text, model="claude-sonnet-4-20250514", input_tokens=500, output_tokens=900)


class TestParseStructuredResponse:
    def test_every_section(self):
        parsed = parse_structured_response(FULL_RESPONSE, ALL_OPTIONS)

        assert parsed["tailored_resume"] == "\\documentclass{article}"
        assert parsed["cover_letter"] == "Dear hiring team,"
        assert parsed["standard_answers"] == {"why_this_job": "I admire the mission.", "why_you_fit": ""}
        assert parsed["custom_answers"] == ["Because of the product.", "A race condition."]

    def test_unrequested_sections_are_ignored(self):
        parsed = parse_structured_response(FULL_RESPONSE, GenerationOptions())

        assert set(parsed) == {"tailored_resume"}

    def test_missing_markers_use_whole_response(self):
        parsed = parse_structured_response("\\documentclass{article}\n", GenerationOptions())

        assert parsed["tailored_resume"] == "\\documentclass{article}"

    def test_requested_but_missing_section_is_absent(self):
        response = "===RESUME_START===\nresume\n===RESUME_END==="

        parsed = parse_structured_response(response, ALL_OPTIONS)

        assert parsed == {"tailored_resume": "resume"}


class TestResumeTailoringService:
    @pytest.fixture
    def monitoring(self) -> LLMMonitoring:
        return LLMMonitoring()

    @pytest.mark.asyncio
    async def test_tailors_and_charges_one_credit(self, db_session, test_user_id, mock_llm, monitoring):
        await CreditsService(db_session).initialize_credits(test_user_id)
        mock_llm.complete.return_value = _completion(
            "===RESUME_START===\n**Lead** engineer {x\n===RESUME_END==="
        )
        service = ResumeTailoringService(db_session, adapter=mock_llm, monitoring=monitoring)

        result = await service.tailor(test_user_id, "Job offer", "\\resume", GenerationOptions())

        assert result["tailored_resume"] == "\\emph{Lead} engineer {x}"
        assert result["latex_fixes"] == {
            "applied_fixes": ["Added missing closing }", "Converted 1 **text** to \\emph{text}"],
            "remaining_errors": [],
        }
        assert result["llm_provider"] == "claude"
        assert result["model_used"] == "claude-sonnet-4-20250514"
        assert result["prompt_version"] == CURRENT_PROMPT_VERSION
        credits = await CreditsService(db_session).get_credits(test_user_id)
        assert credits.used_credits == 1
        assert monitoring.get_metrics()["total_tokens"] == 1400

    @pytest.mark.asyncio
    async def test_clean_latex_has_no_fix_report(self, db_session, test_user_id, mock_llm, monitoring):
        await CreditsService(db_session).initialize_credits(test_user_id)
        mock_llm.complete.return_value = _completion("===RESUME_START===\n\\textbf{Lead}\n===RESUME_END===")
        service = ResumeTailoringService(db_session, adapter=mock_llm, monitoring=monitoring)

        result = await service.tailor(test_user_id, "Job", "\\resume", GenerationOptions(), model="claude-3-5-haiku-latest")

        assert "latex_fixes" not in result
        assert mock_llm.complete.await_args.kwargs["model"] == "claude-3-5-haiku-latest"

    @pytest.mark.asyncio
    async def test_without_credit_ledger_is_refused(self, db_session, test_user_id, mock_llm, monitoring):
        service = ResumeTailoringService(db_session, adapter=mock_llm, monitoring=monitoring)

        with pytest.raises(InsufficientCreditsError):
            await service.tailor(test_user_id, "Job", "\\resume", GenerationOptions())

        mock_llm.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exhausted_credits_are_refused(self, db_session, test_user_id, mock_llm, monitoring):
        await CreditsService(db_session).reset_credits(test_user_id, 0, "free")
        service = ResumeTailoringService(db_session, adapter=mock_llm, monitoring=monitoring)

        with pytest.raises(InsufficientCreditsError):
            await service.tailor(test_user_id, "Job", "\\resume", GenerationOptions())

    @pytest.mark.asyncio
    async def test_model_failure_keeps_credit(self, db_session, test_user_id, mock_llm, monitoring):
        await CreditsService(db_session).initialize_credits(test_user_id)
        mock_llm.complete.side_effect = AIConfigurationError("Anthropic API key not configured")
        service = ResumeTailoringService(db_session, adapter=mock_llm, monitoring=monitoring)

        with pytest.raises(AIConfigurationError):
            await service.tailor(test_user_id, "Job", "\\resume", GenerationOptions())

        credits = await CreditsService(db_session).get_credits(test_user_id)
        assert credits.used_credits == 0
        assert monitoring.get_metrics()["failed_calls"] == 1
