"""
Resume tailoring: rewrite a LaTeX resume for a job offer and optionally draft
a cover letter and application answers.

One successful tailoring costs one credit. The credit is taken after the
model has answered; a failed deduction is logged and does not fail the
request.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from adapters.ai.anthropic_adapter import AnthropicAdapter, anthropic_adapter
from core.domain import TokenUsage
from core.exceptions import InsufficientCreditsError
from services.credits import CreditsService
from services.latex_utils import process_latex_code
from services.llm_monitoring import LLMMonitoring, calculate_cost, llm_monitoring
from services.prompt_versions import (
    CURRENT_PROMPT_VERSION,
    STANDARD_QUESTION,
    GenerationOptions,
    build_prompt,
)

logger = logging.getLogger(__name__)

LLM_PROVIDER = "claude"

_ANSWER_PLACEHOLDER = re.compile(r"^\[Answer here\]\s*")


def _section(response: str, name: str) -> Optional[str]:
    match = re.search(rf"==={name}_START===([\s\S]*?)==={name}_END===", response)
    return match.group(1) if match else None


def _strip_code_fence(text: str) -> str:
    text = re.sub(r"^```latex\s*\n?", "", text.strip())
    return re.sub(r"\n?```$", "", text).strip()


def _custom_answers(section: str, count: int) -> List[str]:
    answers = []
    for number in range(1, count + 1):
        match = re.search(
            rf"\*\*Custom Question {number}:.*?\*\*([\s\S]*?)(?=\*\*Custom Question {number + 1}:|$)",
            section,
        )
        if match:
            answers.append(_ANSWER_PLACEHOLDER.sub("", match.group(1).strip()))
    return answers


def parse_structured_response(response: str, options: GenerationOptions) -> Dict[str, Any]:
    """
    Split the model output into its marked sections.

    Without resume markers the whole response is taken as the resume.
    Optional sections are only read when they were requested.
    """
    parsed: Dict[str, Any] = {}

    resume = _section(response, "RESUME")
    parsed["tailored_resume"] = _strip_code_fence(resume if resume is not None else response)

    if options.include_cover_letter:
        cover_letter = _section(response, "COVER_LETTER")
        if cover_letter is not None:
            parsed["cover_letter"] = cover_letter.strip()

    if options.include_standard_questions:
        standard = _section(response, "STANDARD_QUESTIONS")
        if standard is not None:
            match = re.search(
                re.escape(STANDARD_QUESTION) + r"([\s\S]*?)(?=\*\*Custom Question|$)", standard
            )
            parsed["standard_answers"] = {
                "why_this_job": _ANSWER_PLACEHOLDER.sub("", match.group(1).strip()) if match else "",
                "why_you_fit": "",
            }

    if options.custom_questions:
        custom = _section(response, "CUSTOM_QUESTIONS")
        if custom is not None:
            answers = _custom_answers(custom, len(options.custom_questions))
            if answers:
                parsed["custom_answers"] = answers

    return parsed


class ResumeTailoringService:
    def __init__(
        self,
        db: AsyncSession,
        adapter: Optional[AnthropicAdapter] = None,
        monitoring: Optional[LLMMonitoring] = None,
    ):
        self.credits = CreditsService(db)
        self.adapter = adapter or anthropic_adapter
        self.monitoring = monitoring or llm_monitoring

    async def tailor(
        self,
        user_id: str,
        job_offer: str,
        resume_latex: str,
        options: GenerationOptions,
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Tailor a resume and return the parsed sections.

        Raises:
            InsufficientCreditsError: Fewer than one credit left
            AIConfigurationError: No Anthropic key configured
        """
        if not await self.credits.has_credits(user_id, 1):
            raise InsufficientCreditsError(
                "Insufficient credits. Please upgrade your plan or purchase more credits."
            )

        prompt = build_prompt(job_offer, resume_latex, options)
        async with self.monitoring.track("tailor_resume") as call:
            completion = await self.adapter.complete(prompt, model=model)
            usage = TokenUsage(input=completion.input_tokens, output=completion.output_tokens)
            call.record(usage, calculate_cost(usage, completion.model))

        parsed = parse_structured_response(completion.text, options)

        processed = process_latex_code(parsed["tailored_resume"])
        if processed["fixes"] or processed["errors"]:
            logger.info("LaTeX fixes applied: %s", processed["fixes"])
            parsed["tailored_resume"] = processed["processed_code"]
            if processed["fixes"]:
                parsed["latex_fixes"] = {
                    "applied_fixes": processed["fixes"],
                    "remaining_errors": processed["errors"],
                }
            if processed["errors"]:
                parsed["latex_warnings"] = processed["errors"]

        try:
            await self.credits.deduct_credits(user_id, 1)
        except InsufficientCreditsError as e:
            logger.warning("Failed to deduct credit for user %s: %s", user_id, e)

        parsed.update(
            llm_provider=LLM_PROVIDER,
            model_used=completion.model,
            prompt_version=CURRENT_PROMPT_VERSION,
        )
        return parsed
