"""
Content generation agent: writes and edits blog posts with Claude.

Without an Anthropic key the agent writes deterministic placeholder posts so
the pipeline can be exercised locally.
"""

import logging
import re
from collections import Counter
from datetime import UTC, datetime
from typing import List, Optional, Sequence

from adapters.ai.anthropic_adapter import AnthropicAdapter, anthropic_adapter
from core.domain import BlogContent, EditResult, ResearchResult, TokenUsage, Tone
from services.llm_monitoring import LLMMonitoring, calculate_cost, llm_monitoring

logger = logging.getLogger(__name__)

TONE_INSTRUCTIONS = {
    Tone.ACADEMIC: "Write in an academic style with formal language, citations, and scholarly tone.",
    Tone.CASUAL: "Write in a conversational, friendly tone suitable for a general audience.",
    Tone.PROFESSIONAL: "Write in a professional business tone, clear and authoritative.",
}

KEYWORD_PATTERNS = [
    re.compile(r"\*\*Keywords:\*\* \[(.+)\]"),
    re.compile(r"Keywords: \[(.+)\]"),
    re.compile(r"Keywords: (.+)"),
    re.compile(r"\*\*Keywords:\*\* (.+)"),
]

STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can", "this", "that", "these",
    "those", "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
})

_TITLE_LINE = re.compile(r"^# (.+)$", re.MULTILINE)

FALLBACK_KEYWORD_COUNT = 5
DEFAULT_EDIT_TITLE = "Edited Blog Post"


def build_blog_prompt(
    topic: str, tone: Tone, max_words: int, research: Sequence[ResearchResult]
) -> str:
    research_lines = "\n".join(f"- {item.title}: {item.snippet}" for item in research)
    return f"""
You are an expert blog writer. Create a comprehensive blog post on "{topic}".

**Requirements:**
- Maximum {max_words} words
- {TONE_INSTRUCTIONS[tone]}
- Include proper Markdown formatting
- Use the provided research data for accuracy
- Structure with clear headings (## for main sections)
- Include an engaging introduction and conclusion
- Return 5-7 keywords that best describe this blog post

**Research Data:**
{research_lines}

**Output Format:**
Return the blog post in this exact format:

# [Blog Title]

[Introduction paragraph]

## [Section 1 Title]
[Section 1 content]

## [Section 2 Title]
[Section 2 content]

## [Section 3 Title]
[Section 3 content]

## Conclusion
[Conclusion paragraph]

**Keywords:** [keyword1, keyword2, keyword3, keyword4, keyword5]

**Word Count:** [exact number]

Write the blog post now:
"""


def build_edit_prompt(original_content: str, edit_request: str) -> str:
    return f"""
Original blog content:
{original_content}

Edit request: {edit_request}

**CRITICAL INSTRUCTIONS:**
- Return ONLY the edited blog content - no meta-commentary, explanations, or notes about your writing process
- Do not include phrases like "Here's the edited version", "I've made changes", "Let me know if you'd like adjustments", etc.
- Do not explain what you did or how you edited it
- Start directly with the blog title and content
- Maintain the same structure and tone as the original
- Include the title with # markdown format

Please provide the edited blog content with the requested changes:
"""


def split_title(text: str, default_title: str) -> tuple[str, str]:
    """Return ``(title, body)`` where body is the text minus its first ``# `` line."""
    match = _TITLE_LINE.search(text)
    if not match:
        return default_title, text.strip()
    body = text[: match.start()] + text[match.end():]
    return match.group(1).strip(), body.strip()


def parse_keywords(text: str) -> List[str]:
    for pattern in KEYWORD_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        raw = match.group(1).strip()
        if raw.startswith("[") and raw.endswith("]"):
            raw = raw[1:-1]
        keywords = [k.strip().strip("\"'") for k in raw.split(",")]
        return [k for k in keywords if k]
    return []


def extract_keywords_from_content(content: str) -> List[str]:
    """Most frequent words longer than 3 characters, ignoring stopwords."""
    counts: Counter = Counter()
    for word in content.lower().split():
        clean = re.sub(r"[^\w]", "", word)
        if len(clean) > 3 and clean not in STOPWORDS:
            counts[clean] += 1
    return [word for word, _ in counts.most_common(FALLBACK_KEYWORD_COUNT)]


def parse_blog(text: str, topic: str) -> BlogContent:
    """Parse the model's Markdown into title, body, keywords and sections."""
    title, body = split_title(text, topic)

    keywords = parse_keywords(body)
    if not keywords:
        keywords = extract_keywords_from_content(body)
        logger.info("No keyword line found, using fallback keywords: %s", keywords)

    return BlogContent(
        title=title,
        content=body,
        keywords=keywords,
        word_count=len(body.split()),
        sections=[section.strip() for section in body.split("\n## ")],
    )


def mock_blog(topic: str, tone: Tone, research: Sequence[ResearchResult]) -> str:
    """Placeholder post used when no LLM is configured."""
    sources = "\n".join(f"- {item.title}" for item in research[:3]) or "- No research available"
    words = [w for w in re.sub(r"[^\w\s]", "", topic.lower()).split() if len(w) > 3] or ["topic"]
    return f"""# {topic}: A {tone.value.title()} Overview

This is a placeholder article about {topic}. Configure ANTHROPIC_API_KEY to generate real content.

## Background
{topic} has drawn steady attention. Sources consulted:
{sources}

## Key Ideas
The central ideas of {topic} are summarized here for review.

## Practical Applications
Readers can apply {topic} in everyday work.

## Conclusion
{topic} remains worth following.

**Keywords:** [{", ".join(words[:5])}]

**Word Count:** 60
"""


class ContentGenerationAgent:
    """Generates and edits Markdown posts."""

    def __init__(
        self,
        adapter: Optional[AnthropicAdapter] = None,
        monitoring: Optional[LLMMonitoring] = None,
    ):
        self.adapter = adapter or anthropic_adapter
        self.monitoring = monitoring or llm_monitoring

    @property
    def model(self) -> str:
        return self.adapter.model if self.adapter.is_configured else "mock"

    async def generate_blog(
        self,
        topic: str,
        tone: Tone,
        max_words: int,
        research: Sequence[ResearchResult],
    ) -> BlogContent:
        tone = Tone(tone)
        usage = TokenUsage()
        cost = 0.0

        if self.adapter.is_configured:
            prompt = build_blog_prompt(topic, tone, max_words, research)
            async with self.monitoring.track("generate_blog") as call:
                completion = await self.adapter.complete(prompt)
                usage = TokenUsage(input=completion.input_tokens, output=completion.output_tokens)
                cost = calculate_cost(usage, completion.model)
                call.record(usage, cost)
            text = completion.text
        else:
            logger.warning("ANTHROPIC_API_KEY not set, generating mock content for %r", topic)
            text = mock_blog(topic, tone, research)

        blog = parse_blog(text, topic)
        blog.metadata = {
            "tone": tone.value,
            "generated_at": datetime.now(UTC).isoformat(),
            "model_used": self.model,
            "token_usage": usage.to_dict(),
            "estimated_cost": cost,
        }
        return blog

    async def edit_blog(self, original_content: str, edit_request: str) -> EditResult:
        if not self.adapter.is_configured:
            logger.warning("ANTHROPIC_API_KEY not set, returning content with the edit request noted")
            title, body = split_title(original_content, DEFAULT_EDIT_TITLE)
            return EditResult(title=title, content=f"{body}\n\n> Edit requested: {edit_request}")

        async with self.monitoring.track("edit_blog") as call:
            completion = await self.adapter.complete(build_edit_prompt(original_content, edit_request))
            usage = TokenUsage(input=completion.input_tokens, output=completion.output_tokens)
            call.record(usage, calculate_cost(usage, completion.model))

        title, body = split_title(completion.text, DEFAULT_EDIT_TITLE)
        return EditResult(title=title, content=body)
