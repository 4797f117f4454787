"""
Reference management agent: turns research results into a citation list
and appends it to a post.
"""

import logging
import re
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from core.domain import Reference, ReferenceList, ResearchResult

logger = logging.getLogger(__name__)

MIN_RECOMMENDED_REFERENCES = 3
STALE_AFTER_YEARS = 5

_REFERENCES_TAIL = re.compile(r"\n## References[\s\S]*$")

ResearchItem = Union[ResearchResult, Dict[str, Any]]


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, ``Z`` suffix included. Bad input gives None."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _as_reference(item: ResearchItem) -> Reference:
    if isinstance(item, ResearchResult):
        return Reference(
            title=item.title, url=item.url, source=item.source, published_at=item.published_at
        )
    return Reference(
        title=item.get("title") or "",
        url=item.get("url") or "",
        source=item.get("source") or "",
        published_at=item.get("published_at") or item.get("publishedAt"),
    )


class ReferenceManagementAgent:
    """Formats, embeds and sanity-checks references."""

    async def extract_references(
        self, research_data: Iterable[ResearchItem], blog_content: str
    ) -> ReferenceList:
        """Use every research result as a reference, in the given order."""
        references = [_as_reference(item) for item in research_data]
        return ReferenceList(
            references=references,
            total_count=len(references),
            generated_at=datetime.now(UTC).isoformat(),
        )

    @staticmethod
    def generate_markdown_references(references: List[Reference]) -> str:
        if not references:
            return "\n## References\n\nNo references available."

        lines = ["\n## References\n\n"]
        for index, ref in enumerate(references, start=1):
            published = parse_date(ref.published_at)
            year = f" ({published.year})" if published else ""
            lines.append(f"{index}. [{ref.title}]({ref.url}) - {ref.source}{year}\n")
        return "".join(lines)

    async def embed_references_in_blog(self, blog_content: str, references: List[Reference]) -> str:
        """Replace any existing References section with a fresh one."""
        without_refs = _REFERENCES_TAIL.sub("", blog_content)
        return without_refs + self.generate_markdown_references(references)

    async def get_reference_summary(self, research_data: Iterable[ResearchItem]) -> Dict[str, Any]:
        references = [_as_reference(item) for item in research_data]

        sources: List[str] = []
        for ref in references:
            if ref.source not in sources:
                sources.append(ref.source)

        dates = [d for d in (parse_date(ref.published_at) for ref in references) if d]
        date_range: Dict[str, str] = {}
        if dates:
            date_range = {
                "earliest": min(dates).isoformat(),
                "latest": max(dates).isoformat(),
            }

        return {
            "total_references": len(references),
            "unique_sources": sources,
            "date_range": date_range,
            "generated_at": datetime.now(UTC).isoformat(),
        }

    @staticmethod
    def validate_references(references: List[Reference]) -> Dict[str, Any]:
        issues: List[str] = []
        suggestions: List[str] = []

        if len(references) < MIN_RECOMMENDED_REFERENCES:
            suggestions.append("Consider adding more references for better credibility")

        invalid_urls = [ref for ref in references if not ref.url or not ref.url.startswith("http")]
        if invalid_urls:
            issues.append(f"{len(invalid_urls)} references have invalid URLs")

        missing_titles = [ref for ref in references if not ref.title or not ref.title.strip()]
        if missing_titles:
            issues.append(f"{len(missing_titles)} references have missing titles")

        seen = set()
        duplicates = 0
        for ref in references:
            if ref.url in seen:
                duplicates += 1
            seen.add(ref.url)
        if duplicates:
            issues.append(f"{duplicates} duplicate URLs found")

        current_year = datetime.now(UTC).year
        old = [
            ref for ref in references
            if (published := parse_date(ref.published_at)) and current_year - published.year > STALE_AFTER_YEARS
        ]
        if len(old) > len(references) * 0.5:
            suggestions.append("Consider including more recent references")

        return {"is_valid": not issues, "issues": issues, "suggestions": suggestions}
