"""
Research agent: gathers recent news and web results for a topic.

Both providers are queried concurrently. A provider that is unconfigured or
failing contributes no results instead of failing the whole research step.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from adapters.search import GoogleSearchAdapter, GoogleSearchError, NewsAPIAdapter, NewsAPIError
from core.domain import ResearchResult

logger = logging.getLogger(__name__)

MAX_RESULTS = 10
BLOCKED_DOMAINS = ("facebook.com", "twitter.com", "instagram.com", "tiktok.com", "youtube.com")
MIN_TITLE_LENGTH = 10
MIN_SNIPPET_LENGTH = 20


@dataclass
class ResearchRun:
    """Intermediate counts of one research pass."""

    news: List[ResearchResult]
    search: List[ResearchResult]
    combined: List[ResearchResult]
    filtered: List[ResearchResult]

    @property
    def final(self) -> List[ResearchResult]:
        return self.filtered[:MAX_RESULTS]

    def summary(self, topic: str) -> Dict[str, Any]:
        return {
            "topic": topic,
            "news_count": len(self.news),
            "search_count": len(self.search),
            "total_results": len(self.combined),
            "filtered_results": len(self.filtered),
            "final_results": len(self.final),
        }


def _hostname(url: str) -> Optional[str]:
    parsed = urlparse(url or "")
    if not parsed.scheme or not parsed.hostname:
        return None
    return parsed.hostname


def topic_keywords(topic: str) -> List[str]:
    """Lowercase words of the topic longer than 3 characters."""
    return [word for word in topic.lower().split(" ") if len(word) > 3]


class ResearchAgent:
    """Collects, deduplicates and filters research sources."""

    def __init__(
        self,
        news_adapter: Optional[NewsAPIAdapter] = None,
        search_adapter: Optional[GoogleSearchAdapter] = None,
    ):
        self.news_adapter = news_adapter or NewsAPIAdapter()
        self.search_adapter = search_adapter or GoogleSearchAdapter()

    async def research_topic(self, topic: str) -> List[ResearchResult]:
        """Return up to 10 relevant, deduplicated sources for a topic."""
        run = await self.run(topic)
        logger.info(
            "Research for %r: %d news, %d search, %d kept",
            topic, len(run.news), len(run.search), len(run.final),
        )
        return run.final

    async def get_research_summary(self, topic: str) -> Dict[str, Any]:
        run = await self.run(topic)
        return run.summary(topic)

    async def run(self, topic: str) -> ResearchRun:
        """Execute one full research pass and keep every intermediate list."""
        news, search = await asyncio.gather(
            self._get_news_articles(topic),
            self._get_search_results(topic),
        )
        combined = self.combine_and_deduplicate(news, search)
        filtered = self.filter_results(combined, topic)
        return ResearchRun(news=news, search=search, combined=combined, filtered=filtered)

    async def _get_news_articles(self, topic: str) -> List[ResearchResult]:
        try:
            articles = await self.news_adapter.search_everything(topic, page_size=20)
        except NewsAPIError as e:
            logger.warning("News lookup failed for %r: %s", topic, e)
            return []

        return [
            ResearchResult(
                title=article.get("title") or "",
                url=article.get("url") or "",
                snippet=article.get("description") or "",
                source=(article.get("source") or {}).get("name") or "",
                published_at=article.get("publishedAt"),
            )
            for article in articles
        ]

    async def _get_search_results(self, topic: str) -> List[ResearchResult]:
        try:
            items = await self.search_adapter.search(topic, num=10)
        except GoogleSearchError as e:
            logger.warning("Web search failed for %r: %s", topic, e)
            return []

        return [
            ResearchResult(
                title=item.get("title") or "",
                url=item.get("link") or "",
                snippet=item.get("snippet") or "",
                source=_hostname(item.get("link") or "") or "",
            )
            for item in items
        ]

    @staticmethod
    def combine_and_deduplicate(
        news: List[ResearchResult], search: List[ResearchResult]
    ) -> List[ResearchResult]:
        """Merge provider results, keeping the first occurrence of each URL."""
        seen = set()
        merged = []
        for result in [*news, *search]:
            if result.url in seen:
                continue
            seen.add(result.url)
            merged.append(result)
        return merged

    @staticmethod
    def filter_results(results: List[ResearchResult], topic: str) -> List[ResearchResult]:
        """Drop social media, thin entries and results unrelated to the topic."""
        keywords = topic_keywords(topic)
        kept = []
        for result in results:
            domain = _hostname(result.url)
            if domain is None:
                continue
            if any(blocked in domain for blocked in BLOCKED_DOMAINS):
                continue
            if len(result.title) < MIN_TITLE_LENGTH or len(result.snippet) < MIN_SNIPPET_LENGTH:
                continue
            text = f"{result.title} {result.snippet}".lower()
            if not any(keyword in text for keyword in keywords):
                continue
            kept.append(result)
        return kept
