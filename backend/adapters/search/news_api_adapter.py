"""
NewsAPI adapter for recent news coverage of a topic.

Uses the ``/v2/everything`` endpoint, newest articles first.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


class NewsAPIError(Exception):
    """Raised when NewsAPI returns an error or is unreachable."""
    pass


class NewsAPIAdapter:
    """Async client for newsapi.org."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = 15,
    ):
        self.api_key = api_key if api_key is not None else settings.news_api_key
        self.base_url = (base_url or settings.news_api_base_url).rstrip("/")
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, headers={"Accept": "application/json"})

    async def search_everything(
        self,
        query: str,
        page_size: int = 20,
        language: str = "en",
    ) -> List[Dict[str, Any]]:
        """
        Search all indexed articles for a query.

        Returns:
            Raw article dicts (``title``, ``url``, ``description``, ``source``, ``publishedAt``)

        Raises:
            NewsAPIError: Missing key, HTTP failure or ``status != "ok"``
        """
        if not self.is_configured:
            raise NewsAPIError("NEWS_API_KEY is not configured")

        params = {
            "q": query,
            "sortBy": "publishedAt",
            "language": language,
            "pageSize": page_size,
            "apiKey": self.api_key,
        }

        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/everything", params=params)
        except httpx.HTTPError as e:
            raise NewsAPIError(f"NewsAPI request failed: {e}") from e

        if response.status_code >= 400:
            raise NewsAPIError(f"NewsAPI error [{response.status_code}]: {response.text[:200]}")

        data = response.json()
        if data.get("status") != "ok":
            raise NewsAPIError(f"NewsAPI error: {data.get('message', 'unknown error')}")

        articles = data.get("articles") or []
        logger.debug("NewsAPI returned %d articles for %r", len(articles), query)
        return articles
