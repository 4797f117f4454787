"""
Google Programmable Search (Custom Search JSON API) adapter.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


class GoogleSearchError(Exception):
    """Raised when the Custom Search API fails."""
    pass


class GoogleSearchAdapter:
    """Async client for the Custom Search JSON API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        engine_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = 15,
    ):
        self.api_key = api_key if api_key is not None else settings.google_search_api_key
        self.engine_id = engine_id if engine_id is not None else settings.google_search_engine_id
        self.base_url = base_url or settings.google_search_base_url
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.engine_id)


    async def search(self, query: str, num: int = 10) -> List[Dict[str, Any]]:
        """
        Run a web search.

        Returns:
            Raw result items (``title``, ``link``, ``snippet``)

        Raises:
            GoogleSearchError: Missing credentials or HTTP failure
        """
        if not self.is_configured:
            raise GoogleSearchError("Google search API key or engine id is not configured")

        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "num": num,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise GoogleSearchError(f"Custom Search request failed: {e}") from e

        if response.status_code >= 400:
            raise GoogleSearchError(f"Custom Search error [{response.status_code}]: {response.text[:200]}")

        items = response.json().get("items") or []
        logger.debug("Custom Search returned %d items for %r", len(items), query)
        return items
