"""
Unsplash API adapter for stock photo search.

Unsplash's API terms require hitting a photo's download endpoint whenever the
photo is used in published content; ``track_download`` does that.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


class UnsplashError(Exception):
    """Raised when the Unsplash API fails."""
    pass


class UnsplashAdapter:
    """Async client for api.unsplash.com."""

    def __init__(
        self,
        access_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = 15,
    ):
        self.access_key = access_key if access_key is not None else settings.unsplash_access_key
        self.base_url = (base_url or settings.unsplash_base_url).rstrip("/")
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.access_key)

    def _client(self) -> httpx.AsyncClient:
        """A fresh client with auth headers; callers close it with ``async with``."""
        return httpx.AsyncClient(
            headers={
                "Authorization": f"Client-ID {self.access_key}",
                "Accept-Version": "v1",
            },
            timeout=self.timeout,
        )

    async def search_photos(
        self,
        query: str,
        per_page: int = 3,
        orientation: str = "landscape",
    ) -> List[Dict[str, Any]]:
        """
        Search photos.

        Returns:
            Raw photo dicts (``id``, ``urls``, ``alt_description``, ``user``, ``links``)

        Raises:
            UnsplashError: Missing key, HTTP failure or an ``errors`` payload
        """
        if not self.is_configured:
            raise UnsplashError("UNSPLASH_ACCESS_KEY is not configured")

        params = {"query": query, "per_page": per_page, "orientation": orientation}
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/search/photos", params=params)
        except httpx.HTTPError as e:
            raise UnsplashError(f"Unsplash request failed: {e}") from e

        if response.status_code >= 400:
            raise UnsplashError(f"Unsplash error [{response.status_code}] for {query!r}")

        data = response.json()
        if data.get("errors"):
            raise UnsplashError(f"Unsplash errors for {query!r}: {data['errors']}")

        return data.get("results") or []

    async def track_download(self, photo_id: str) -> None:
        """Register a download event for a used photo."""
        if not self.is_configured:
            raise UnsplashError("UNSPLASH_ACCESS_KEY is not configured")
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/photos/{photo_id}/download")
        except httpx.HTTPError as e:
            raise UnsplashError(f"Download tracking failed for {photo_id}: {e}") from e
        if response.status_code >= 400:
            raise UnsplashError(f"Download tracking failed for {photo_id} [{response.status_code}]")
