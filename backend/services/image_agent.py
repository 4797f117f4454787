"""
Image retrieval agent: finds Unsplash photos for a post and places them
into its sections with the attribution Unsplash requires.
"""

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional

from adapters.images import UnsplashAdapter, UnsplashError
from core.domain import ImageData

logger = logging.getLogger(__name__)

IMAGES_PER_QUERY = 3
MANUAL_SEARCH_PAGE_SIZE = 15
MAX_CONCEPTS = 5
MAX_QUERIES = 3
RELEVANT_SCORE = 7

_COMMON_WORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had", "her", "was",
    "one", "our", "out", "day", "get", "has", "him", "his", "how", "man", "new", "now",
    "old", "see", "two", "way", "who", "boy", "did", "its", "let", "put", "say", "she",
    "too", "use", "this", "that", "with", "they", "have", "from", "word", "what", "said",
    "each", "which", "their", "time", "will", "about", "many", "then", "them", "these",
    "some", "would", "make", "like", "into", "look", "more", "could", "than", "first",
    "so", "go", "no", "my", "been", "call", "oil", "sit", "find", "down", "come", "made",
    "may", "part",
})


def score_relevance(alt: str, topic: str) -> int:
    """
    Score how well an image's alt text matches a topic, 0 to 10.

    A topic word (longer than 3 characters) matches when it and an alt-text
    word contain one another. Longer alt text earns up to 2 bonus points.
    """
    topic_words = [word for word in topic.lower().split(" ") if len(word) > 3]
    alt_words = alt.lower().split(" ")

    if topic_words:
        matches = sum(
            1
            for topic_word in topic_words
            if any(topic_word in alt_word or alt_word in topic_word for alt_word in alt_words)
        )
        base = matches / len(topic_words) * 10
    else:
        base = 5
    bonus = min(len(alt) / 20, 2)
    return min(int(base + bonus + 0.5), 10)


def embed_images(markdown: str, images: List[ImageData]) -> str:
    """
    Put one image above every ``##`` section, cycling when sections outnumber images.

    The text before the first section is left untouched.
    """
    sections = markdown.split("\n## ")
    parts = [sections[0]]
    for index, section in enumerate(sections[1:]):
        if images:
            image = images[index % len(images)]
            parts.append(
                f"\n![{image.alt}]({image.url})\n\n"
                f"*Photo by [{image.photographer}](https://unsplash.com/@{image.photographer_username})"
                f" on [Unsplash](https://unsplash.com)*\n\n## {section}"
            )
        else:
            parts.append(f"\n## {section}")
    return "".join(parts)


class ImageRetrievalAgent:
    """Searches, scores and embeds stock photos."""

    def __init__(self, adapter: Optional[UnsplashAdapter] = None):
        self.adapter = adapter or UnsplashAdapter()

    async def find_relevant_images(
        self,
        blog_content: str,
        topic: str,
        keywords: Optional[List[str]] = None,
    ) -> List[ImageData]:
        """Search with the first three concepts and return every image, best first."""
        concepts = list(keywords) if keywords else self.extract_key_concepts(blog_content)
        images = await self._search(concepts[:MAX_QUERIES], IMAGES_PER_QUERY)
        return self._score(images, topic)

    async def search_images_by_query(self, query: str) -> List[ImageData]:
        """Manual search used when a user swaps an image."""
        images = await self._search([query], MANUAL_SEARCH_PAGE_SIZE)
        return self._score(images, query)

    async def get_image_search_summary(self, blog_content: str, topic: str) -> Dict[str, Any]:
        concepts = self.extract_key_concepts(blog_content)
        queries = self.generate_search_queries(concepts)
        images = await self._search(queries, IMAGES_PER_QUERY)
        scored = self._score(images, topic)
        relevant = [image for image in scored if image.relevance_score >= RELEVANT_SCORE]
        return {
            "topic": topic,
            "key_concepts": concepts,
            "search_queries": queries,
            "total_images_found": len(images),
            "scored_images": len(scored),
            "final_images": len(relevant),
        }

    async def embed_images_in_markdown(self, markdown: str, images: List[ImageData]) -> str:
        """Embed images into sections and report each use to Unsplash."""
        embedded = embed_images(markdown, images)
        section_count = len(markdown.split("\n## ")) - 1
        if images and section_count > 0:
            used = {images[i % len(images)].id for i in range(section_count)}
            await asyncio.gather(*(self._track_download(photo_id) for photo_id in used))
        return embedded

    @staticmethod
    def extract_key_concepts(content: str) -> List[str]:
        """Unique content words longer than 4 characters, in order of appearance."""
        words = re.sub(r"[^\w\s]", "", content.lower()).split()
        concepts: List[str] = []
        for word in words:
            if len(word) > 4 and word not in _COMMON_WORDS and word not in concepts:
                concepts.append(word)
                if len(concepts) == MAX_CONCEPTS:
                    break
        return concepts

    @staticmethod
    def generate_search_queries(concepts: List[str]) -> List[str]:
        queries = []
        for concept in concepts:
            queries.extend([
                concept,
                f"{concept} technology",
                f"{concept} illustration",
                f"{concept} concept",
            ])
        return queries[:MAX_QUERIES]

    async def _search(self, queries: List[str], per_page: int) -> List[ImageData]:
        images: List[ImageData] = []
        for query in queries:
            try:
                photos = await self.adapter.search_photos(query, per_page=per_page)
            except UnsplashError as e:
                logger.warning("Image search failed for %r: %s", query, e)
                continue
            images.extend(self._to_image(photo, query) for photo in photos)
        return images

    @staticmethod
    def _to_image(photo: Dict[str, Any], query: str) -> ImageData:
        user = photo.get("user") or {}
        return ImageData(
            id=photo["id"],
            url=(photo.get("urls") or {}).get("regular", ""),
            alt=photo.get("alt_description") or query,
            photographer=user.get("name") or "",
            photographer_username=user.get("username") or "",
            download_url=(photo.get("links") or {}).get("download", ""),
        )

    @staticmethod
    def _score(images: List[ImageData], topic: str) -> List[ImageData]:
        for image in images:
            image.relevance_score = score_relevance(image.alt, topic)
        return sorted(images, key=lambda image: image.relevance_score, reverse=True)

    async def _track_download(self, photo_id: str) -> None:
        try:
            await self.adapter.track_download(photo_id)
        except UnsplashError as e:
            logger.warning("Unsplash download tracking failed: %s", e)
