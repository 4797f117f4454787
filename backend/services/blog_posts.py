"""
Blog post persistence: posts, their references and their images.

Every query is scoped to the owning user; a post owned by someone else is
reported as missing.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.utils import count_words, escape_like
from core.exceptions import NotFoundError
from infrastructure.database.models import BlogImageMetadata, BlogPost, BlogReference

logger = logging.getLogger(__name__)

POST_UPDATE_FIELDS = {"title", "content", "topic", "tone", "keywords", "metadata"}


class BlogPostsService:
    """CRUD and statistics for a user's saved posts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Posts

    async def save_blog_post(
        self,
        user_id: str,
        *,
        title: str,
        content: str,
        topic: str,
        tone: str,
        model_used: str,
        word_count: Optional[int] = None,
        generation_time: Optional[int] = None,
        metadata: Optional[dict] = None,
        keywords: Optional[List[str]] = None,
    ) -> BlogPost:
        post = BlogPost(
            user_id=user_id,
            title=title,
            content=content,
            topic=topic,
            tone=tone,
            word_count=word_count if word_count is not None else count_words(content),
            generation_time=generation_time,
            model_used=model_used,
            post_metadata=metadata or {},
            keywords=keywords or [],
        )
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)
        logger.info("Saved blog post %s for user %s", post.id, user_id)
        return post

    async def get_user_blog_posts(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Page through posts, newest first, optionally matching title or topic."""
        query = select(BlogPost).where(BlogPost.user_id == user_id)
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.where(or_(BlogPost.title.ilike(pattern), BlogPost.topic.ilike(pattern)))

        total = (await self.db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0

        offset = (page - 1) * limit
        result = await self.db.execute(
            query.order_by(BlogPost.created_at.desc()).offset(offset).limit(limit)
        )
        posts = list(result.scalars().all())
        return {"posts": posts, "total": total, "has_more": offset + len(posts) < total}

    async def get_blog_post(self, user_id: str, post_id: str) -> BlogPost:
        result = await self.db.execute(
            select(BlogPost).where(BlogPost.id == post_id, BlogPost.user_id == user_id)
        )
        post = result.scalar_one_or_none()
        if not post:
            raise NotFoundError("Blog post not found")
        return post

    async def update_blog_post(self, user_id: str, post_id: str, updates: Dict[str, Any]) -> BlogPost:
        post = await self.get_blog_post(user_id, post_id)
        for field, value in updates.items():
            if field not in POST_UPDATE_FIELDS or value is None:
                continue
            setattr(post, "post_metadata" if field == "metadata" else field, value)
        if updates.get("content") is not None:
            post.word_count = count_words(post.content)
        await self.db.commit()
        await self.db.refresh(post)
        return post

    async def delete_blog_post(self, user_id: str, post_id: str) -> None:
        await self.get_blog_post(user_id, post_id)
        await self.db.execute(delete(BlogReference).where(BlogReference.blog_post_id == post_id))
        await self.db.execute(delete(BlogImageMetadata).where(BlogImageMetadata.blog_post_id == post_id))
        await self.db.execute(delete(BlogPost).where(BlogPost.id == post_id))
        await self.db.commit()
        logger.info("Deleted blog post %s for user %s", post_id, user_id)

    async def search_blog_posts(self, user_id: str, query: str, limit: int = 10) -> List[BlogPost]:
        pattern = f"%{escape_like(query)}%"
        result = await self.db.execute(
            select(BlogPost)
            .where(
                BlogPost.user_id == user_id,
                or_(
                    BlogPost.title.ilike(pattern),
                    BlogPost.topic.ilike(pattern),
                    BlogPost.content.ilike(pattern),
                ),
            )
            .order_by(BlogPost.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_blog_post_stats(self, user_id: str) -> Dict[str, Any]:
        result = await self.db.execute(
            select(BlogPost.tone, BlogPost.word_count, BlogPost.generation_time)
            .where(BlogPost.user_id == user_id)
        )
        rows = result.all()
        total_words = sum(row.word_count for row in rows)
        timings = [row.generation_time for row in rows if row.generation_time is not None]
        tones = Counter(row.tone for row in rows)
        return {
            "total_posts": len(rows),
            "total_words": total_words,
            "avg_words_per_post": round(total_words / len(rows)) if rows else 0,
            "most_common_tone": tones.most_common(1)[0][0] if tones else None,
            "generation_time_avg": round(sum(timings) / len(timings)) if timings else 0,
        }

    async def get_recent_blog_posts(self, user_id: str, limit: int = 5) -> List[BlogPost]:
        result = await self.db.execute(
            select(BlogPost)
            .where(BlogPost.user_id == user_id)
            .order_by(BlogPost.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_blog_posts_by_tone(self, user_id: str, tone: str, limit: int = 10) -> List[BlogPost]:
        result = await self.db.execute(
            select(BlogPost)
            .where(BlogPost.user_id == user_id, BlogPost.tone == tone)
            .order_by(BlogPost.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_blog_posts_by_keyword(self, user_id: str, keyword: str, limit: int = 10) -> List[BlogPost]:
        # keywords is a plain JSON list, so containment is checked in Python
        result = await self.db.execute(
            select(BlogPost)
            .where(BlogPost.user_id == user_id)
            .order_by(BlogPost.created_at.desc())
        )
        matches = [post for post in result.scalars().all() if keyword in (post.keywords or [])]
        return matches[:limit]

    async def update_blog_post_metadata(self, user_id: str, post_id: str, metadata: Dict[str, Any]) -> BlogPost:
        post = await self.get_blog_post(user_id, post_id)
        post.post_metadata = {**(post.post_metadata or {}), **metadata}
        await self.db.commit()
        await self.db.refresh(post)
        return post

    # References

    async def add_reference(self, user_id: str, post_id: str, reference: Dict[str, Any]) -> BlogReference:
        await self.get_blog_post(user_id, post_id)
        row = BlogReference(
            blog_post_id=post_id,
            title=reference["title"],
            url=reference["url"],
            source=reference["source"],
            published_at=reference.get("published_at"),
            relevance_score=reference.get("relevance_score", 0.5),
            snippet=reference.get("snippet"),
            domain=reference.get("domain"),
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def get_references(self, user_id: str, post_id: str) -> List[BlogReference]:
        await self.get_blog_post(user_id, post_id)
        result = await self.db.execute(
            select(BlogReference)
            .where(BlogReference.blog_post_id == post_id)
            .order_by(BlogReference.relevance_score.desc())
        )
        return list(result.scalars().all())

    async def get_reference_stats(self, user_id: str) -> Dict[str, Any]:
        result = await self.db.execute(
            select(BlogReference.source, BlogReference.relevance_score)
            .join(BlogPost, BlogReference.blog_post_id == BlogPost.id)
            .where(BlogPost.user_id == user_id)
        )
        rows = result.all()
        return {
            "total_references": len(rows),
            "unique_sources": len({row.source for row in rows}),
            "avg_relevance": round(sum(row.relevance_score for row in rows) / len(rows), 2) if rows else 0,
        }

    # Images

    async def add_image(self, user_id: str, post_id: str, image: Dict[str, Any]) -> BlogImageMetadata:
        await self.get_blog_post(user_id, post_id)
        row = BlogImageMetadata(
            blog_post_id=post_id,
            image_id=image["image_id"],
            url=image["url"],
            alt_text=image.get("alt_text"),
            photographer=image.get("photographer"),
            photographer_url=image.get("photographer_url"),
            download_url=image.get("download_url"),
            relevance_score=image.get("relevance_score", 0.5),
            section_index=image.get("section_index", 0),
            image_type=image.get("image_type") or "unsplash",
            width=image.get("width"),
            height=image.get("height"),
            file_size=image.get("file_size"),
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    async def get_images(self, user_id: str, post_id: str) -> List[BlogImageMetadata]:
        await self.get_blog_post(user_id, post_id)
        result = await self.db.execute(
            select(BlogImageMetadata)
            .where(BlogImageMetadata.blog_post_id == post_id)
            .order_by(BlogImageMetadata.section_index)
        )
        return list(result.scalars().all())

    async def remove_image(self, user_id: str, post_id: str, image_id: str) -> None:
        await self.get_blog_post(user_id, post_id)
        result = await self.db.execute(
            select(BlogImageMetadata).where(
                BlogImageMetadata.blog_post_id == post_id,
                BlogImageMetadata.image_id == image_id,
            )
        )
        rows = result.scalars().all()
        if not rows:
            raise NotFoundError("Image not found")
        for row in rows:
            await self.db.delete(row)
        await self.db.commit()

    async def get_image_stats(self, user_id: str) -> Dict[str, Any]:
        result = await self.db.execute(
            select(BlogImageMetadata.photographer, BlogImageMetadata.relevance_score)
            .join(BlogPost, BlogImageMetadata.blog_post_id == BlogPost.id)
            .where(BlogPost.user_id == user_id)
        )
        rows = result.all()
        return {
            "total_images": len(rows),
            "unique_photographers": len({row.photographer for row in rows if row.photographer}),
            "avg_relevance": round(sum(row.relevance_score for row in rows) / len(rows), 2) if rows else 0,
        }
