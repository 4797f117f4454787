"""
Blog content database models: posts, references and image metadata.
"""

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class BlogTone(str, Enum):
    """Writing tone enumeration."""

    ACADEMIC = "academic"
    CASUAL = "casual"
    PROFESSIONAL = "professional"


class BlogPost(Base, TimestampMixin):
    """Generated blog post owned by a Supabase auth user."""

    __tablename__ = "blog_posts"

    # Primary key
    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Owner (auth.users.id, lives outside this schema)
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        nullable=False,
        index=True,
    )

    # Content
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    topic: Mapped[str] = mapped_column(String(500), nullable=False)
    tone: Mapped[str] = mapped_column(
        String(20),
        default=BlogTone.PROFESSIONAL.value,
        nullable=False,
    )
    word_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Generation details
    generation_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # ms
    model_used: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    post_metadata: Mapped[dict] = mapped_column("metadata", JSON, default=dict, nullable=False)
    keywords: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Relationships
    references: Mapped[List["BlogReference"]] = relationship(
        "BlogReference",
        back_populates="blog_post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    images: Mapped[List["BlogImageMetadata"]] = relationship(
        "BlogImageMetadata",
        back_populates="blog_post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_blog_posts_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, title={self.title[:30]}, tone={self.tone})>"


class BlogReference(Base, TimestampMixin):
    """A source cited by a blog post."""

    __tablename__ = "blog_references"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    blog_post_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("blog_posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(1000), nullable=False)
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    source: Mapped[str] = mapped_column(String(255), nullable=False)
    published_at: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    relevance_score: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)
    snippet: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    domain: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    blog_post: Mapped["BlogPost"] = relationship("BlogPost", back_populates="references")

    def __repr__(self) -> str:
        return f"<BlogReference(id={self.id}, source={self.source})>"


class BlogImageMetadata(Base, TimestampMixin):
    """An image placed into a blog post section."""

    __tablename__ = "blog_image_metadata"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    blog_post_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("blog_posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Provider image id (Unsplash photo id)
    image_id: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    alt_text: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    photographer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    photographer_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    download_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    relevance_score: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)
    section_index: Mapped[Optional[int]] = mapped_column(Integer, default=0, nullable=True)
    image_type: Mapped[str] = mapped_column(String(50), default="unsplash", nullable=False)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    blog_post: Mapped["BlogPost"] = relationship("BlogPost", back_populates="images")

    def __repr__(self) -> str:
        return f"<BlogImageMetadata(id={self.id}, image_id={self.image_id})>"
