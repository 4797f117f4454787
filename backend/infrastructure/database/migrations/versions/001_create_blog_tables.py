"""Create blog tables (blog_posts, blog_references, blog_image_metadata)

Revision ID: 001
Revises:
Create Date: 2025-01-10

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "blog_posts",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("topic", sa.String(length=500), nullable=False),
        sa.Column("tone", sa.String(length=20), nullable=False, server_default="professional"),
        sa.Column("word_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("generation_time", sa.Integer(), nullable=True),
        sa.Column("model_used", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("metadata", postgresql.JSON(), nullable=False, server_default="{}"),
        sa.Column("keywords", postgresql.JSON(), nullable=False, server_default="[]"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("tone IN ('academic', 'casual', 'professional')", name="ck_blog_posts_tone"),
    )
    op.create_index("ix_blog_posts_user_id", "blog_posts", ["user_id"])
    op.create_index("ix_blog_posts_user_created", "blog_posts", ["user_id", "created_at"])

    op.create_table(
        "blog_references",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("blog_post_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=1000), nullable=False),
        sa.Column("url", sa.String(length=2000), nullable=False),
        sa.Column("source", sa.String(length=255), nullable=False),
        sa.Column("published_at", sa.String(length=64), nullable=True),
        sa.Column("relevance_score", sa.Float(), nullable=False, server_default="0.5"),
        sa.Column("snippet", sa.Text(), nullable=True),
        sa.Column("domain", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["blog_post_id"], ["blog_posts.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_blog_references_blog_post_id", "blog_references", ["blog_post_id"])

    op.create_table(
        "blog_image_metadata",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("blog_post_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("image_id", sa.String(length=255), nullable=False),
        sa.Column("url", sa.String(length=2000), nullable=False),
        sa.Column("alt_text", sa.String(length=1000), nullable=True),
        sa.Column("photographer", sa.String(length=255), nullable=True),
        sa.Column("photographer_url", sa.String(length=1000), nullable=True),
        sa.Column("download_url", sa.String(length=2000), nullable=True),
        sa.Column("relevance_score", sa.Float(), nullable=False, server_default="0.5"),
        sa.Column("section_index", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("image_type", sa.String(length=50), nullable=False, server_default="unsplash"),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["blog_post_id"], ["blog_posts.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_blog_image_metadata_blog_post_id", "blog_image_metadata", ["blog_post_id"])


def downgrade() -> None:
    op.drop_index("ix_blog_image_metadata_blog_post_id", table_name="blog_image_metadata")
    op.drop_table("blog_image_metadata")
    op.drop_index("ix_blog_references_blog_post_id", table_name="blog_references")
    op.drop_table("blog_references")
    op.drop_index("ix_blog_posts_user_created", table_name="blog_posts")
    op.drop_index("ix_blog_posts_user_id", table_name="blog_posts")
    op.drop_table("blog_posts")
