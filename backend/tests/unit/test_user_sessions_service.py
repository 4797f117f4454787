"""
Unit tests for UserSessionService: preferences, sessions, activity and workspaces.
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from core.exceptions import NotFoundError
from infrastructure.database.models import UserActivityLog, UserSessionHistory
from infrastructure.database.models.base import utcnow
from services.user_sessions import UserSessionService


@pytest.fixture
def service(db_session) -> UserSessionService:
    return UserSessionService(db_session)


class TestPreferences:
    @pytest.mark.asyncio
    async def test_defaults_created_on_first_read(self, service, test_user_id):
        prefs = await service.get_preferences(test_user_id)

        assert prefs.default_tone == "professional"
        assert prefs.default_word_count == 800
        assert prefs.theme == "system"
        assert prefs.include_images is True

    @pytest.mark.asyncio
    async def test_second_read_returns_same_row(self, service, test_user_id):
        first = await service.get_preferences(test_user_id)
        second = await service.get_preferences(test_user_id)
        assert first.id == second.id

    @pytest.mark.asyncio
    async def test_update_ignores_unknown_and_null_fields(self, service, test_user_id):
        prefs = await service.update_preferences(
            test_user_id,
            {"default_tone": "casual", "theme": "dark", "user_id": "other", "language": None},
        )

        assert prefs.default_tone == "casual"
        assert prefs.theme == "dark"
        assert prefs.language == "en"
        assert prefs.user_id == test_user_id


class TestSessions:
    @pytest.mark.asyncio
    async def test_start_and_end(self, service, test_user_id):
        await service.start_session(
            test_user_id, "sess-1", user_agent="Mozilla/5.0", ip_address="203.0.113.5", browser="Firefox"
        )

        ended = await service.end_session(
            test_user_id,
            "sess-1",
            counters={"blog_posts_created": 2, "images_searched": 5},
            session_data={"page": "editor"},
        )

        assert ended.ended_at is not None
        assert ended.duration_seconds >= 0
        assert ended.blog_posts_created == 2
        assert ended.images_searched == 5
        assert ended.blog_posts_edited == 0
        assert ended.session_data == {"page": "editor"}
        assert ended.browser == "Firefox"

    @pytest.mark.asyncio
    async def test_ending_unknown_session_raises(self, service, test_user_id):
        with pytest.raises(NotFoundError, match="Session not found"):
            await service.end_session(test_user_id, "missing")

    @pytest.mark.asyncio
    async def test_end_without_id_closes_latest_open_session(self, service, db_session, test_user_id):
        older = await service.start_session(test_user_id, "older")
        older.started_at = older.started_at - timedelta(hours=1)
        await db_session.commit()
        await service.start_session(test_user_id, "latest")

        ended = await service.end_session(test_user_id)

        assert ended.session_id == "latest"
        assert ended.ended_at is not None
        assert (await service.end_session(test_user_id)).session_id == "older"

    @pytest.mark.asyncio
    async def test_end_without_id_and_nothing_open(self, service, test_user_id):
        with pytest.raises(NotFoundError, match="Session not found"):
            await service.end_session(test_user_id)

    @pytest.mark.asyncio
    async def test_closed_session_cannot_be_closed_again(self, service, test_user_id):
        await service.start_session(test_user_id, "sess-1")
        await service.end_session(test_user_id, "sess-1")

        with pytest.raises(NotFoundError):
            await service.end_session(test_user_id, "sess-1")

    @pytest.mark.asyncio
    async def test_other_users_session_is_not_found(self, service, test_user_id):
        await service.start_session(test_user_id, "sess-1")

        with pytest.raises(NotFoundError):
            await service.end_session(str(uuid4()), "sess-1")

    @pytest.mark.asyncio
    async def test_stats(self, service, test_user_id):
        await service.start_session(test_user_id, "a")
        await service.end_session(test_user_id, "a", counters={"blog_posts_created": 1, "references_added": 4})
        await service.start_session(test_user_id, "b")

        stats = await service.get_session_stats(test_user_id)

        assert stats["total_sessions"] == 2
        assert stats["total_blog_posts_created"] == 1
        assert stats["total_references_added"] == 4
        assert stats["total_images_searched"] == 0
        assert stats["avg_session_duration"] >= 0

    @pytest.mark.asyncio
    async def test_history_is_limited(self, service, test_user_id):
        for i in range(3):
            await service.start_session(test_user_id, f"s{i}")

        assert len(await service.get_session_history(test_user_id, limit=2)) == 2


class TestActivity:
    @pytest.mark.asyncio
    async def test_log_and_filter(self, service, test_user_id):
        await service.log_activity(test_user_id, "blog_generated", {"topic": "robots"}, duration_ms=1200)
        await service.log_activity(test_user_id, "blog_edited")
        await service.log_activity(test_user_id, "blog_generated", success=False, error_message="timeout")

        everything = await service.get_activity_log(test_user_id)
        generated = await service.get_activity_log(test_user_id, activity_type="blog_generated")

        assert len(everything) == 3
        assert len(generated) == 2
        assert {a.success for a in generated} == {True, False}

    @pytest.mark.asyncio
    async def test_recent_summary(self, service, test_user_id):
        await service.log_activity(test_user_id, "blog_generated")
        await service.log_activity(test_user_id, "blog_generated", success=False)
        await service.log_activity(test_user_id, "image_search")

        summary = await service.get_recent_activity_summary(test_user_id, days=7)

        assert summary == {
            "days": 7,
            "total": 3,
            "by_type": {
                "blog_generated": {"total": 2, "success": 1, "failure": 1},
                "image_search": {"total": 1, "success": 1, "failure": 0},
            },
        }

    @pytest.mark.asyncio
    async def test_cleanup_removes_only_old_rows(self, service, db_session, test_user_id):
        old = utcnow() - timedelta(days=120)
        db_session.add(UserSessionHistory(user_id=test_user_id, session_id="old", started_at=old))
        db_session.add(UserActivityLog(user_id=test_user_id, activity_type="old", created_at=old))
        await db_session.commit()
        await service.start_session(test_user_id, "new")
        await service.log_activity(test_user_id, "new")

        removed = await service.cleanup_old_session_data(days_to_keep=90)

        assert removed == 2
        assert [s.session_id for s in await service.get_session_history(test_user_id)] == ["new"]
        assert [a.activity_type for a in await service.get_activity_log(test_user_id)] == ["new"]


class TestWorkspaces:
    @pytest.mark.asyncio
    async def test_save_creates_then_updates(self, service, test_user_id):
        created = await service.save_workspace(test_user_id, "ws-1", draft_content="Draft one")
        updated = await service.save_workspace(
            test_user_id, "ws-1", draft_content="Draft two", is_public=True, collaborators=["a@b.c"]
        )

        assert updated.id == created.id
        assert updated.draft_content == "Draft two"
        assert updated.is_public is True
        assert updated.collaborators == ["a@b.c"]
        assert len(await service.list_workspaces(test_user_id)) == 1

    @pytest.mark.asyncio
    async def test_get_and_delete(self, service, test_user_id):
        await service.save_workspace(test_user_id, "ws-1", draft_metadata={"title": "Draft"})

        workspace = await service.get_workspace(test_user_id, "ws-1")
        assert workspace.draft_metadata == {"title": "Draft"}

        await service.delete_workspace(test_user_id, "ws-1")

        with pytest.raises(NotFoundError, match="Workspace not found"):
            await service.get_workspace(test_user_id, "ws-1")

    @pytest.mark.asyncio
    async def test_workspaces_are_per_user(self, service, test_user_id):
        await service.save_workspace(test_user_id, "ws-1")

        assert await service.list_workspaces(str(uuid4())) == []
