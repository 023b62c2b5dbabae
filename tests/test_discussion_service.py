from datetime import timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from ledgerapi.core.exceptions import NotFoundError
from ledgerapi.models.account import Account, AccountStatus
from ledgerapi.models.discussion import Discussion, ParticipatedDiscussion
from ledgerapi.services.discussion_service import DiscussionService
from ledgerapi.services.registration_service import RegistrationService


@pytest.fixture
def service(db, settings, clock):
    return DiscussionService(db, settings, clock=clock)


@pytest.fixture
def registration(db, settings, identity, clock):
    return RegistrationService(db, settings, identity=identity, clock=clock)


@pytest.fixture
def uid(registration):
    return registration.register_device("device-talk-000001").uid


@pytest.fixture
def discussion(db):
    discussion = Discussion(
        id="disc-1",
        title="오늘의 토론",
        news_url="https://news.example.com/1",
        category="economy",
        participants=[],
        participant_count=0,
        comment_count=0,
    )
    db.add(discussion)
    db.commit()
    return discussion


class TestCreateComment:
    """댓글 생성 및 카운터 갱신 테스트"""

    def test_counters_updated(self, service, db, uid, discussion, clock):
        # When
        service.create_comment(uid, "disc-1", "첫 댓글", news_url=discussion.news_url)

        # Then
        assert db.get(Account, uid).comment_count == 1

        participation = db.get(ParticipatedDiscussion, (uid, "disc-1"))
        assert participation.comment_count == 1
        assert participation.news_url == discussion.news_url

        refreshed = db.get(Discussion, "disc-1")
        assert refreshed.comment_count == 1
        assert refreshed.participant_count == 1
        assert refreshed.participants == [uid]
        assert refreshed.last_activity_at.replace(tzinfo=timezone.utc) == clock().astimezone(
            timezone.utc
        )

    def test_participant_counted_once(self, service, db, uid, registration, discussion):
        other_uid = registration.register_device("device-talk-000002").uid

        service.create_comment(uid, "disc-1", "하나")
        service.create_comment(uid, "disc-1", "둘")
        service.create_comment(other_uid, "disc-1", "셋")

        refreshed = db.get(Discussion, "disc-1")
        assert refreshed.comment_count == 3
        assert refreshed.participant_count == 2
        assert sorted(refreshed.participants) == sorted([uid, other_uid])
        assert db.get(ParticipatedDiscussion, (uid, "disc-1")).comment_count == 2

    def test_missing_discussion_only_updates_author(self, service, db, uid):
        service.create_comment(uid, "unknown-disc", "댓글")

        assert db.get(Account, uid).comment_count == 1
        assert db.get(Discussion, "unknown-disc") is None

    def test_unknown_author(self, service, discussion):
        with pytest.raises(NotFoundError):
            service.create_comment("no-such-account", "disc-1", "댓글")

    def test_transferred_author_rejected(self, service, db, uid, discussion):
        db.get(Account, uid).status = AccountStatus.TRANSFERRED.value
        db.commit()

        with pytest.raises(NotFoundError):
            service.create_comment(uid, "disc-1", "댓글")

        db.expire_all()
        assert db.get(Discussion, "disc-1").comment_count == 0


class TestOnCommentCreated:
    """댓글 생성 트리거 테스트"""

    def test_missing_comment_logged_not_raised(self, service):
        assert service.on_comment_created("no-such-comment") is False


class TestPopularDiscussions:
    """인기 토론 캐시 테스트"""

    def _add(self, db, discussion_id, participant_count):
        db.add(
            Discussion(
                id=discussion_id,
                title=f"토론 {discussion_id}",
                participants=[],
                participant_count=participant_count,
                comment_count=participant_count * 2,
            )
        )
        db.commit()

    def test_refresh_orders_by_participants(self, service, db, settings):
        self._add(db, "a", 3)
        self._add(db, "b", 10)
        self._add(db, "c", 7)

        count = service.refresh_popular_discussions()

        assert count == 3
        popular = service.get_popular_discussions()
        assert [item.id for item in popular.items] == ["b", "c", "a"]
        assert popular.items[0].participant_count == 10
        assert popular.updated_at is not None

    def test_refresh_respects_limit(self, db, settings, clock):
        settings.POPULAR_DISCUSSIONS_LIMIT = 2
        service = DiscussionService(db, settings, clock=clock)
        for i in range(5):
            self._add(db, f"d{i}", i)

        assert service.refresh_popular_discussions() == 2
        assert [item.id for item in service.get_popular_discussions().items] == [
            "d4",
            "d3",
        ]

    def test_empty_cache(self, service):
        popular = service.get_popular_discussions()

        assert popular.items == []
        assert popular.updated_at is None

    def test_failure_keeps_previous_cache(self, service, db):
        self._add(db, "a", 1)
        service.refresh_popular_discussions()

        with patch.object(
            service.discussion_repo,
            "top_by_participants",
            side_effect=OperationalError("SELECT", {}, Exception("timeout")),
        ):
            assert service.refresh_popular_discussions() is None

        assert [item.id for item in service.get_popular_discussions().items] == ["a"]
