"""
토론 서비스

- 댓글 생성과 생성 후 카운터 갱신(트리거)
- 참여자 수 기준 인기 토론 캐시 갱신 (외부 스케줄러가 10분마다 호출)

트리거와 캐시 갱신은 실패해도 호출자에게 예외를 던지지 않고 로그만 남깁니다.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ledgerapi.config import Settings
from ledgerapi.core.exceptions import BaseAPIException, NotFoundError
from ledgerapi.core.security import IdentityResolver
from ledgerapi.database.transaction import run_transaction
from ledgerapi.models.account import AccountStatus
from ledgerapi.models.discussion import Comment, ParticipatedDiscussion
from ledgerapi.repositories.account_repository import AccountRepository
from ledgerapi.repositories.discussion_repository import DiscussionRepository
from ledgerapi.schemas.discussion import (
    CreateCommentResponse,
    PopularDiscussionItem,
    PopularDiscussionsResponse,
)
from ledgerapi.utils.timezone_utils import ensure_utc, get_kst_now

logger = logging.getLogger(__name__)


class DiscussionService:
    """댓글/토론 카운터 및 인기 토론 캐시 서비스"""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        clock: Callable[[], datetime] = get_kst_now,
    ):
        self.db = db
        self.settings = settings
        self.clock = clock
        self.account_repo = AccountRepository(db)
        self.discussion_repo = DiscussionRepository(db)

    def _now(self) -> datetime:
        return self.clock().astimezone(timezone.utc)

    def create_comment(
        self,
        uid: str,
        discussion_id: str,
        content: str,
        news_url: Optional[str] = None,
    ) -> CreateCommentResponse:
        """댓글 저장 후 카운터 갱신 트리거 실행"""

        def work(db: Session) -> str:
            if not self.account_repo.exists(
                {"id": uid, "status": AccountStatus.ACTIVE.value}
            ):
                raise NotFoundError("User not found")

            comment = Comment(
                id=IdentityResolver.new_identity(),
                discussion_id=discussion_id,
                account_id=uid,
                news_url=news_url,
                content=content,
                created_at=self._now(),
            )
            self.discussion_repo.add_comment(comment)
            return comment.id

        comment_id = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="createComment",
        )
        self.on_comment_created(comment_id)
        return CreateCommentResponse(comment_id=comment_id)

    def on_comment_created(self, comment_id: str) -> bool:
        """
        댓글 생성 트리거 - 작성자/참여 토론/토론 문서 카운터를 한 트랜잭션으로 갱신

        Returns:
            bool: 갱신 성공 여부 (실패는 로그만 남김)
        """

        def work(db: Session) -> None:
            comment = self.discussion_repo.get_comment(comment_id)
            if comment is None:
                raise NotFoundError(f"Comment not found: {comment_id}")

            uid = comment.account_id
            now = self._now()

            # 1. 작성자 댓글 수
            account = self.account_repo.get_model(uid)
            if account is not None:
                account.comment_count = (account.comment_count or 0) + 1

                # 2. 작성자의 참여 토론 기록
                participation = self.discussion_repo.get_participation(
                    uid, comment.discussion_id
                )
                if participation is None:
                    participation = ParticipatedDiscussion(
                        account_id=uid,
                        discussion_id=comment.discussion_id,
                        comment_count=0,
                    )
                    self.discussion_repo.add_participation(participation)
                participation.news_url = comment.news_url
                participation.last_comment_at = now
                participation.comment_count = (participation.comment_count or 0) + 1

            # 3. 토론 문서 카운터 및 고유 참여자
            discussion = self.discussion_repo.get_discussion(comment.discussion_id)
            if discussion is not None:
                discussion.comment_count = (discussion.comment_count or 0) + 1
                discussion.last_activity_at = now

                participants = list(discussion.participants or [])
                if uid not in participants:
                    discussion.participants = participants + [uid]
                    discussion.participant_count = (discussion.participant_count or 0) + 1

        try:
            run_transaction(
                self.db,
                work,
                max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
                name="onCommentCreated",
            )
        except BaseAPIException as e:
            logger.error(f"Failed to process comment creation {comment_id}: {e}")
            return False

        logger.info(f"Comment created: {comment_id}")
        return True

    def refresh_popular_discussions(self) -> Optional[int]:
        """
        인기 토론 캐시 갱신

        Returns:
            Optional[int]: 캐시에 저장된 항목 수 (실패 시 None)
        """
        limit = self.settings.POPULAR_DISCUSSIONS_LIMIT

        def work(db: Session) -> int:
            discussions = self.discussion_repo.top_by_participants(limit)
            items = [
                PopularDiscussionItem(
                    id=d.id,
                    title=d.title,
                    news_url=d.news_url,
                    participant_count=d.participant_count or 0,
                    comment_count=d.comment_count or 0,
                    category=d.category,
                    image_url=d.image_url,
                    source=d.source,
                    last_activity_at=ensure_utc(d.last_activity_at),
                ).model_dump(mode="json", by_alias=True)
                for d in discussions
            ]
            cache = self.discussion_repo.save_popular_cache(items)
            cache.updated_at = self._now()
            return len(items)

        try:
            count = run_transaction(
                self.db,
                work,
                max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
                name="updatePopularDiscussions",
            )
        except BaseAPIException as e:
            logger.error(f"Failed to update popular discussions: {e}")
            return None

        logger.info(f"Updated popular discussions cache: {count} items")
        return count

    def get_popular_discussions(self) -> PopularDiscussionsResponse:
        cache = self.discussion_repo.get_popular_cache()
        if cache is None:
            return PopularDiscussionsResponse(items=[])
        return PopularDiscussionsResponse(
            items=[PopularDiscussionItem.model_validate(item) for item in cache.items],
            updated_at=ensure_utc(cache.updated_at),
        )
