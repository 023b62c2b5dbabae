from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ledgerapi.models.discussion import (
    Comment,
    Discussion,
    ParticipatedDiscussion,
    PopularDiscussionCache,
)

POPULAR_DISCUSSIONS_CACHE_KEY = "popularDiscussions"


class DiscussionRepository:
    """토론/댓글/인기 토론 캐시 리포지토리"""

    def __init__(self, db: Session):
        self.db = db

    def get_discussion(self, discussion_id: str) -> Optional[Discussion]:
        return self.db.get(Discussion, discussion_id)

    def get_comment(self, comment_id: str) -> Optional[Comment]:
        return self.db.get(Comment, comment_id)

    def add_comment(self, comment: Comment) -> Comment:
        self.db.add(comment)
        return comment

    def get_participation(
        self, account_id: str, discussion_id: str
    ) -> Optional[ParticipatedDiscussion]:
        return self.db.get(ParticipatedDiscussion, (account_id, discussion_id))

    def add_participation(self, participation: ParticipatedDiscussion) -> None:
        self.db.add(participation)

    def top_by_participants(self, limit: int) -> List[Discussion]:
        return (
            self.db.query(Discussion)
            .order_by(desc(Discussion.participant_count))
            .limit(limit)
            .all()
        )

    def get_popular_cache(self) -> Optional[PopularDiscussionCache]:
        return self.db.get(PopularDiscussionCache, POPULAR_DISCUSSIONS_CACHE_KEY)

    def save_popular_cache(self, items: list) -> PopularDiscussionCache:
        cache = self.get_popular_cache()
        if cache is None:
            cache = PopularDiscussionCache(cache_key=POPULAR_DISCUSSIONS_CACHE_KEY)
            self.db.add(cache)
        cache.items = items
        return cache
