"""
토론/댓글 모델

댓글 생성 시 계정/토론 카운터를 갱신하는 트리거와 인기 토론 캐시 갱신 작업이
사용하는 테이블들입니다.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from ledgerapi.models.base import BaseModel, VersionedMixin

JSONType = JSON().with_variant(JSONB, "postgresql")


class Discussion(BaseModel, VersionedMixin):
    __tablename__ = "discussions"
    __table_args__ = (Index("idx_discussions_participant_count", "participant_count"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    news_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    participants: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)
    participant_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_activity_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Comment(BaseModel):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    discussion_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    account_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    news_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)


class ParticipatedDiscussion(BaseModel):
    __tablename__ = "participated_discussions"
    __table_args__ = (
        PrimaryKeyConstraint(
            "account_id", "discussion_id", name="pk_participated_discussions"
        ),
    )

    account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    discussion_id: Mapped[str] = mapped_column(String(64), nullable=False)
    news_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_comment_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class PopularDiscussionCache(BaseModel):
    """인기 토론 비정규화 캐시 (cache/popularDiscussions)"""

    __tablename__ = "popular_discussion_cache"

    cache_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    items: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
