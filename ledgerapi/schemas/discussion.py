from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ledgerapi.schemas.account import CamelModel


class CreateCommentRequest(CamelModel):
    uid: str = Field(..., min_length=1)
    discussion_id: str = Field(..., min_length=1, max_length=64)
    news_url: Optional[str] = None
    content: str = Field(..., min_length=1, max_length=2000)


class CreateCommentResponse(CamelModel):
    success: bool = True
    comment_id: str


class PopularDiscussionItem(CamelModel):
    """캐시에 저장되는 인기 토론 요약"""

    id: str
    title: str
    news_url: Optional[str] = None
    participant_count: int = 0
    comment_count: int = 0
    category: Optional[str] = None
    image_url: Optional[str] = None
    source: Optional[str] = None
    last_activity_at: Optional[datetime] = None


class PopularDiscussionsResponse(CamelModel):
    success: bool = True
    items: List[PopularDiscussionItem]
    updated_at: Optional[datetime] = None


class RefreshPopularDiscussionsResponse(CamelModel):
    success: bool = True
    refreshed: bool
    item_count: int = 0
