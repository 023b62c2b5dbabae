"""
배치 작업 라우터

스케줄러(EventBridge 등)가 주기적으로 호출하는 엔드포인트
"""

import logging

from fastapi import APIRouter, Depends

from ledgerapi.deps import get_discussion_service
from ledgerapi.schemas.discussion import RefreshPopularDiscussionsResponse
from ledgerapi.services.discussion_service import DiscussionService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/batch",
    tags=["batch"],
)


@router.post(
    "/popular-discussions/refresh",
    response_model=RefreshPopularDiscussionsResponse,
)
def refresh_popular_discussions(
    discussion_service: DiscussionService = Depends(get_discussion_service),
) -> RefreshPopularDiscussionsResponse:
    """
    인기 토론 캐시 재계산

    실패해도 이전 캐시는 그대로 남으며 200 을 반환합니다 (refreshed=false).
    """
    count = discussion_service.refresh_popular_discussions()
    if count is None:
        logger.warning("Popular discussions refresh failed; previous cache kept")
        return RefreshPopularDiscussionsResponse(refreshed=False, item_count=0)
    return RefreshPopularDiscussionsResponse(refreshed=True, item_count=count)
