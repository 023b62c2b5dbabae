from fastapi import APIRouter, Depends

from ledgerapi.deps import get_discussion_service
from ledgerapi.schemas.discussion import (
    CreateCommentRequest,
    CreateCommentResponse,
    PopularDiscussionsResponse,
)
from ledgerapi.services.discussion_service import DiscussionService

router = APIRouter(tags=["discussions"])


@router.post("/createComment", response_model=CreateCommentResponse)
def create_comment(
    request: CreateCommentRequest,
    discussion_service: DiscussionService = Depends(get_discussion_service),
) -> CreateCommentResponse:
    """댓글 작성 - 저장 후 작성자/토론 카운터 갱신"""
    return discussion_service.create_comment(
        uid=request.uid,
        discussion_id=request.discussion_id,
        content=request.content,
        news_url=request.news_url,
    )


@router.get("/popularDiscussions", response_model=PopularDiscussionsResponse)
def get_popular_discussions(
    discussion_service: DiscussionService = Depends(get_discussion_service),
) -> PopularDiscussionsResponse:
    """캐시된 인기 토론 목록"""
    return discussion_service.get_popular_discussions()
