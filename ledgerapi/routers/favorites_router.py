"""
Favorites Router
"""

from fastapi import APIRouter, Depends

from ledgerapi.deps import get_favorites_service
from ledgerapi.schemas.favorites import ToggleFavoriteRequest, ToggleFavoriteResponse
from ledgerapi.services.favorites_service import FavoritesService

router = APIRouter(tags=["favorites"])


@router.post("/toggleFavorite", response_model=ToggleFavoriteResponse)
def toggle_favorite(
    request: ToggleFavoriteRequest,
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> ToggleFavoriteResponse:
    """Add the news item to favorites, or remove it if already favorited."""
    return favorites_service.toggle_favorite(
        uid=request.uid, news_id=request.news_id, news_data=request.news_data
    )
