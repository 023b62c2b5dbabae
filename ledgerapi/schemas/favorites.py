"""
Favorites Schemas
"""

from typing import Any, Dict, Optional

from pydantic import Field

from ledgerapi.schemas.account import CamelModel


class ToggleFavoriteRequest(CamelModel):
    uid: str = Field(..., min_length=1)
    news_id: str = Field(..., min_length=1, max_length=255)
    news_data: Optional[Dict[str, Any]] = Field(None, description="즐겨찾기 시점 뉴스 스냅샷")


class ToggleFavoriteResponse(CamelModel):
    success: bool = True
    action: str = Field(..., description="added | removed")
    favorite_count: int
