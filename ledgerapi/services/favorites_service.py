"""
Favorites Service

즐겨찾기 토글과 계정의 favorite_count 갱신을 하나의 트랜잭션으로 처리합니다.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ledgerapi.config import Settings
from ledgerapi.core.exceptions import InvalidArgumentError, NotFoundError
from ledgerapi.database.transaction import run_transaction
from ledgerapi.repositories.account_repository import AccountRepository
from ledgerapi.repositories.favorites_repository import FavoritesRepository
from ledgerapi.schemas.favorites import ToggleFavoriteResponse

logger = logging.getLogger(__name__)


class FavoriteAction:
    ADDED = "added"
    REMOVED = "removed"


class FavoritesService:
    """Service for managing favorite news"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.account_repo = AccountRepository(db)
        self.favorites_repo = FavoritesRepository(db)

    def toggle_favorite(
        self,
        uid: str,
        news_id: str,
        news_data: Optional[Dict[str, Any]] = None,
    ) -> ToggleFavoriteResponse:
        """
        즐겨찾기 토글 - 있으면 해제, 없으면 추가

        Raises:
            InvalidArgumentError: uid/newsId 누락
            NotFoundError: 계정 없음 또는 이전 완료된 계정
        """
        if not uid or not news_id:
            raise InvalidArgumentError("UID and newsId are required")

        def work(db: Session) -> ToggleFavoriteResponse:
            account = self.account_repo.get_active_model(uid)
            if account is None:
                raise NotFoundError("User not found")

            favorite = self.favorites_repo.get_favorite(uid, news_id)
            if favorite is not None:
                self.favorites_repo.remove_favorite(favorite)
                account.favorite_count = max(0, (account.favorite_count or 0) - 1)
                action = FavoriteAction.REMOVED
            else:
                self.favorites_repo.add_favorite(uid, news_id, news_data)
                account.favorite_count = (account.favorite_count or 0) + 1
                action = FavoriteAction.ADDED

            return ToggleFavoriteResponse(
                action=action, favorite_count=account.favorite_count
            )

        result = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="toggleFavorite",
        )
        logger.info(f"Favorite {news_id} {result.action} for account {uid}")
        return result
