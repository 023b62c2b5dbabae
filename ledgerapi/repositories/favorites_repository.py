"""
Favorites Repository
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ledgerapi.models.favorite import Favorite


class FavoritesRepository:
    """계정별 즐겨찾기 뉴스 리포지토리 (커밋은 호출자 트랜잭션에서)"""

    def __init__(self, db: Session):
        self.db = db

    def get_favorite(self, account_id: str, news_id: str) -> Optional[Favorite]:
        return self.db.get(Favorite, (account_id, news_id))

    def add_favorite(
        self, account_id: str, news_id: str, news_data: Optional[dict]
    ) -> Favorite:
        favorite = Favorite(account_id=account_id, news_id=news_id, news_data=news_data)
        self.db.add(favorite)
        return favorite

    def remove_favorite(self, favorite: Favorite) -> None:
        self.db.delete(favorite)

    def get_favorites_count(self, account_id: str) -> int:
        return (
            self.db.query(Favorite).filter(Favorite.account_id == account_id).count()
        )

    def list_by_account(self, account_id: str) -> List[Favorite]:
        return (
            self.db.query(Favorite)
            .filter(Favorite.account_id == account_id)
            .order_by(Favorite.news_id)
            .all()
        )
