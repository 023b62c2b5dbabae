"""
즐겨찾기 뉴스 모델

계정과 뉴스 사이의 연결 테이블. 복합 기본키로 계정당 같은 뉴스는 한 번만 저장됩니다.
"""

from typing import Optional

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from ledgerapi.models.base import BaseModel


class Favorite(BaseModel):
    __tablename__ = "favorites"
    __table_args__ = (
        PrimaryKeyConstraint("account_id", "news_id", name="pk_favorites"),
    )

    account_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        comment="Reference to account who favorited the news",
    )
    news_id: Mapped[str] = mapped_column(String(255), nullable=False)
    news_data: Mapped[Optional[dict]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=True
    )
