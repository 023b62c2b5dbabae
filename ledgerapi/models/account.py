"""
계정(Account) 데이터 모델

기기 지문(device fingerprint)에 묶인 익명 계정의 루트 문서입니다.
토큰 잔액은 ledger_history 원장과 같은 트랜잭션 안에서만 변경됩니다.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from ledgerapi.models.base import BaseModel, VersionedMixin


class AccountStatus(str, Enum):
    """계정 생명주기 상태"""

    ACTIVE = "active"
    TRANSFERRED = "transferred"  # 다른 기기로 이전되어 은퇴한 계정


class Account(BaseModel, VersionedMixin):
    __tablename__ = "accounts"
    __table_args__ = (
        # 활성 계정은 기기 지문당 하나만 허용
        Index(
            "uq_accounts_active_fingerprint",
            "device_fingerprint",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        # 복구 코드는 활성 계정 사이에서 유일
        Index(
            "uq_accounts_active_recovery_code",
            "recovery_code",
            unique=True,
            postgresql_where=text("status = 'active' AND recovery_code IS NOT NULL"),
            sqlite_where=text("status = 'active' AND recovery_code IS NOT NULL"),
        ),
        Index("idx_accounts_recovery_code", "recovery_code"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    device_fingerprint: Mapped[str] = mapped_column(String(64), nullable=False)
    nickname: Mapped[str] = mapped_column(String(100), nullable=False)
    token_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    favorite_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 마지막으로 발급된 원장 순번 (ledger_history.sequence)
    ledger_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountStatus.ACTIVE.value
    )
    recovery_code: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    platform: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    app_version: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    last_platform: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    last_app_version: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    transferred_from: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    transferred_to: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    transferred_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self):
        return f"<Account(id={self.id}, status={self.status}, balance={self.token_balance})>"

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE.value
