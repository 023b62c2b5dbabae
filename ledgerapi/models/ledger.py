"""
토큰 원장 데이터 모델

계정 토큰의 모든 변동을 기록하는 추가 전용(append-only) 원장입니다.

원칙:
1. 불변성: 한번 생성된 항목은 수정/삭제되지 않음
2. 정합성: n번째 항목의 balance_after = (n-1)번째 balance_after + amount
3. 순서: sequence 는 계정별로 1부터 증가하며 accounts.ledger_sequence 와 같은
   트랜잭션에서 발급됨
"""

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from ledgerapi.models.base import BaseModel


class LedgerKind:
    """원장 항목 분류 태그"""

    WELCOME_BONUS = "welcome_bonus"
    DAILY_ATTENDANCE = "daily_attendance"


class LedgerEntry(BaseModel):
    __tablename__ = "ledger_history"
    __table_args__ = (
        PrimaryKeyConstraint("account_id", "sequence", name="pk_ledger_history"),
    )

    account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    # 변동량 - 양수면 지급, 음수면 차감
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # 이 항목 적용 후 잔액
    balance_after: Mapped[int] = mapped_column(BigInteger, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
