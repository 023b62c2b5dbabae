"""
토큰 원장 리포지토리

잔액 갱신과 원장 기록은 항상 apply_delta 하나로만 수행됩니다:
1. 잔액 하한(0) 검증 - 부족하면 아무것도 쓰지 않고 실패
2. 계정 잔액/원장 순번 갱신 (계정 행의 version 이 함께 올라감)
3. balance_after 를 포함한 원장 항목 추가

커밋은 하지 않습니다. 호출자는 run_transaction 안에서 계정을 읽은 뒤 호출해야 하며,
같은 계정에 대한 동시 호출은 version 충돌로 직렬화됩니다.
"""

from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from ledgerapi.core.exceptions import InsufficientBalanceError
from ledgerapi.models.account import Account as AccountModel
from ledgerapi.models.ledger import LedgerEntry as LedgerEntryModel
from ledgerapi.schemas.ledger import LedgerEntry as LedgerEntrySchema
from ledgerapi.repositories.base import BaseRepository


class LedgerRepository(BaseRepository[LedgerEntryModel, LedgerEntrySchema]):
    """토큰 원장 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(LedgerEntryModel, LedgerEntrySchema, db)

    def apply_delta(
        self,
        account: AccountModel,
        amount: int,
        kind: str,
        description: str = "",
        created_at: Optional[datetime] = None,
    ) -> LedgerEntryModel:
        """
        계정 잔액에 amount 를 반영하고 원장 항목을 추가

        Args:
            account: 같은 트랜잭션에서 읽은 계정 모델
            amount: 변동량 (양수=지급, 음수=차감)
            kind: 원장 분류 태그
            description: 사유
            created_at: 기록 시각 (None 이면 모델 기본값)

        Returns:
            LedgerEntryModel: 추가된 원장 항목

        Raises:
            InsufficientBalanceError: 반영 후 잔액이 음수가 되는 경우
        """
        current_balance = account.token_balance or 0
        new_balance = current_balance + amount

        if new_balance < 0:
            raise InsufficientBalanceError(
                "Insufficient tokens",
                details={"balance": current_balance, "amount": amount},
            )

        sequence = (account.ledger_sequence or 0) + 1
        account.token_balance = new_balance
        account.ledger_sequence = sequence

        entry = self.model_class(
            account_id=account.id,
            sequence=sequence,
            kind=kind,
            amount=amount,
            balance_after=new_balance,
            description=description or "",
        )
        if created_at is not None:
            entry.created_at = created_at

        self.db.add(entry)
        return entry

    def get_page(
        self, account_id: str, limit: int = 50, offset: int = 0
    ) -> List[LedgerEntrySchema]:
        """최신순 원장 페이지"""
        instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.account_id == account_id)
            .order_by(desc(self.model_class.sequence))
            .limit(limit)
            .offset(offset)
            .all()
        )
        return [self._to_schema(instance) for instance in instances]

    def list_ordered(self, account_id: str) -> List[LedgerEntryModel]:
        """순번 오름차순 전체 원장 (정합성 검증용)"""
        return (
            self.db.query(self.model_class)
            .filter(self.model_class.account_id == account_id)
            .order_by(asc(self.model_class.sequence))
            .all()
        )

    def iter_batches(
        self, account_id: str, batch_size: int
    ) -> Iterator[List[LedgerEntryModel]]:
        """순번 기준 배치 단위 조회 (계정 이전 복사용)"""
        last_sequence = 0
        while True:
            batch = (
                self.db.query(self.model_class)
                .filter(
                    self.model_class.account_id == account_id,
                    self.model_class.sequence > last_sequence,
                )
                .order_by(asc(self.model_class.sequence))
                .limit(batch_size)
                .all()
            )
            if not batch:
                return
            yield batch
            last_sequence = batch[-1].sequence
