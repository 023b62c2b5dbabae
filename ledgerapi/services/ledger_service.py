"""
토큰 원장 서비스

잔액 변경은 계정 행과 원장 항목을 하나의 트랜잭션으로 기록합니다.
같은 계정에 대한 동시 변경은 계정 version 충돌로 직렬화되고(유실 갱신 방지),
서로 다른 계정 사이에는 충돌이 없습니다.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ledgerapi.config import Settings
from ledgerapi.core.exceptions import InvalidArgumentError, NotFoundError
from ledgerapi.database.transaction import run_transaction
from ledgerapi.repositories.account_repository import AccountRepository
from ledgerapi.repositories.ledger_repository import LedgerRepository
from ledgerapi.schemas.ledger import (
    LedgerIntegrityResponse,
    TokenHistoryResponse,
    UpdateTokensResponse,
)
from ledgerapi.utils.timezone_utils import get_kst_now

logger = logging.getLogger(__name__)

MAX_HISTORY_PAGE_SIZE = 100


class LedgerService:
    """토큰 지급/차감 및 원장 조회를 담당하는 서비스"""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        clock: Callable[[], datetime] = get_kst_now,
    ):
        self.db = db
        self.settings = settings
        self.clock = clock
        self.account_repo = AccountRepository(db)
        self.ledger_repo = LedgerRepository(db)

    def apply_delta(
        self,
        uid: str,
        amount: int,
        kind: str,
        description: Optional[str] = "",
    ) -> int:
        """
        토큰 잔액 변경

        Args:
            uid: 계정 ID
            amount: 변동량 (음수면 차감)
            kind: 원장 분류 태그
            description: 사유

        Returns:
            int: 변경 후 잔액

        Raises:
            InvalidArgumentError: uid/kind 누락
            NotFoundError: 계정 없음 또는 이전 완료된 계정
            InsufficientBalanceError: 잔액이 음수가 되는 차감 (FailedPrecondition)
        """
        if not uid or amount is None or not kind:
            raise InvalidArgumentError("UID, amount, and type are required")

        def work(db: Session) -> int:
            account = self.account_repo.get_active_model(uid)
            if account is None:
                raise NotFoundError("User not found")

            entry = self.ledger_repo.apply_delta(
                account,
                amount,
                kind,
                description or "",
                created_at=self.clock().astimezone(timezone.utc),
            )
            return entry.balance_after

        new_balance = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="updateTokens",
        )
        logger.info(
            f"Applied {amount:+d} tokens ({kind}) to account {uid}, balance={new_balance}"
        )
        return new_balance

    def update_tokens(
        self, uid: str, amount: int, kind: str, description: Optional[str] = ""
    ) -> UpdateTokensResponse:
        return UpdateTokensResponse(
            token_count=self.apply_delta(uid, amount, kind, description)
        )

    def get_token_history(
        self, uid: str, limit: int = 50, offset: int = 0
    ) -> TokenHistoryResponse:
        """최신순 원장 조회"""
        limit = min(limit, MAX_HISTORY_PAGE_SIZE)

        account = self.account_repo.get_by_id(uid)
        if not account:
            raise NotFoundError("User not found")

        total_count = self.ledger_repo.count({"account_id": uid})
        entries = self.ledger_repo.get_page(uid, limit=limit, offset=offset)

        return TokenHistoryResponse(
            balance=account.token_balance,
            entries=entries,
            total_count=total_count,
            has_next=offset + limit < total_count,
        )

    def verify_integrity(self, uid: str) -> LedgerIntegrityResponse:
        """
        원장 정합성 검증

        검증 방식:
        1. 순번 순서대로 amount 를 누적하며 각 항목의 balance_after 와 비교
        2. 누적 합계를 계정 문서의 토큰 잔액과 비교
        """
        account = self.account_repo.get_by_id(uid)
        if not account:
            raise NotFoundError("User not found")

        entries = self.ledger_repo.list_ordered(uid)

        running = 0
        first_broken: Optional[int] = None
        for entry in entries:
            running += entry.amount
            if first_broken is None and entry.balance_after != running:
                first_broken = entry.sequence

        status = (
            "OK"
            if first_broken is None and running == account.token_balance
            else "MISMATCH"
        )
        if status != "OK":
            logger.warning(
                f"Ledger mismatch for account {uid}: sum={running}, balance={account.token_balance}, first_broken={first_broken}"
            )

        return LedgerIntegrityResponse(
            status=status,
            uid=uid,
            calculated_balance=running,
            recorded_balance=account.token_balance,
            entry_count=len(entries),
            first_broken_sequence=first_broken,
        )
