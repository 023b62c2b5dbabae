"""
출석 보상 서비스

- 기준 날짜: KST(UTC+9) 달력 날짜 (호출자 로컬 날짜가 아님)
- 보상: 평일 10, 토/일 30 (설정값)
- 하루 1회: (계정, 날짜) 복합 기본키. 동시 요청 중 하나만 커밋되고 나머지는
  재시도에서 이미 존재하는 기록을 보고 AlreadyExists 로 끝납니다.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable

from sqlalchemy.orm import Session

from ledgerapi.config import Settings
from ledgerapi.core.exceptions import AlreadyExistsError, NotFoundError
from ledgerapi.database.transaction import run_transaction
from ledgerapi.models.attendance import DailyAttendance
from ledgerapi.models.ledger import LedgerKind
from ledgerapi.repositories.account_repository import AccountRepository
from ledgerapi.repositories.attendance_repository import AttendanceRepository
from ledgerapi.repositories.ledger_repository import LedgerRepository
from ledgerapi.schemas.attendance import (
    AttendanceStatusResponse,
    AttendanceSummary,
    ClaimDailyRewardResponse,
)
from ledgerapi.utils.timezone_utils import (
    days_between,
    get_kst_now,
    is_weekend,
    to_kst_date,
)

logger = logging.getLogger(__name__)


def next_streak(summary: AttendanceSummary, today: date) -> int:
    """
    오늘 출석 시 연속 출석 일수

    - 이전 기록 없음 → 1
    - 어제 출석 → 이전 연속 + 1
    - 오늘 이미 출석 → AlreadyExists
    - 이틀 이상 공백 → 1
    - 마지막 출석일이 오늘보다 미래(서버 시계 역행) → 1 로 초기화
    """
    if summary.last_date is None:
        return 1

    delta = days_between(summary.last_date, today)
    if delta == 1:
        return summary.current_streak + 1
    if delta == 0:
        raise AlreadyExistsError("Already claimed today")
    if delta < 0:
        logger.warning(
            f"Last attendance date {summary.last_date} is after today {today}; resetting streak"
        )
    return 1


class AttendanceService:
    """일일 출석 보상 서비스"""

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
        self.attendance_repo = AttendanceRepository(db)

    def reward_for(self, day: date) -> int:
        if is_weekend(day):
            return self.settings.WEEKEND_ATTENDANCE_REWARD
        return self.settings.WEEKDAY_ATTENDANCE_REWARD

    def claim_daily_reward(self, uid: str) -> ClaimDailyRewardResponse:
        """
        오늘 출석 보상 지급

        하나의 트랜잭션에서 잔액 증가 + 원장 기록 + 오늘 출석 기록 + 요약 갱신을 수행합니다.

        Raises:
            NotFoundError: 계정 없음 또는 이전 완료된 계정
            AlreadyExistsError: 오늘(KST) 이미 출석
        """

        def work(db: Session) -> ClaimDailyRewardResponse:
            now = self.clock()
            today = to_kst_date(now)

            account = self.account_repo.get_active_model(uid)
            if account is None:
                raise NotFoundError("User not found")

            if self.attendance_repo.has_record(uid, today):
                raise AlreadyExistsError(
                    "Already claimed today", details={"date": today.isoformat()}
                )

            summary = self.attendance_repo.get_summary(uid)
            streak = next_streak(summary, today)
            weekend = is_weekend(today)
            reward = self.reward_for(today)

            entry = self.ledger_repo.apply_delta(
                account,
                reward,
                LedgerKind.DAILY_ATTENDANCE,
                f"{today.isoformat()} 출석 보상",
                created_at=now.astimezone(timezone.utc),
            )
            self.attendance_repo.add_record(
                DailyAttendance(
                    account_id=uid,
                    attendance_date=today,
                    reward_amount=reward,
                    day_of_week=today.weekday(),
                    consecutive_days=streak,
                    is_weekend=weekend,
                )
            )
            updated = AttendanceSummary(
                current_streak=streak,
                max_streak=max(streak, summary.max_streak),
                total_days=summary.total_days + 1,
                last_date=today,
            )
            self.attendance_repo.save_summary(uid, updated)

            return ClaimDailyRewardResponse(
                reward_tokens=reward,
                new_balance=entry.balance_after,
                consecutive_days=streak,
                total_days=updated.total_days,
                is_weekend=weekend,
            )

        result = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="claimDailyReward",
        )
        logger.info(
            f"Account {uid} claimed {result.reward_tokens} tokens (streak={result.consecutive_days})"
        )
        return result

    def get_attendance_status(self, uid: str) -> AttendanceStatusResponse:
        """오늘 출석 여부와 연속 출석 요약 조회 (읽기 전용)"""
        today = to_kst_date(self.clock())

        if not self.account_repo.exists({"id": uid}):
            raise NotFoundError("User not found")

        summary = self.attendance_repo.get_summary(uid)
        return AttendanceStatusResponse(
            has_claimed_today=self.attendance_repo.has_record(uid, today),
            today_date=today,
            current_streak=summary.current_streak,
            max_streak=summary.max_streak,
            total_days=summary.total_days,
            last_attendance_date=summary.last_date,
        )
