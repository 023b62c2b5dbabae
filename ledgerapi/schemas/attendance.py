from datetime import date
from typing import Optional

from pydantic import Field

from ledgerapi.schemas.account import CamelModel


class AttendanceSummary(CamelModel):
    """연속 출석 요약 - 기록이 없으면 모든 값이 기본값"""

    current_streak: int = 0
    max_streak: int = 0
    total_days: int = 0
    last_date: Optional[date] = None


class AttendanceRequest(CamelModel):
    uid: str = Field(..., min_length=1)


class ClaimDailyRewardResponse(CamelModel):
    """출석 보상 지급 결과"""

    success: bool = True
    reward_tokens: int
    new_balance: int
    consecutive_days: int
    total_days: int
    is_weekend: bool


class AttendanceStatusResponse(CamelModel):
    """오늘 출석 여부 및 요약"""

    success: bool = True
    has_claimed_today: bool
    today_date: date
    current_streak: int
    max_streak: int
    total_days: int
    last_attendance_date: Optional[date] = None
