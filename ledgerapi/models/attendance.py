"""
출석 데이터 모델

- DailyAttendance: 계정당 KST 날짜별 1건 (복합 기본키가 하루 1회 지급을 보장)
- AttendanceSummary: 계정당 1건, 출석 성공 시마다 한 번 갱신되는 연속 출석 요약
"""

from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from ledgerapi.models.base import BaseModel, VersionedMixin


class DailyAttendance(BaseModel):
    __tablename__ = "daily_attendance"
    __table_args__ = (
        PrimaryKeyConstraint(
            "account_id", "attendance_date", name="pk_daily_attendance"
        ),
    )

    account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    reward_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=월 ... 6=일
    consecutive_days: Mapped[int] = mapped_column(Integer, nullable=False)
    is_weekend: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class AttendanceSummary(BaseModel, VersionedMixin):
    __tablename__ = "attendance_summary"

    account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True
    )
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
