from datetime import date
from typing import Iterator, List, Optional

from sqlalchemy import asc
from sqlalchemy.orm import Session

from ledgerapi.models.attendance import (
    AttendanceSummary as AttendanceSummaryModel,
    DailyAttendance as DailyAttendanceModel,
)
from ledgerapi.schemas.attendance import AttendanceSummary as AttendanceSummarySchema
from ledgerapi.repositories.base import BaseRepository


class AttendanceRepository(
    BaseRepository[AttendanceSummaryModel, AttendanceSummarySchema]
):
    """출석 기록/요약 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(AttendanceSummaryModel, AttendanceSummarySchema, db)

    def get_record(
        self, account_id: str, attendance_date: date
    ) -> Optional[DailyAttendanceModel]:
        return self.db.get(DailyAttendanceModel, (account_id, attendance_date))

    def has_record(self, account_id: str, attendance_date: date) -> bool:
        return self.get_record(account_id, attendance_date) is not None

    def get_summary(self, account_id: str) -> AttendanceSummarySchema:
        """요약 조회 - 기록이 없으면 기본값 요약"""
        summary = self.get_model(account_id)
        if summary is None:
            return AttendanceSummarySchema()
        return self._to_schema(summary)

    def add_record(self, record: DailyAttendanceModel) -> DailyAttendanceModel:
        self.db.add(record)
        return record

    def save_summary(
        self, account_id: str, summary: AttendanceSummarySchema
    ) -> AttendanceSummaryModel:
        """요약 싱글톤 덮어쓰기 (없으면 생성)"""
        model = self.get_model(account_id)
        if model is None:
            model = self.model_class(account_id=account_id)
            self.db.add(model)

        model.current_streak = summary.current_streak
        model.max_streak = summary.max_streak
        model.total_days = summary.total_days
        model.last_date = summary.last_date
        return model

    def copy_summary(self, source_id: str, target_id: str) -> bool:
        """
        원본 요약을 대상 계정의 요약으로 생성

        대상에 이미 요약이 있으면 덮어쓰지 않습니다 (이전 이후 대상의 출석이 우선).

        Returns:
            bool: 새로 생성했으면 True
        """
        source = self.get_model(source_id)
        if source is None or self.get_model(target_id) is not None:
            return False

        self.db.add(
            self.model_class(
                account_id=target_id,
                current_streak=source.current_streak,
                max_streak=source.max_streak,
                total_days=source.total_days,
                last_date=source.last_date,
            )
        )
        return True

    def iter_record_batches(
        self, account_id: str, batch_size: int
    ) -> Iterator[List[DailyAttendanceModel]]:
        """날짜 기준 배치 단위 조회 (계정 이전 복사용)"""
        last_date: Optional[date] = None
        while True:
            query = self.db.query(DailyAttendanceModel).filter(
                DailyAttendanceModel.account_id == account_id
            )
            if last_date is not None:
                query = query.filter(DailyAttendanceModel.attendance_date > last_date)
            batch = (
                query.order_by(asc(DailyAttendanceModel.attendance_date))
                .limit(batch_size)
                .all()
            )
            if not batch:
                return
            yield batch
            last_date = batch[-1].attendance_date
