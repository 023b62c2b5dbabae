from datetime import datetime
from typing import List

from sqlalchemy import asc
from sqlalchemy.orm import Session

from ledgerapi.models.device_creation import DeviceCreationEvent
from ledgerapi.utils.timezone_utils import ensure_utc


class DeviceCreationRepository:
    """기기별 계정 생성 이력 (추가만 가능, 삭제하지 않음)"""

    def __init__(self, db: Session):
        self.db = db

    def list_created_at(self, device_fingerprint: str) -> List[datetime]:
        """해당 기기의 계정 생성 시각 목록 (오래된 순, UTC)"""
        rows = (
            self.db.query(DeviceCreationEvent.created_at)
            .filter(DeviceCreationEvent.device_fingerprint == device_fingerprint)
            .order_by(asc(DeviceCreationEvent.created_at))
            .all()
        )
        return [ensure_utc(row.created_at) for row in rows]

    def append(
        self, device_fingerprint: str, account_id: str, created_at: datetime
    ) -> DeviceCreationEvent:
        event = DeviceCreationEvent(
            device_fingerprint=device_fingerprint,
            account_id=account_id,
            created_at=created_at,
        )
        self.db.add(event)
        return event
