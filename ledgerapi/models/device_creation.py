"""
기기별 계정 생성 이력

계정과 독립적으로 기기 지문을 키로 보관되며, 계정이 이전/은퇴해도 삭제되지 않습니다.
기간 내 생성 횟수 제한(rate limit) 계산에만 사용됩니다.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from ledgerapi.models.base import BaseModel


class DeviceCreationEvent(BaseModel):
    __tablename__ = "device_creation_history"
    __table_args__ = (
        PrimaryKeyConstraint(
            "device_fingerprint", "account_id", name="pk_device_creation_history"
        ),
        Index("idx_device_creation_fingerprint", "device_fingerprint", "created_at"),
    )

    device_fingerprint: Mapped[str] = mapped_column(String(64), nullable=False)
    # 계정 삭제와 무관하게 남아야 하므로 외래키를 두지 않음
    account_id: Mapped[str] = mapped_column(String(32), nullable=False)
