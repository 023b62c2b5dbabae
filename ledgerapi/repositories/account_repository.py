from typing import Optional

from sqlalchemy.orm import Session

from ledgerapi.models.account import Account as AccountModel, AccountStatus
from ledgerapi.schemas.account import Account as AccountSchema
from ledgerapi.repositories.base import BaseRepository


class AccountRepository(BaseRepository[AccountModel, AccountSchema]):
    """계정 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(AccountModel, AccountSchema, db)

    def find_active_by_fingerprint_model(
        self, device_fingerprint: str
    ) -> Optional[AccountModel]:
        """기기 지문으로 활성 계정 조회 (트랜잭션 내 수정용)"""
        return (
            self.db.query(self.model_class)
            .filter(
                self.model_class.device_fingerprint == device_fingerprint,
                self.model_class.status == AccountStatus.ACTIVE.value,
            )
            .first()
        )

    def find_active_by_fingerprint(
        self, device_fingerprint: str
    ) -> Optional[AccountSchema]:
        return self._to_schema(self.find_active_by_fingerprint_model(device_fingerprint))

    def find_active_by_recovery_code_model(
        self, recovery_code: str
    ) -> Optional[AccountModel]:
        """복구 코드로 활성 계정 조회 - 이전 완료된 계정은 매칭되지 않음"""
        return (
            self.db.query(self.model_class)
            .filter(
                self.model_class.recovery_code == recovery_code,
                self.model_class.status == AccountStatus.ACTIVE.value,
            )
            .first()
        )

    def recovery_code_exists(self, recovery_code: str) -> bool:
        """상태와 무관하게 한 번이라도 발급된 코드인지 확인"""
        return self.exists({"recovery_code": recovery_code})

    def get_active_model(self, account_id: str) -> Optional[AccountModel]:
        """활성 계정만 조회 - 이전 완료된 계정은 None"""
        account = self.get_model(account_id)
        if account is None or not account.is_active:
            return None
        return account
