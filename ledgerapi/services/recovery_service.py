"""
계정 복구 서비스

복구 코드 발급과, 복구 코드를 이용한 새 기기로의 계정 이전을 담당합니다.

계정 이전은 두 단계입니다:
1. (원자적) 새 계정 생성 + 원본 계정 status=transferred
   + 출석 요약 싱글톤과 즐겨찾기 복사
2. (best-effort) 원장/출석 기록을 배치 단위로 새 계정에 복사

2단계는 1단계 커밋 이후에 실행되며, 대상에 이미 있는 키는 건너뛰는
insert-if-absent 방식이라 여러 번 실행해도 새 계정에서 이후 생긴 기록을 덮어쓰지
않습니다. 중간에 실패하면 새 계정의 잔액/연속 출석은 정확하지만 이력이 일부 빠질 수
있고, copy_transferred_data 를 다시 실행해 채울 수 있습니다.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerapi.config import Settings
from ledgerapi.core.exceptions import (
    AlreadyExistsError,
    InternalServerError,
    InvalidArgumentError,
    NotFoundError,
)
from ledgerapi.core.security import IdentityResolver
from ledgerapi.database.transaction import run_transaction
from ledgerapi.models.account import Account as AccountModel, AccountStatus
from ledgerapi.models.attendance import DailyAttendance
from ledgerapi.models.favorite import Favorite
from ledgerapi.models.ledger import LedgerEntry
from ledgerapi.repositories.account_repository import AccountRepository
from ledgerapi.repositories.attendance_repository import AttendanceRepository
from ledgerapi.repositories.favorites_repository import FavoritesRepository
from ledgerapi.repositories.ledger_repository import LedgerRepository
from ledgerapi.schemas.recovery import (
    RecoveryCodeResponse,
    TransferAccountResponse,
    TransferredData,
)
from ledgerapi.services.registration_service import validate_device_id
from ledgerapi.utils.timezone_utils import get_kst_now

logger = logging.getLogger(__name__)


class RecoveryService:
    """복구 코드 발급 및 계정 이전 서비스"""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        identity: Optional[IdentityResolver] = None,
        clock: Callable[[], datetime] = get_kst_now,
    ):
        self.db = db
        self.settings = settings
        self.identity = identity or IdentityResolver.from_settings(settings)
        self.clock = clock
        self.account_repo = AccountRepository(db)
        self.ledger_repo = LedgerRepository(db)
        self.attendance_repo = AttendanceRepository(db)
        self.favorites_repo = FavoritesRepository(db)

    def get_or_create_recovery_code(self, uid: str) -> RecoveryCodeResponse:
        """
        복구 코드 조회 또는 발급 (멱등)

        이미 발급된 코드가 있으면 그대로 반환합니다. 새 코드는 지금까지 발급된
        모든 코드(이전 완료 계정 포함)와 겹치지 않을 때까지 최대
        RECOVERY_CODE_MAX_ATTEMPTS 번 생성합니다.
        """
        if not uid:
            raise InvalidArgumentError("UID is required")

        max_attempts = self.settings.RECOVERY_CODE_MAX_ATTEMPTS

        def work(db: Session) -> RecoveryCodeResponse:
            account = self.account_repo.get_model(uid)
            if account is None:
                raise NotFoundError("User not found")

            if account.recovery_code:
                return RecoveryCodeResponse(
                    recovery_code=account.recovery_code, is_new=False
                )

            for attempt in range(1, max_attempts + 1):
                candidate = self.identity.new_recovery_code()
                if not self.account_repo.recovery_code_exists(candidate):
                    account.recovery_code = candidate
                    return RecoveryCodeResponse(recovery_code=candidate, is_new=True)
                logger.warning(
                    f"Recovery code collision on attempt {attempt}, retrying..."
                )

            logger.error(
                f"Failed to generate unique recovery code after {max_attempts} attempts"
            )
            raise InternalServerError("Failed to generate recovery code")

        result = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="getOrCreateRecoveryCode",
        )
        if result.is_new:
            logger.info(f"Issued recovery code for account {uid}")
        return result

    def transfer_account(
        self,
        recovery_code: str,
        new_device_id: str,
        platform: Optional[str] = None,
        app_version: Optional[str] = None,
    ) -> TransferAccountResponse:
        """
        복구 코드로 계정을 새 기기로 이전

        Raises:
            InvalidArgumentError: 복구 코드 누락 또는 잘못된 deviceId
            NotFoundError: 코드와 일치하는 활성 계정 없음 (이미 이전된 계정 포함)
            AlreadyExistsError: 새 기기에 이미 활성 계정이 있음
        """
        if not recovery_code:
            raise InvalidArgumentError("Recovery code is required")
        validate_device_id(new_device_id, self.settings.DEVICE_ID_MIN_LENGTH)

        code = self.identity.normalize_recovery_code(recovery_code)
        new_fingerprint = self.identity.fingerprint(new_device_id)
        source_ids: List[str] = []

        def work(db: Session) -> Tuple[str, AccountModel, bool]:
            source = self.account_repo.find_active_by_recovery_code_model(code)
            # 충돌 후 재시도에서 코드가 다른 계정을 가리키면 경쟁 이전이 원본을 이미 은퇴시킨 것
            if source is None or (source_ids and source_ids[0] != source.id):
                raise NotFoundError("Invalid recovery code")
            source_ids.append(source.id)

            if self.account_repo.find_active_by_fingerprint_model(new_fingerprint):
                raise AlreadyExistsError(
                    "This device already has an active account. Log out first."
                )

            now = self.clock().astimezone(timezone.utc)
            new_id = self.identity.new_identity()

            # 원본을 먼저 은퇴시켜야 활성 복구 코드 유니크 인덱스와 충돌하지 않음
            source.status = AccountStatus.TRANSFERRED.value
            source.transferred_to = new_id
            source.transferred_at = now
            db.flush()

            new_account = AccountModel(
                id=new_id,
                device_fingerprint=new_fingerprint,
                nickname=source.nickname,
                token_balance=source.token_balance,
                favorite_count=source.favorite_count,
                comment_count=source.comment_count,
                ledger_sequence=source.ledger_sequence,
                status=AccountStatus.ACTIVE.value,
                recovery_code=source.recovery_code,
                platform=platform,
                app_version=app_version,
                last_platform=platform,
                last_app_version=app_version,
                created_at=now,
                last_login_at=now,
                transferred_from=source.id,
            )
            self.account_repo.add(new_account)

            # 연속 출석과 즐겨찾기 수는 계정 필드와 함께 원자적으로 옮김
            summary_copied = self.attendance_repo.copy_summary(source.id, new_id)
            for favorite in self.favorites_repo.list_by_account(source.id):
                db.add(
                    Favorite(
                        account_id=new_id,
                        news_id=favorite.news_id,
                        news_data=favorite.news_data,
                        created_at=favorite.created_at,
                    )
                )
            return source.id, new_account, summary_copied

        source_id, new_account, summary_copied = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="transferAccountData",
        )
        logger.info(f"✅ Transferred account {source_id} -> {new_account.id}")

        transferred = self.copy_transferred_data(source_id, new_account.id)
        transferred.attendance_summary = summary_copied

        return TransferAccountResponse(
            new_uid=new_account.id,
            previous_uid=source_id,
            nickname=new_account.nickname,
            token_count=new_account.token_balance,
            transferred_data=transferred,
        )

    def copy_transferred_data(self, source_id: str, target_id: str) -> TransferredData:
        """
        원본 계정의 원장/출석 기록을 새 계정으로 배치 복사 (best-effort, 멱등)

        대상에 같은 키(원장 순번, 출석 날짜)가 이미 있으면 건너뜁니다. 각 배치는
        별도로 커밋되며, 반환값의 개수는 이번 실행에서 새로 복사된 건수입니다.
        실패는 로그만 남기고 copy_completed=False 로 보고하며 예외를 전파하지 않습니다.
        """
        batch_size = self.settings.TRANSFER_COPY_BATCH_SIZE
        result = TransferredData()

        try:
            for batch in self.ledger_repo.iter_batches(source_id, batch_size):
                copied = 0
                for entry in batch:
                    if self.db.get(LedgerEntry, (target_id, entry.sequence)) is not None:
                        continue
                    self.db.add(
                        LedgerEntry(
                            account_id=target_id,
                            sequence=entry.sequence,
                            kind=entry.kind,
                            amount=entry.amount,
                            balance_after=entry.balance_after,
                            description=entry.description,
                            created_at=entry.created_at,
                        )
                    )
                    copied += 1
                self.db.commit()
                result.token_history += copied

            for batch in self.attendance_repo.iter_record_batches(source_id, batch_size):
                copied = 0
                for record in batch:
                    if self.attendance_repo.has_record(target_id, record.attendance_date):
                        continue
                    self.attendance_repo.add_record(
                        DailyAttendance(
                            account_id=target_id,
                            attendance_date=record.attendance_date,
                            reward_amount=record.reward_amount,
                            day_of_week=record.day_of_week,
                            consecutive_days=record.consecutive_days,
                            is_weekend=record.is_weekend,
                            created_at=record.created_at,
                        )
                    )
                    copied += 1
                self.db.commit()
                result.attendance_records += copied

            result.copy_completed = True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                f"Sub-record copy {source_id} -> {target_id} incomplete: {type(e).__name__}: {str(e)}"
            )

        logger.info(
            f"Copied sub-records {source_id} -> {target_id}: "
            f"history={result.token_history}, attendance={result.attendance_records}, "
            f"completed={result.copy_completed}"
        )
        return result
