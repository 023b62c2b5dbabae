"""
기기 등록 서비스

기기 지문으로 기존 활성 계정을 찾거나, 기기별 생성 한도 안에서 새 계정을 발급합니다.

동시성:
- 같은 지문으로 동시에 등록하면 두 트랜잭션 모두 "계정 없음"을 읽을 수 있지만,
  활성 지문 부분 유니크 인덱스 때문에 나중에 커밋하는 쪽은 IntegrityError 로 실패합니다.
- run_transaction 이 재시도하면서 승자의 계정을 읽고 "기존 계정" 경로로 돌아갑니다.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ledgerapi.config import Settings
from ledgerapi.core.exceptions import InvalidArgumentError, ResourceExhaustedError
from ledgerapi.core.security import IdentityResolver
from ledgerapi.database.transaction import run_transaction
from ledgerapi.models.account import Account as AccountModel, AccountStatus
from ledgerapi.models.ledger import LedgerKind
from ledgerapi.repositories.account_repository import AccountRepository
from ledgerapi.repositories.device_creation_repository import DeviceCreationRepository
from ledgerapi.repositories.ledger_repository import LedgerRepository
from ledgerapi.schemas.account import RegisterDeviceResponse
from ledgerapi.utils.timezone_utils import add_years, get_kst_now

logger = logging.getLogger(__name__)


def validate_device_id(device_id: Optional[str], min_length: int) -> str:
    """deviceId 누락/길이 검증"""
    if not device_id or len(device_id) < min_length:
        raise InvalidArgumentError("Invalid device ID")
    return device_id


class RegistrationService:
    """기기 등록 및 UID 발급을 담당하는 서비스"""

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
        self.device_repo = DeviceCreationRepository(db)

    def register_device(
        self,
        device_id: str,
        platform: Optional[str] = None,
        app_version: Optional[str] = None,
    ) -> RegisterDeviceResponse:
        """
        기기 등록 (resolve-or-register)

        Args:
            device_id: 클라이언트 기기 식별자
            platform: 플랫폼
            app_version: 앱 버전

        Returns:
            RegisterDeviceResponse: 계정 ID, 신규 여부, 닉네임, 토큰 잔액

        Raises:
            InvalidArgumentError: deviceId 가 없거나 최소 길이 미만
            ResourceExhaustedError: 기간 내 기기별 계정 생성 한도 초과
        """
        validate_device_id(device_id, self.settings.DEVICE_ID_MIN_LENGTH)
        fingerprint = self.identity.fingerprint(device_id)

        def work(db: Session) -> RegisterDeviceResponse:
            now = self.clock().astimezone(timezone.utc)

            existing = self.account_repo.find_active_by_fingerprint_model(fingerprint)
            if existing:
                existing.last_login_at = now
                existing.last_platform = platform
                existing.last_app_version = app_version
                return RegisterDeviceResponse(
                    uid=existing.id,
                    is_new_user=False,
                    nickname=existing.nickname,
                    token_count=existing.token_balance,
                )

            self._check_creation_quota(fingerprint, now)

            account = AccountModel(
                id=self.identity.new_identity(),
                device_fingerprint=fingerprint,
                nickname=self._default_nickname(now),
                token_balance=0,
                favorite_count=0,
                comment_count=0,
                ledger_sequence=0,
                status=AccountStatus.ACTIVE.value,
                platform=platform,
                app_version=app_version,
                last_platform=platform,
                last_app_version=app_version,
                created_at=now,
                last_login_at=now,
            )
            self.account_repo.add(account)
            self.ledger_repo.apply_delta(
                account,
                self.settings.WELCOME_BONUS_TOKENS,
                LedgerKind.WELCOME_BONUS,
                "가입 축하 토큰",
                created_at=now,
            )
            self.device_repo.append(fingerprint, account.id, now)

            return RegisterDeviceResponse(
                uid=account.id,
                is_new_user=True,
                nickname=account.nickname,
                token_count=account.token_balance,
            )

        result = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="registerDevice",
        )

        if result.is_new_user:
            logger.info(
                f"✅ Registered new account {result.uid} for device {fingerprint[:12]}"
            )
        else:
            logger.info(f"Device {fingerprint[:12]} resolved to account {result.uid}")
        return result

    def _check_creation_quota(self, fingerprint: str, now: datetime) -> None:
        """최근 기간 내 생성 이력이 한도 이상이면 ResourceExhausted"""
        window = timedelta(days=self.settings.DEVICE_CREATION_WINDOW_DAYS)
        window_start = now - window

        recent = [
            created_at
            for created_at in self.device_repo.list_created_at(fingerprint)
            if created_at > window_start
        ]
        if len(recent) < self.settings.MAX_ACCOUNTS_PER_DEVICE:
            return

        retry_after = add_years(recent[0], 1)
        logger.warning(
            f"Device {fingerprint[:12]} exceeded creation quota ({len(recent)} in window)"
        )
        raise ResourceExhaustedError(
            "Account creation limit reached for this device",
            details={
                "recentCreations": len(recent),
                "limit": self.settings.MAX_ACCOUNTS_PER_DEVICE,
                "retryAfter": retry_after.isoformat(),
            },
        )

    def _default_nickname(self, now: datetime) -> str:
        return f"{self.settings.NICKNAME_PREFIX}{int(now.timestamp() * 1000) % 100000:05d}"
