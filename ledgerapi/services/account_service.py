import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ledgerapi.config import Settings
from ledgerapi.core.exceptions import InvalidArgumentError, NotFoundError
from ledgerapi.core.security import IdentityResolver
from ledgerapi.database.transaction import run_transaction
from ledgerapi.repositories.account_repository import AccountRepository
from ledgerapi.schemas.account import (
    Account as AccountSchema,
    UpdateNicknameResponse,
    VerifyUIDResponse,
)
from ledgerapi.utils.timezone_utils import get_kst_now

logger = logging.getLogger(__name__)


class VerifyFailureReason:
    USER_NOT_FOUND = "user_not_found"
    DEVICE_MISMATCH = "device_mismatch"
    ACCOUNT_INACTIVE = "account_inactive"


class AccountService:
    """계정 조회/검증/프로필 변경 서비스"""

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

    def get_account(self, uid: str) -> AccountSchema:
        account = self.account_repo.get_by_id(uid)
        if not account:
            raise NotFoundError(f"User not found: {uid}")
        return account

    def verify_uid(self, uid: str, device_id: str) -> VerifyUIDResponse:
        """
        클라이언트가 저장한 UID 가 이 기기의 유효한 활성 계정인지 확인

        검사 순서: 계정 존재 → 기기 지문 일치 → 활성 상태.
        성공 시 마지막 로그인 시간을 갱신합니다.
        """
        if not uid or not device_id:
            raise InvalidArgumentError("UID and deviceId are required")

        fingerprint = self.identity.fingerprint(device_id)

        def work(db: Session) -> VerifyUIDResponse:
            account = self.account_repo.get_model(uid)
            if account is None:
                return VerifyUIDResponse(
                    valid=False, reason=VerifyFailureReason.USER_NOT_FOUND
                )
            if account.device_fingerprint != fingerprint:
                return VerifyUIDResponse(
                    valid=False, reason=VerifyFailureReason.DEVICE_MISMATCH
                )
            if not account.is_active:
                return VerifyUIDResponse(
                    valid=False, reason=VerifyFailureReason.ACCOUNT_INACTIVE
                )

            account.last_login_at = self.clock().astimezone(timezone.utc)
            return VerifyUIDResponse(
                valid=True,
                nickname=account.nickname,
                token_count=account.token_balance or 0,
                favorite_count=account.favorite_count or 0,
                comment_count=account.comment_count or 0,
            )

        result = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="verifyUID",
        )
        if not result.valid:
            logger.info(f"UID verification failed for {uid}: {result.reason}")
        return result

    def update_nickname(self, uid: str, nickname: str) -> UpdateNicknameResponse:
        """닉네임 변경 (길이 2~20자, 활성 계정만)"""
        if not uid or nickname is None:
            raise InvalidArgumentError("UID and nickname are required")

        nickname = nickname.strip()
        min_len = self.settings.NICKNAME_MIN_LENGTH
        max_len = self.settings.NICKNAME_MAX_LENGTH
        if len(nickname) < min_len or len(nickname) > max_len:
            raise InvalidArgumentError(
                f"Nickname must be {min_len}-{max_len} characters"
            )

        def work(db: Session) -> UpdateNicknameResponse:
            account = self.account_repo.get_active_model(uid)
            if account is None:
                raise NotFoundError(f"User not found: {uid}")
            account.nickname = nickname
            return UpdateNicknameResponse(nickname=nickname)

        result = run_transaction(
            self.db,
            work,
            max_attempts=self.settings.TRANSACTION_MAX_ATTEMPTS,
            name="updateNickname",
        )
        logger.info(f"Updated nickname for account {uid}")
        return result
