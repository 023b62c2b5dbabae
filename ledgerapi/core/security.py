"""
기기 식별 및 계정 식별자 생성

- 기기 지문: 서버 비밀키로 HMAC-SHA256 한 값. 원본 deviceId 는 저장하지 않음
- 계정 ID: 16바이트 난수의 hex 문자열
- 복구 코드: 혼동되는 문자(I, O, 0, 1)를 뺀 32개 문자에서 뽑아 4자리씩 하이픈으로 묶음
"""

import hashlib
import hmac
import secrets
from typing import Optional

from ledgerapi.config import Settings, settings as default_settings

# 32 symbols: A-Z without I/O, digits 2-9
RECOVERY_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


class IdentityResolver:
    """기기 지문과 무작위 식별자를 만드는 순수 컴포넌트 (I/O 없음)"""

    def __init__(
        self,
        secret_key: str,
        recovery_code_length: int = 12,
        recovery_code_group_size: int = 4,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret = secret_key.encode("utf-8")
        self.recovery_code_length = recovery_code_length
        self.recovery_code_group_size = recovery_code_group_size

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "IdentityResolver":
        settings = settings or default_settings
        return cls(
            secret_key=settings.DEVICE_HASH_SECRET,
            recovery_code_length=settings.RECOVERY_CODE_LENGTH,
            recovery_code_group_size=settings.RECOVERY_CODE_GROUP_SIZE,
        )

    def fingerprint(self, device_id: str) -> str:
        """deviceId 의 HMAC-SHA256 hex digest"""
        return hmac.new(
            self._secret, device_id.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    @staticmethod
    def new_identity() -> str:
        return secrets.token_hex(16)

    def new_recovery_code(self) -> str:
        raw = "".join(
            secrets.choice(RECOVERY_CODE_ALPHABET)
            for _ in range(self.recovery_code_length)
        )
        return self._group(raw)

    def normalize_recovery_code(self, code: str) -> str:
        """사용자 입력 복구 코드를 저장 형식(대문자, 4자리 그룹)으로 정규화"""
        raw = "".join(ch for ch in code.upper() if ch.isalnum())
        return self._group(raw)

    def _group(self, raw: str) -> str:
        size = self.recovery_code_group_size
        return "-".join(raw[i:i + size] for i in range(0, len(raw), size))
