from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """외부 호출 규약(camelCase)을 따르는 스키마 베이스"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Account(CamelModel):
    """계정 문서 스냅샷 (내부 전달용)"""

    id: str
    device_fingerprint: str
    nickname: str
    token_balance: int
    favorite_count: int = 0
    comment_count: int = 0
    status: str
    recovery_code: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    transferred_from: Optional[str] = None
    transferred_to: Optional[str] = None


class RegisterDeviceRequest(CamelModel):
    """기기 등록 요청"""

    device_id: str = Field(..., description="클라이언트 기기 식별자 (원본은 저장하지 않음)")
    platform: Optional[str] = Field(None, max_length=50, description="플랫폼 (ios, android)")
    app_version: Optional[str] = Field(None, max_length=50, description="앱 버전")


class RegisterDeviceResponse(CamelModel):
    """기기 등록 응답"""

    success: bool = True
    uid: str = Field(..., description="계정 ID")
    is_new_user: bool = Field(..., description="이번 호출로 새 계정이 생성되었는지 여부")
    nickname: str
    token_count: int


class VerifyUIDRequest(CamelModel):
    uid: str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=1)


class VerifyUIDResponse(CamelModel):
    """UID 검증 응답 - 실패 시 reason 만 채워짐"""

    success: bool = True
    valid: bool
    reason: Optional[str] = Field(
        None, description="user_not_found | device_mismatch | account_inactive"
    )
    nickname: Optional[str] = None
    token_count: Optional[int] = None
    favorite_count: Optional[int] = None
    comment_count: Optional[int] = None


class UpdateNicknameRequest(CamelModel):
    uid: str = Field(..., min_length=1)
    nickname: str

    @field_validator("nickname")
    @classmethod
    def strip_nickname(cls, v: str) -> str:
        return v.strip()


class UpdateNicknameResponse(CamelModel):
    success: bool = True
    nickname: str
