from typing import Optional

from pydantic import Field

from ledgerapi.schemas.account import CamelModel


class RecoveryCodeRequest(CamelModel):
    uid: str = Field(..., min_length=1)


class RecoveryCodeResponse(CamelModel):
    success: bool = True
    recovery_code: str = Field(..., description="XXXX-XXXX-XXXX 형식")
    is_new: bool


class TransferAccountRequest(CamelModel):
    """복구 코드로 계정 이전 요청"""

    recovery_code: str = Field(..., min_length=1)
    new_device_id: str = Field(..., description="이전 대상 기기 식별자")
    platform: Optional[str] = Field(None, max_length=50)
    app_version: Optional[str] = Field(None, max_length=50)


class TransferredData(CamelModel):
    """이전 후 복사된 하위 문서 수 (원자적 이전 이후의 best-effort 단계)"""

    token_history: int = 0
    attendance_records: int = 0
    attendance_summary: bool = False
    copy_completed: bool = False


class TransferAccountResponse(CamelModel):
    success: bool = True
    new_uid: str
    previous_uid: str
    nickname: str
    token_count: int
    transferred_data: TransferredData
