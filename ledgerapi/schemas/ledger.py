from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ledgerapi.schemas.account import CamelModel


class LedgerEntry(CamelModel):
    """토큰 원장 항목"""

    sequence: int = Field(..., description="계정별 원장 순번")
    kind: str = Field(..., description="지급/차감 분류 태그")
    amount: int = Field(..., description="변동량 (양수=지급, 음수=차감)")
    balance_after: int = Field(..., description="적용 후 잔액")
    description: str = ""
    created_at: Optional[datetime] = None


class UpdateTokensRequest(CamelModel):
    """토큰 사용/지급 요청"""

    uid: str = Field(..., min_length=1)
    amount: int = Field(..., description="변동량 (음수면 차감)")
    type: str = Field(..., min_length=1, max_length=50, description="원장 분류 태그")
    description: Optional[str] = Field("", max_length=255)


class UpdateTokensResponse(CamelModel):
    success: bool = True
    token_count: int


class TokenHistoryRequest(CamelModel):
    uid: str = Field(..., min_length=1)
    limit: int = Field(50, ge=1, description="페이지 크기 (최대 100)")
    offset: int = Field(0, ge=0, description="오프셋")


class TokenHistoryResponse(CamelModel):
    """원장 조회 응답 (최신순)"""

    success: bool = True
    balance: int
    entries: List[LedgerEntry]
    total_count: int
    has_next: bool


class LedgerIntegrityRequest(CamelModel):
    uid: str = Field(..., min_length=1)


class LedgerIntegrityResponse(CamelModel):
    """원장 정합성 검증 결과"""

    success: bool = True
    status: str = Field(..., description="OK | MISMATCH")
    uid: str
    calculated_balance: int = Field(..., description="원장 amount 합계")
    recorded_balance: int = Field(..., description="계정 문서의 토큰 잔액")
    entry_count: int
    first_broken_sequence: Optional[int] = Field(
        None, description="balanceAfter 체인이 처음 어긋난 순번"
    )
