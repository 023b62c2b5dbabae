"""
토큰 API 라우터

- POST /updateTokens: 토큰 지급/차감 (원장 기록 포함)
- POST /getTokenHistory: 토큰 원장 조회 (최신순)
- POST /verifyLedgerIntegrity: 원장 정합성 검증
"""

from fastapi import APIRouter, Depends

from ledgerapi.deps import get_ledger_service
from ledgerapi.schemas.ledger import (
    LedgerIntegrityRequest,
    LedgerIntegrityResponse,
    TokenHistoryRequest,
    TokenHistoryResponse,
    UpdateTokensRequest,
    UpdateTokensResponse,
)
from ledgerapi.services.ledger_service import LedgerService

router = APIRouter(tags=["tokens"])


@router.post("/updateTokens", response_model=UpdateTokensResponse)
def update_tokens(
    request: UpdateTokensRequest,
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> UpdateTokensResponse:
    """
    토큰 사용/지급

    HTTP Status:
        200: 성공
        404: 계정 없음
        412: 잔액 부족 (잔액과 원장 모두 변경되지 않음)
    """
    return ledger_service.update_tokens(
        uid=request.uid,
        amount=request.amount,
        kind=request.type,
        description=request.description,
    )


@router.post("/getTokenHistory", response_model=TokenHistoryResponse)
def get_token_history(
    request: TokenHistoryRequest,
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> TokenHistoryResponse:
    return ledger_service.get_token_history(
        uid=request.uid, limit=request.limit, offset=request.offset
    )


@router.post("/verifyLedgerIntegrity", response_model=LedgerIntegrityResponse)
def verify_ledger_integrity(
    request: LedgerIntegrityRequest,
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> LedgerIntegrityResponse:
    return ledger_service.verify_integrity(uid=request.uid)
