"""
계정 복구 API 라우터

- POST /getOrCreateRecoveryCode: 복구 코드 조회/발급
- POST /transferAccountData: 복구 코드로 새 기기에 계정 이전
"""

from fastapi import APIRouter, Depends

from ledgerapi.deps import get_recovery_service
from ledgerapi.schemas.recovery import (
    RecoveryCodeRequest,
    RecoveryCodeResponse,
    TransferAccountRequest,
    TransferAccountResponse,
)
from ledgerapi.services.recovery_service import RecoveryService

router = APIRouter(tags=["recovery"])


@router.post("/getOrCreateRecoveryCode", response_model=RecoveryCodeResponse)
def get_or_create_recovery_code(
    request: RecoveryCodeRequest,
    recovery_service: RecoveryService = Depends(get_recovery_service),
) -> RecoveryCodeResponse:
    return recovery_service.get_or_create_recovery_code(uid=request.uid)


@router.post("/transferAccountData", response_model=TransferAccountResponse)
def transfer_account_data(
    request: TransferAccountRequest,
    recovery_service: RecoveryService = Depends(get_recovery_service),
) -> TransferAccountResponse:
    """
    계정 이전

    HTTP Status:
        200: 이전 완료 (transferredData.copyCompleted=false 면 이력 복사가 일부 누락)
        404: 일치하는 활성 계정 없음
        409: 이 기기에 이미 활성 계정이 있음 (로그아웃 필요)
    """
    return recovery_service.transfer_account(
        recovery_code=request.recovery_code,
        new_device_id=request.new_device_id,
        platform=request.platform,
        app_version=request.app_version,
    )
