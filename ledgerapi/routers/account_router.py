"""
계정 API 라우터

- POST /registerDevice: 기기 등록 및 UID 발급
- POST /verifyUID: 저장된 UID 가 이 기기의 유효한 계정인지 확인
- POST /updateNickname: 닉네임 변경
"""

import logging

from fastapi import APIRouter, Depends

from ledgerapi.deps import get_account_service, get_registration_service
from ledgerapi.schemas.account import (
    RegisterDeviceRequest,
    RegisterDeviceResponse,
    UpdateNicknameRequest,
    UpdateNicknameResponse,
    VerifyUIDRequest,
    VerifyUIDResponse,
)
from ledgerapi.services.account_service import AccountService
from ledgerapi.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["accounts"])


@router.post("/registerDevice", response_model=RegisterDeviceResponse)
def register_device(
    request: RegisterDeviceRequest,
    registration_service: RegistrationService = Depends(get_registration_service),
) -> RegisterDeviceResponse:
    """
    기기 등록 - 이미 등록된 기기면 기존 UID, 아니면 새 UID 발급

    HTTP Status:
        200: 성공
        400: deviceId 누락 또는 10자 미만
        429: 기기당 계정 생성 한도 초과 (details.retryAfter)
    """
    return registration_service.register_device(
        device_id=request.device_id,
        platform=request.platform,
        app_version=request.app_version,
    )


@router.post("/verifyUID", response_model=VerifyUIDResponse)
def verify_uid(
    request: VerifyUIDRequest,
    account_service: AccountService = Depends(get_account_service),
) -> VerifyUIDResponse:
    """UID 검증 - 실패 사유는 user_not_found | device_mismatch | account_inactive"""
    return account_service.verify_uid(uid=request.uid, device_id=request.device_id)


@router.post("/updateNickname", response_model=UpdateNicknameResponse)
def update_nickname(
    request: UpdateNicknameRequest,
    account_service: AccountService = Depends(get_account_service),
) -> UpdateNicknameResponse:
    """닉네임 변경 (2~20자)"""
    return account_service.update_nickname(uid=request.uid, nickname=request.nickname)
