"""
출석 API 라우터

- POST /claimDailyReward: 오늘(KST) 출석 보상 받기
- POST /getAttendanceStatus: 오늘 출석 여부 및 연속 출석 요약
"""

from fastapi import APIRouter, Depends

from ledgerapi.deps import get_attendance_service
from ledgerapi.schemas.attendance import (
    AttendanceRequest,
    AttendanceStatusResponse,
    ClaimDailyRewardResponse,
)
from ledgerapi.services.attendance_service import AttendanceService

router = APIRouter(tags=["attendance"])


@router.post("/claimDailyReward", response_model=ClaimDailyRewardResponse)
def claim_daily_reward(
    request: AttendanceRequest,
    attendance_service: AttendanceService = Depends(get_attendance_service),
) -> ClaimDailyRewardResponse:
    """
    출석 보상 - 평일 10, 주말 30 토큰

    HTTP Status:
        200: 지급 완료
        404: 계정 없음
        409: 오늘 이미 출석
    """
    return attendance_service.claim_daily_reward(uid=request.uid)


@router.post("/getAttendanceStatus", response_model=AttendanceStatusResponse)
def get_attendance_status(
    request: AttendanceRequest,
    attendance_service: AttendanceService = Depends(get_attendance_service),
) -> AttendanceStatusResponse:
    return attendance_service.get_attendance_status(uid=request.uid)
