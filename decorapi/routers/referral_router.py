"""
추천 코드 API 라우터

- POST /referral/generate-referral: 내 추천 코드 조회 또는 발급
- POST /referral/claim-referral: 다른 디바이스의 추천 코드 클레임
- GET /referral/user/{device_id}: 현재 생성 쿼터 조회
- GET /referral/stats/{device_id}: 내 추천 실적 조회
- GET /referral/referral-stats/{code}: 코드별 클레임 통계
"""

from fastapi import APIRouter, Depends, Path

from decorapi.deps import get_quota_service, get_referral_service
from decorapi.schemas.quota import QuotaState
from decorapi.schemas.referral import (
    ClaimReferralRequest,
    ClaimReferralResponse,
    GenerateReferralRequest,
    ReferralCodeResponse,
    ReferralCodeStatsResponse,
    ReferralStatsResponse,
)
from decorapi.services.quota_service import QuotaService
from decorapi.services.referral_service import ReferralService

router = APIRouter(prefix="/referral", tags=["referral"])


@router.post("/generate-referral", response_model=ReferralCodeResponse)
async def generate_referral(
    request: GenerateReferralRequest,
    referral_service: ReferralService = Depends(get_referral_service),
) -> ReferralCodeResponse:
    """
    추천 코드 조회 또는 발급 - 같은 디바이스는 항상 같은 코드를 받는다

    HTTP Status:
        200: 기존 코드 반환 또는 신규 발급
        400: deviceId 누락
        500: 고유 코드 생성 실패 또는 저장소 오류
    """
    return referral_service.generate_or_get_code(request.device_id)


@router.post("/claim-referral", response_model=ClaimReferralResponse)
async def claim_referral(
    request: ClaimReferralRequest,
    referral_service: ReferralService = Depends(get_referral_service),
) -> ClaimReferralResponse:
    """
    추천 코드 클레임 - 클레임한 디바이스와 코드 소유자 모두 보상을 받는다

    HTTP Status:
        200: 클레임 성공
        400: 입력 누락, 본인 코드, 이미 클레임한 코드
        404: 존재하지 않는 코드
    """
    return referral_service.claim_code(request.code, request.claimer_device_id)


@router.get("/user/{device_id}", response_model=QuotaState)
async def get_user_quota(
    device_id: str = Path(..., description="디바이스 ID"),
    quota_service: QuotaService = Depends(get_quota_service),
) -> QuotaState:
    """현재 생성 쿼터 (처음 보는 디바이스는 초기 무료 횟수로 생성)"""
    return quota_service.get_quota(device_id)


@router.get("/stats/{device_id}", response_model=ReferralStatsResponse)
async def get_referral_stats(
    device_id: str = Path(..., description="디바이스 ID"),
    referral_service: ReferralService = Depends(get_referral_service),
) -> ReferralStatsResponse:
    return referral_service.get_referral_stats(device_id)


@router.get("/referral-stats/{code}", response_model=ReferralCodeStatsResponse)
async def get_code_stats(
    code: str = Path(..., description="추천 코드"),
    referral_service: ReferralService = Depends(get_referral_service),
) -> ReferralCodeStatsResponse:
    return referral_service.get_code_stats(code)
