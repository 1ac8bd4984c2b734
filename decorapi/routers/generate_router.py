"""
장식 이미지 생성 API 라우터

- POST /generate: 쿼터 예약 후 장식 이미지 생성
- GET /generate: 라우트 동작 확인
"""

from typing import Dict

from fastapi import APIRouter, Depends

from decorapi.deps import get_generation_service
from decorapi.schemas.generate import GenerateRequest, GenerateResponse
from decorapi.services.generation_service import GenerationService

router = APIRouter(prefix="/generate", tags=["generate"])


@router.get("")
async def generate_liveness() -> Dict[str, str]:
    return {"message": "Generate route is working! Use POST to generate images."}


@router.post("", response_model=GenerateResponse)
async def generate_decorated_image(
    request: GenerateRequest,
    generation_service: GenerationService = Depends(get_generation_service),
) -> GenerateResponse:
    """
    장식 이미지 생성

    남은 생성 횟수가 없으면 403과 함께 현재 카운트를 반환한다.
    외부 생성이 실패하면 예약한 1회를 복구하고 500을 반환한다.

    HTTP Status:
        200: 생성 성공
        400: 요청 형식 오류
        403: 생성 횟수 소진
        500: 생성 실패 또는 저장소 오류
    """
    return await generation_service.generate(request)
