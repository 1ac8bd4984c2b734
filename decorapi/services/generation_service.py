"""
장식 이미지 생성 오케스트레이션

흐름:
1. 사용자 조회/생성 후 남은 횟수 확인 (없으면 403)
2. 생성 1회 예약 (즉시 커밋)
3. 외부 이미지 서비스 호출
4. 실패 시 예약 보정 후 GENERATION_FAILED
5. 성공 시 상품 추천(최선 노력)과 함께 응답
"""

import asyncio
import logging
from datetime import datetime, timezone

from decorapi.core.exceptions import (
    BaseAPIException,
    ImageGenerationError,
    QuotaExhaustedError,
)
from decorapi.providers.image.gemini import ImageClient
from decorapi.schemas.generate import (
    GeneratedImage,
    GenerateRequest,
    GenerateResponse,
    GenerationMeta,
)
from decorapi.services.product_service import ProductService
from decorapi.services.quota_service import QuotaService

logger = logging.getLogger(__name__)


class GenerationService:
    def __init__(
        self,
        quota_service: QuotaService,
        image_client: ImageClient,
        product_service: ProductService,
    ):
        self.quota_service = quota_service
        self.image_client = image_client
        self.product_service = product_service

    def _compensate(self, device_id: str, reason: str) -> None:
        try:
            self.quota_service.restore_one_generation(device_id)
        except BaseAPIException as e:
            # 예약은 커밋되었지만 복구 실패 - 수동 정산 대상
            logger.error(
                f"[Reconciliation] Failed to restore generation for device {device_id} "
                f"after '{reason}': {str(e)}"
            )

    async def _generate_image(self, request: GenerateRequest) -> GeneratedImage:
        try:
            return await self.image_client.generate_decorated_image(request)
        except asyncio.CancelledError:
            self._compensate(request.device_id, "request cancelled")
            raise
        except Exception as e:
            self._compensate(request.device_id, str(e))
            if isinstance(e, ImageGenerationError):
                raise
            logger.error(f"Image generation failed for {request.device_id}: {str(e)}")
            raise ImageGenerationError() from e

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        """
        장식 이미지 생성

        Raises:
            ValidationError: 디바이스 ID 오류
            QuotaExhaustedError: 남은 생성 횟수 없음
            ImageGenerationError: 외부 생성 실패 (예약은 복구됨)
            StorageError: 저장소 오류
        """
        user = self.quota_service.get_or_create_user(request.device_id)
        device_id = user.device_id
        request = request.model_copy(update={"device_id": device_id})

        if user.generations_remaining <= 0:
            logger.info(f"Generation blocked for {device_id}: quota exhausted")
            raise QuotaExhaustedError(
                generations_remaining=user.generations_remaining,
                total_generated=user.total_generated,
            )

        reserved = self.quota_service.consume_one_generation(device_id)

        logger.info(
            f"Generating {request.style.value} decoration for {request.scene.value} "
            f"scene ({request.lighting.value} lighting, {request.intensity.value} intensity)"
        )
        image = await self._generate_image(request)

        try:
            detected = await self.image_client.find_similar_products(image)
        except Exception as e:
            logger.warning(f"Product detection failed, using fallback products: {str(e)}")
            detected = []
        products = self.product_service.build_suggestions(detected, request.style)

        logger.info(f"Generation complete for {device_id}")
        return GenerateResponse(
            decorated_image_base64=image.data_url,
            products=products,
            generations_remaining=reserved.generations_remaining,
            total_generated=reserved.total_generated,
            meta=GenerationMeta(
                style=request.style,
                scene=request.scene,
                intensity=request.intensity,
                lighting=request.lighting,
                timestamp=datetime.now(timezone.utc),
                ai_generated=True,
            ),
        )
