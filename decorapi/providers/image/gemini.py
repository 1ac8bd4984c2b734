"""
Gemini 이미지 생성 클라이언트

생성형 이미지 API는 불투명한 원격 이미지 변환 서비스로 취급한다.
클라이언트는 DI 컨테이너가 API 키/모델/타임아웃을 명시적으로 넘겨 생성하며
모듈 전역 상태를 두지 않는다.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from decorapi.core.exceptions import ImageGenerationError
from decorapi.schemas.generate import (
    DetectedProduct,
    GeneratedImage,
    GenerateRequest,
)
from decorapi.providers.image.prompts import (
    PRODUCT_DETECTION_PROMPT,
    build_decoration_prompt,
)

logger = logging.getLogger(__name__)


class ImageClient(Protocol):
    async def generate_decorated_image(self, request: GenerateRequest) -> GeneratedImage:
        ...

    async def find_similar_products(
        self, image: GeneratedImage
    ) -> List[DetectedProduct]:
        ...


class GeminiImageClient:
    """Gemini REST API (generateContent) 클라이언트"""

    PRODUCT_SCHEMA: Dict[str, Any] = {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {
                "productName": {"type": "STRING"},
                "description": {"type": "STRING"},
                "searchTerm": {"type": "STRING"},
            },
            "required": ["productName", "description", "searchTerm"],
        },
    }

    def __init__(
        self,
        api_key: str,
        base_url: str,
        image_model: str,
        vision_model: str,
        timeout_seconds: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.image_model = image_model
        self.vision_model = vision_model
        self._timeout = httpx.Timeout(timeout_seconds, connect=10.0)
        self._transport = transport

    async def _generate_content(self, model: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is not set")

        url = f"{self.base_url}/models/{model}:generateContent"
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.post(
                url,
                params={"key": self.api_key},
                json=payload,
            )
        if response.status_code != 200:
            raise RuntimeError(
                f"Gemini {model} returned {response.status_code}: {response.text[:500]}"
            )
        return response.json()

    @staticmethod
    def _first_parts(data: Dict[str, Any]) -> List[Dict[str, Any]]:
        candidates = data.get("candidates") or []
        if not candidates:
            raise RuntimeError("No candidates returned from the API.")
        return (candidates[0].get("content") or {}).get("parts") or []

    async def generate_decorated_image(self, request: GenerateRequest) -> GeneratedImage:
        """원본 사진에 장식을 입힌 이미지 생성

        Raises:
            ImageGenerationError: 호출 실패, 타임아웃, 응답에 이미지가 없는 경우
        """
        prompt = build_decoration_prompt(
            style=request.style,
            scene=request.scene,
            lighting=request.lighting,
            intensity=request.intensity,
            custom_prompt=request.prompt,
        )
        payload = {
            "contents": [
                {
                    "parts": [
                        {
                            "inlineData": {
                                "mimeType": request.image_mime_type,
                                "data": request.image_payload,
                            }
                        },
                        {"text": prompt},
                    ]
                }
            ],
            "generationConfig": {"responseModalities": ["IMAGE"]},
        }

        logger.info(
            f"Generating image with {self.image_model}: style={request.style.value} "
            f"scene={request.scene.value} intensity={request.intensity.value} "
            f"lighting={request.lighting.value}"
        )
        try:
            data = await self._generate_content(self.image_model, payload)
            for part in self._first_parts(data):
                inline = part.get("inlineData") or part.get("inline_data")
                if inline and inline.get("data"):
                    return GeneratedImage(
                        image_base64=inline["data"],
                        mime_type=inline.get("mimeType")
                        or inline.get("mime_type")
                        or "image/png",
                    )
            raise RuntimeError("No image data found in the API response.")
        except httpx.TimeoutException as e:
            logger.error(f"Gemini image generation timed out: {str(e)}")
            raise ImageGenerationError() from e
        except (httpx.HTTPError, RuntimeError, ValueError) as e:
            logger.error(f"Gemini image generation failed: {str(e)}")
            raise ImageGenerationError() from e

    async def find_similar_products(self, image: GeneratedImage) -> List[DetectedProduct]:
        """생성 이미지에서 구매 가능한 장식 아이템 인식 (실패 시 빈 리스트)"""
        payload = {
            "contents": [
                {
                    "parts": [
                        {
                            "inlineData": {
                                "mimeType": image.mime_type,
                                "data": image.image_base64,
                            }
                        },
                        {"text": PRODUCT_DETECTION_PROMPT},
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": self.PRODUCT_SCHEMA,
            },
        }
        try:
            data = await self._generate_content(self.vision_model, payload)
            text = "".join(part.get("text", "") for part in self._first_parts(data)).strip()
            if not text:
                return []
            return [DetectedProduct.model_validate(item) for item in json.loads(text)]
        except Exception as e:
            logger.warning(f"Failed to find similar products: {str(e)}")
            return []
