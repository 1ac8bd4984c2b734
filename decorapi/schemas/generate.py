import re
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DATA_URL_PATTERN = re.compile(r"^data:(image/\w+);base64,(.+)$", re.DOTALL)
# JSON 본문 상한 10MB에 맞춘 data URL 최대 길이
MAX_IMAGE_DATA_URL_LENGTH = 10 * 1024 * 1024


class SceneType(str, Enum):
    INTERIOR = "interior"
    EXTERIOR = "exterior"


class DecorStyle(str, Enum):
    CLASSIC_CHRISTMAS = "classic_christmas"
    NORDIC_MINIMALIST = "nordic_minimalist"
    MODERN_SILVER = "modern_silver"
    COZY_FAMILY = "cozy_family"
    RUSTIC_FARMHOUSE = "rustic_farmhouse"
    ELEGANT_GOLD = "elegant_gold"
    COLORFUL_WHIMSICAL = "colorful_whimsical"
    CUSTOM = "custom"


class Lighting(str, Enum):
    DAY = "day"
    NIGHT = "night"


class Intensity(str, Enum):
    MINIMAL = "minimal"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    MAXIMAL = "maximal"


class GenerateRequest(BaseModel):
    """장식 이미지 생성 요청"""

    device_id: str = Field(..., description="디바이스 ID")
    scene: SceneType = Field(..., description="실내/실외")
    style: DecorStyle = Field(..., description="장식 스타일")
    prompt: Optional[str] = Field(None, description="custom 스타일일 때 장식 설명")
    lighting: Lighting = Field(Lighting.DAY, description="주간/야간")
    intensity: Intensity = Field(Intensity.MEDIUM, description="장식 강도")
    image_base64: str = Field(
        ...,
        max_length=MAX_IMAGE_DATA_URL_LENGTH,
        description="data:image/...;base64,... 형식",
    )

    @field_validator("image_base64")
    @classmethod
    def image_must_be_data_url(cls, v: str) -> str:
        if not DATA_URL_PATTERN.match(v):
            raise ValueError("image_base64 must be a valid data URL")
        return v

    @model_validator(mode="after")
    def custom_style_requires_prompt(self) -> "GenerateRequest":
        if self.style == DecorStyle.CUSTOM and not (self.prompt or "").strip():
            raise ValueError('prompt is required when style is "custom"')
        return self

    @property
    def image_payload(self) -> str:
        """data URL에서 base64 본문만 추출"""
        return DATA_URL_PATTERN.match(self.image_base64).group(2)  # type: ignore[union-attr]

    @property
    def image_mime_type(self) -> str:
        return DATA_URL_PATTERN.match(self.image_base64).group(1)  # type: ignore[union-attr]


class GeneratedImage(BaseModel):
    """외부 이미지 서비스 결과"""

    image_base64: str
    mime_type: str = "image/png"

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.image_base64}"


class DetectedProduct(BaseModel):
    """생성된 이미지에서 인식된 장식 아이템"""

    product_name: str = Field(..., alias="productName")
    description: str = ""
    search_term: str = Field(..., alias="searchTerm")

    class Config:
        populate_by_name = True


class AffiliateProduct(BaseModel):
    name: str
    price: str
    image: str
    link: str


class GenerationMeta(BaseModel):
    style: DecorStyle
    scene: SceneType
    intensity: Intensity
    lighting: Lighting
    timestamp: datetime
    ai_generated: bool = Field(True, alias="aiGenerated")

    class Config:
        populate_by_name = True


class GenerateResponse(BaseModel):
    """장식 이미지 생성 응답"""

    decorated_image_base64: str
    products: List[AffiliateProduct] = Field(default_factory=list)
    generations_remaining: int = Field(..., alias="generationsRemaining")
    total_generated: int = Field(..., alias="totalGenerated")
    meta: GenerationMeta

    class Config:
        populate_by_name = True
