from pydantic import BaseModel, Field


class QuotaState(BaseModel):
    """디바이스 생성 쿼터 상태"""

    device_id: str = Field(..., alias="deviceId", description="디바이스 ID")
    generations_remaining: int = Field(
        ..., alias="generationsRemaining", description="남은 생성 횟수"
    )
    total_generated: int = Field(
        ..., alias="totalGenerated", description="누적 생성 성공 횟수"
    )

    class Config:
        from_attributes = True
        populate_by_name = True
