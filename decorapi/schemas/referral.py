from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class GenerateReferralRequest(BaseModel):
    """추천 코드 발급 요청"""

    device_id: Optional[str] = Field(None, alias="deviceId", description="디바이스 ID")

    class Config:
        populate_by_name = True


class ReferralCodeResponse(BaseModel):
    """추천 코드 발급 응답"""

    code: str = Field(..., description="추천 코드")
    share_url: str = Field(..., alias="shareUrl", description="공유 링크")
    message: str = Field(..., description="응답 메시지")

    class Config:
        populate_by_name = True


class ClaimReferralRequest(BaseModel):
    """추천 코드 클레임 요청"""

    code: Optional[str] = Field(None, description="추천 코드")
    claimer_device_id: Optional[str] = Field(
        None, alias="claimerDeviceId", description="클레임하는 디바이스 ID"
    )

    class Config:
        populate_by_name = True


class ClaimReward(BaseModel):
    claimer: int = Field(..., description="클레임한 디바이스가 받은 생성 횟수")
    referrer: int = Field(..., description="코드 소유자가 받은 생성 횟수")


class ClaimReferralResponse(BaseModel):
    """추천 코드 클레임 응답"""

    success: bool = True
    message: str = "Referral claimed successfully"
    reward: ClaimReward
    referrer_device_id: str = Field(..., alias="referrerDeviceId")

    class Config:
        populate_by_name = True


class ReferralStatsResponse(BaseModel):
    """디바이스별 추천 실적"""

    has_code: bool = Field(True, alias="hasCode")
    code: str
    share_url: str = Field(..., alias="shareUrl")
    total_referrals: int = Field(..., alias="totalReferrals")
    designs_earned_from_referrals: int = Field(
        ..., alias="designsEarnedFromReferrals"
    )
    generations_remaining: int = Field(..., alias="generationsRemaining")
    total_generated: int = Field(..., alias="totalGenerated")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True


class ReferralClaimEntry(BaseModel):
    # 개인정보 보호를 위해 클레임한 디바이스 ID는 노출하지 않는다
    claimed_at: Optional[datetime] = Field(None, alias="claimedAt")

    class Config:
        populate_by_name = True


class ReferralCodeStatsResponse(BaseModel):
    """추천 코드별 통계"""

    code: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    total_claims: int = Field(..., alias="totalClaims")
    claims: List[ReferralClaimEntry] = Field(default_factory=list)

    class Config:
        populate_by_name = True
