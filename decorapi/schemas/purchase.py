from pydantic import BaseModel, Field
from typing import List, Optional


class CreditPurchaseRequest(BaseModel):
    """인앱 구매 크레딧 반영 요청"""

    device_id: Optional[str] = Field(None, alias="deviceId", description="디바이스 ID")
    product_id: Optional[str] = Field(None, alias="productId", description="스토어 상품 ID")
    transaction_ids: List[str] = Field(
        default_factory=list,
        alias="transactionIds",
        description="스토어 거래 ID 목록 (재전송되어도 한 번만 반영)",
    )

    class Config:
        populate_by_name = True


class CreditPurchaseResponse(BaseModel):
    """인앱 구매 크레딧 반영 결과"""

    generations_remaining: int = Field(..., alias="generationsRemaining")
    total_generated: int = Field(..., alias="totalGenerated")
    credited_transactions: int = Field(
        ..., alias="creditedTransactions", description="이번 요청에서 새로 반영된 거래 수"
    )
    credited_amount: int = Field(
        ..., alias="creditedAmount", description="이번 요청에서 지급된 생성 횟수"
    )

    class Config:
        populate_by_name = True
