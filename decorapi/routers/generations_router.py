"""
인앱 구매 크레딧 API 라우터

- POST /generations/credit: 스토어 거래를 생성 횟수로 반영 (거래당 한 번)
"""

from fastapi import APIRouter, Depends

from decorapi.deps import get_purchase_service
from decorapi.schemas.purchase import CreditPurchaseRequest, CreditPurchaseResponse
from decorapi.services.purchase_service import PurchaseService

router = APIRouter(prefix="/generations", tags=["generations"])


@router.post("/credit", response_model=CreditPurchaseResponse)
async def credit_purchase(
    request: CreditPurchaseRequest,
    purchase_service: PurchaseService = Depends(get_purchase_service),
) -> CreditPurchaseResponse:
    """
    구매 크레딧 반영

    같은 transactionIds를 여러 번 보내도 첫 요청에서만 지급되며,
    이후 요청은 creditedTransactions=0, creditedAmount=0을 반환한다.

    HTTP Status:
        200: 반영 완료 (새 거래가 없어도 200)
        400: 입력 누락 또는 지원하지 않는 상품
        500: 저장소 오류
    """
    return purchase_service.credit_purchase(
        request.device_id, request.product_id, request.transaction_ids
    )
