"""
인앱 구매 크레딧 반영 서비스

스토어 SDK는 앱 실행 때마다 같은 영수증을 다시 보낼 수 있다. 거래 ID를
기본 키로 기록하여 같은 거래에 대한 크레딧이 한 번만 지급되도록 한다.
미처리 거래 필터링, 처리 기록, 크레딧 지급은 하나의 트랜잭션에서 수행한다.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from decorapi.config import Settings
from decorapi.core.exceptions import (
    StorageError,
    UnsupportedProductError,
    ValidationError,
)
from decorapi.repositories.purchase_repository import PurchaseRepository
from decorapi.schemas.purchase import CreditPurchaseResponse
from decorapi.services.quota_service import QuotaService, normalize_device_id

logger = logging.getLogger(__name__)


class PurchaseService:
    """구매 크레딧 관련 비즈니스 로직을 담당하는 서비스"""

    # 동시 중복 요청으로 기록이 충돌하면 커밋된 상태 기준으로 한 번 더 평가한다
    MAX_RECONCILE_ATTEMPTS = 2

    def __init__(self, db: Session, settings: Settings, quota_service: QuotaService):
        self.db = db
        self.settings = settings
        self.quota_service = quota_service
        self.purchase_repo = PurchaseRepository(db)

    def credit_per_transaction(self, product_id: str) -> int:
        credit = self.settings.PRODUCT_CREDIT_MAP.get(product_id)
        if not credit or credit <= 0:
            raise UnsupportedProductError(product_id)
        return credit

    @staticmethod
    def _normalize_transaction_ids(transaction_ids: Optional[List[str]]) -> List[str]:
        if not isinstance(transaction_ids, list) or not transaction_ids:
            raise ValidationError(
                "Missing transactionIds",
                details=["transactionIds must include at least one transaction"],
            )

        normalized: List[str] = []
        seen = set()
        for tx_id in transaction_ids:
            if not isinstance(tx_id, str) or not tx_id.strip():
                raise ValidationError(
                    "Invalid transactionIds",
                    details=["transactionIds must be non-empty strings"],
                )
            tx_id = tx_id.strip()
            if tx_id not in seen:
                seen.add(tx_id)
                normalized.append(tx_id)
        return normalized

    def credit_purchase(
        self,
        device_id: str,
        product_id: str,
        transaction_ids: List[str],
    ) -> CreditPurchaseResponse:
        """
        구매 거래 크레딧 반영 (멱등)

        Args:
            device_id: 디바이스 ID
            product_id: 스토어 상품 ID
            transaction_ids: 스토어 거래 ID 목록

        Returns:
            CreditPurchaseResponse: 이번 요청에서 새로 반영된 거래 수/지급량과 현재 쿼터

        Raises:
            ValidationError: 입력 누락
            UnsupportedProductError: 크레딧 매핑이 없는 상품
            StorageError: 저장소 오류
        """
        device_id = normalize_device_id(device_id)
        if not isinstance(product_id, str) or not product_id.strip():
            raise ValidationError(
                "Invalid productId", details=["productId is required"]
            )
        product_id = product_id.strip()
        credit_per_transaction = self.credit_per_transaction(product_id)
        transaction_ids = self._normalize_transaction_ids(transaction_ids)

        for attempt in range(1, self.MAX_RECONCILE_ATTEMPTS + 1):
            try:
                return self._reconcile(
                    device_id, product_id, transaction_ids, credit_per_transaction
                )
            except IntegrityError:
                self.db.rollback()
                logger.warning(
                    f"Purchase transactions for {device_id} were recorded concurrently "
                    f"(attempt {attempt}), re-evaluating"
                )
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to credit purchase for {device_id}: {str(e)}")
                raise StorageError() from e

        logger.error(
            f"Could not reconcile purchase for {device_id} after "
            f"{self.MAX_RECONCILE_ATTEMPTS} attempts"
        )
        raise StorageError()

    def _reconcile(
        self,
        device_id: str,
        product_id: str,
        transaction_ids: List[str],
        credit_per_transaction: int,
    ) -> CreditPurchaseResponse:
        user = self.quota_service.get_or_create_user(device_id, commit=False)
        new_transactions = self.purchase_repo.filter_unprocessed(transaction_ids)

        if not new_transactions:
            self.db.commit()
            logger.info(
                f"No new transactions for {device_id} ({len(transaction_ids)} already processed)"
            )
            return CreditPurchaseResponse(
                generations_remaining=user.generations_remaining,
                total_generated=user.total_generated,
                credited_transactions=0,
                credited_amount=0,
            )

        credited_amount = credit_per_transaction * len(new_transactions)

        # 기록을 먼저 INSERT하여 기본 키 충돌 시 크레딧 지급 전에 실패하게 한다
        self.purchase_repo.record_processed(
            device_id, product_id, new_transactions, commit=False
        )
        credited = self.quota_service.credit_generations(
            device_id, credited_amount, commit=False
        )
        self.db.commit()

        logger.info(
            f"Credited {credited_amount} generations to {device_id} for "
            f"{len(new_transactions)} {product_id} transactions"
        )
        return CreditPurchaseResponse(
            generations_remaining=credited.generations_remaining,
            total_generated=credited.total_generated,
            credited_transactions=len(new_transactions),
            credited_amount=credited_amount,
        )
