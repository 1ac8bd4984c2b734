from typing import Iterable, List, Optional, Set
from sqlalchemy import insert
from sqlalchemy.orm import Session
from pydantic import BaseModel
from datetime import datetime

from decorapi.models.purchase import (
    ProcessedPurchaseTransaction as ProcessedPurchaseTransactionModel,
)
from decorapi.repositories.base import BaseRepository


class ProcessedTransactionRecord(BaseModel):
    transaction_id: str
    device_id: str
    product_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PurchaseRepository(
    BaseRepository[ProcessedPurchaseTransactionModel, ProcessedTransactionRecord]
):
    """처리 완료된 스토어 거래 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(
            ProcessedPurchaseTransactionModel, ProcessedTransactionRecord, db
        )

    def get_processed_ids(self, transaction_ids: Iterable[str]) -> Set[str]:
        ids = list(transaction_ids)
        if not ids:
            return set()
        rows = (
            self.db.query(self.model_class.transaction_id)
            .filter(self.model_class.transaction_id.in_(ids))
            .all()
        )
        return {row[0] for row in rows}

    def filter_unprocessed(self, transaction_ids: List[str]) -> List[str]:
        """아직 기록되지 않은 거래 ID만 입력 순서대로 반환"""
        processed = self.get_processed_ids(transaction_ids)
        return [tx_id for tx_id in transaction_ids if tx_id not in processed]

    def record_processed(
        self,
        device_id: str,
        product_id: str,
        transaction_ids: List[str],
        *,
        commit: bool = True,
    ) -> None:
        """
        거래를 처리 완료로 기록

        일반 INSERT를 사용한다. 동시 요청이 먼저 같은 거래를 커밋했다면
        기본 키 위반(IntegrityError)이 발생하고, 호출자는 크레딧을 포함한
        전체 작업을 롤백해야 한다.
        """
        self.db.execute(
            insert(self.model_class),
            [
                {
                    "transaction_id": tx_id,
                    "device_id": device_id,
                    "product_id": product_id,
                }
                for tx_id in transaction_ids
            ],
        )
        self._finish(commit)
