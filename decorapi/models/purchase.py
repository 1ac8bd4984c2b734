"""
인앱 구매 처리 기록

스토어가 발급한 transaction_id를 기본 키로 사용하여
동일 거래에 대한 크레딧 지급이 최대 한 번만 일어나도록 보장한다.
"""

from sqlalchemy import Column, DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from decorapi.models.base import Base


class ProcessedPurchaseTransaction(Base):
    __tablename__ = "purchase_transactions"
    __table_args__ = (Index("idx_purchase_transactions_device", "device_id"),)

    transaction_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    device_id: Mapped[str] = mapped_column(String(255), nullable=False)
    product_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
