from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from decorapi.models.base import Base


class ReferralCode(Base):
    """
    추천 코드 - 디바이스당 하나, 최초 생성된 코드가 유지된다

    code 값은 생성 후 변하지 않으며 total_claims는 성공한 클레임마다 1씩 증가한다.
    """

    __tablename__ = "referrals"

    code: Mapped[str] = mapped_column(String(16), primary_key=True)
    device_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.device_id"),
        unique=True,  # 디바이스당 코드 1개
        nullable=False,
    )
    total_claims: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ReferralClaim(Base):
    """
    추천 코드 클레임 기록 - 생성 후 수정/삭제되지 않음

    (code, claimer_device_id) 유니크 제약이 중복 클레임의 최종 방어선이다.
    """

    __tablename__ = "claims"
    __table_args__ = (
        UniqueConstraint("code", "claimer_device_id", name="uq_claims_code_claimer"),
        Index("idx_claims_code", "code"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    code: Mapped[str] = mapped_column(
        String(16), ForeignKey("referrals.code"), nullable=False
    )
    claimer_device_id: Mapped[str] = mapped_column(String(255), nullable=False)
    claimed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
