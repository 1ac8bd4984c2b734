"""
추천 코드 / 클레임 리포지토리

코드 유일성과 (code, claimer_device_id) 유일성은 DB 유니크 제약이 최종 보장한다.
애플리케이션 레벨의 존재 확인은 빠른 실패용일 뿐이며, 제약 위반은
IntegrityError로 호출자에게 전파된다.
"""

from typing import List, Optional
from sqlalchemy import asc, insert
from sqlalchemy.orm import Session
from pydantic import BaseModel
from datetime import datetime

from decorapi.models.referral import (
    ReferralClaim as ReferralClaimModel,
    ReferralCode as ReferralCodeModel,
)
from decorapi.repositories.base import BaseRepository


class ReferralCodeRecord(BaseModel):
    code: str
    device_id: str
    total_claims: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReferralClaimRecord(BaseModel):
    code: str
    claimer_device_id: str
    claimed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReferralRepository(BaseRepository[ReferralCodeModel, ReferralCodeRecord]):
    def __init__(self, db: Session):
        super().__init__(ReferralCodeModel, ReferralCodeRecord, db)

    def get_by_code(self, code: str) -> Optional[ReferralCodeRecord]:
        return self.get_by_field("code", code)

    def get_by_device_id(self, device_id: str) -> Optional[ReferralCodeRecord]:
        return self.get_by_field("device_id", device_id)

    def code_exists(self, code: str) -> bool:
        return self.exists({"code": code})

    def create_code(
        self, code: str, device_id: str, *, commit: bool = True
    ) -> ReferralCodeRecord:
        self.db.execute(
            insert(self.model_class).values(
                code=code, device_id=device_id, total_claims=0
            )
        )
        self._finish(commit)
        record = self.get_by_code(code)
        if record is None:
            raise ValueError(f"Failed to create referral code {code}")
        return record

    def increment_total_claims(self, code: str, *, commit: bool = True) -> int:
        updated = (
            self.db.query(self.model_class)
            .filter(self.model_class.code == code)
            .update(
                {"total_claims": self.model_class.total_claims + 1},
                synchronize_session=False,
            )
        )
        self._finish(commit)
        return updated


class ReferralClaimRepository(BaseRepository[ReferralClaimModel, ReferralClaimRecord]):
    def __init__(self, db: Session):
        super().__init__(ReferralClaimModel, ReferralClaimRecord, db)

    def has_claimed(self, code: str, claimer_device_id: str) -> bool:
        return self.exists({"code": code, "claimer_device_id": claimer_device_id})

    def record_claim(
        self, code: str, claimer_device_id: str, *, commit: bool = True
    ) -> ReferralClaimRecord:
        record = self.create(
            commit=commit, code=code, claimer_device_id=claimer_device_id
        )
        if record is None:
            raise ValueError(f"Failed to record claim for {code}")
        return record

    def get_claims_for_code(self, code: str) -> List[ReferralClaimRecord]:
        instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.code == code)
            .order_by(asc(self.model_class.claimed_at), asc(self.model_class.id))
            .all()
        )
        return [self._to_schema(instance) for instance in instances]  # type: ignore[misc]
