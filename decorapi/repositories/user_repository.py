"""
사용자 쿼터 리포지토리

생성 쿼터의 모든 증감은 DB 레벨의 원자적 UPDATE (col = col ± n)로 처리한다.
요청 상태에서 값을 읽어 계산한 뒤 다시 쓰는 방식은 사용하지 않는다.
"""

from typing import Optional
from sqlalchemy.orm import Session

from decorapi.models.user import User as UserModel
from decorapi.schemas.quota import QuotaState
from decorapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, QuotaState]):
    def __init__(self, db: Session):
        super().__init__(UserModel, QuotaState, db)

    def _to_schema(self, model_instance: Optional[UserModel]) -> Optional[QuotaState]:
        if model_instance is None:
            return None
        return QuotaState(
            device_id=model_instance.device_id,
            generations_remaining=model_instance.generations_remaining,
            total_generated=model_instance.total_generated,
        )

    def get_by_device_id(self, device_id: str) -> Optional[QuotaState]:
        return self.get_by_field("device_id", device_id)

    def get_or_create(
        self, device_id: str, initial_generations: int, *, commit: bool = True
    ) -> QuotaState:
        """
        디바이스 사용자 조회 또는 생성

        INSERT ... ON CONFLICT DO NOTHING 후 조회하므로 동일 디바이스의
        동시 최초 요청에도 행이 하나만 생기고 기존 값은 바뀌지 않는다.
        """
        stmt = (
            self._dialect_insert()
            .values(
                device_id=device_id,
                generations_remaining=initial_generations,
                total_generated=0,
            )
            .on_conflict_do_nothing(index_elements=["device_id"])
        )
        self.db.execute(stmt)
        self._finish(commit)

        user = self.get_by_device_id(device_id)
        if user is None:
            raise ValueError(f"User {device_id} missing after upsert")
        return user

    def consume_generation(
        self, device_id: str, *, commit: bool = True
    ) -> Optional[QuotaState]:
        """
        남은 횟수가 있을 때만 1 차감, 누적 생성 1 증가

        Returns:
            갱신된 쿼터 상태. 남은 횟수가 없으면 None
        """
        updated = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.device_id == device_id,
                self.model_class.generations_remaining > 0,
            )
            .update(
                {
                    "generations_remaining": self.model_class.generations_remaining - 1,
                    "total_generated": self.model_class.total_generated + 1,
                },
                synchronize_session=False,
            )
        )
        self._finish(commit)
        if updated == 0:
            return None
        return self.get_by_device_id(device_id)

    def add_generations(
        self, device_id: str, amount: int, *, commit: bool = True
    ) -> Optional[QuotaState]:
        """남은 횟수에 amount를 더한다 (누적 생성 수는 변경하지 않음)"""
        updated = (
            self.db.query(self.model_class)
            .filter(self.model_class.device_id == device_id)
            .update(
                {
                    "generations_remaining": self.model_class.generations_remaining
                    + amount
                },
                synchronize_session=False,
            )
        )
        self._finish(commit)
        if updated == 0:
            return None
        return self.get_by_device_id(device_id)
