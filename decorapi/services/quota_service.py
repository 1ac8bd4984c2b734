"""
생성 쿼터 원장 서비스

핵심 기능:
1. 디바이스 사용자 조회/생성 (초기 무료 생성 횟수 부여)
2. 생성 1회 예약 (남은 횟수 차감 + 누적 생성 증가)
3. 외부 생성 실패 시 예약 보정 (남은 횟수 복구)
4. 추천/구매 보상 지급

예약은 외부 이미지 호출을 감싸는 트랜잭션이 아니다. 예약은 즉시 커밋되고,
외부 호출이 실패하면 restore_one_generation으로 보정한다.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from decorapi.config import Settings
from decorapi.core.exceptions import QuotaExhaustedError, StorageError, ValidationError
from decorapi.repositories.user_repository import UserRepository
from decorapi.schemas.quota import QuotaState

logger = logging.getLogger(__name__)

MAX_DEVICE_ID_LENGTH = 255


def normalize_device_id(device_id: Optional[str], field_name: str = "deviceId") -> str:
    """디바이스 ID 검증 후 앞뒤 공백 제거"""
    if not isinstance(device_id, str) or not device_id.strip():
        raise ValidationError(
            f"Invalid {field_name}", details=[f"{field_name} is required"]
        )
    device_id = device_id.strip()
    if len(device_id) > MAX_DEVICE_ID_LENGTH:
        raise ValidationError(
            f"Invalid {field_name}",
            details=[f"{field_name} must be at most {MAX_DEVICE_ID_LENGTH} characters"],
        )
    return device_id


class QuotaService:
    """생성 쿼터 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.user_repo = UserRepository(db)

    def _storage_failure(self, action: str, device_id: str, exc: Exception) -> StorageError:
        self.db.rollback()
        logger.error(f"Failed to {action} for device {device_id}: {str(exc)}")
        return StorageError()

    def get_or_create_user(self, device_id: str, *, commit: bool = True) -> QuotaState:
        """
        디바이스 사용자 조회 또는 생성

        Args:
            device_id: 클라이언트가 보낸 디바이스 ID
            commit: False면 호출자의 트랜잭션에 포함된다

        Returns:
            QuotaState: 현재 쿼터 상태 (신규면 초기 무료 횟수)

        Raises:
            ValidationError: 디바이스 ID가 비어 있거나 형식이 잘못된 경우
            StorageError: 저장소 오류
        """
        device_id = normalize_device_id(device_id)
        try:
            return self.user_repo.get_or_create(
                device_id, self.settings.INITIAL_FREE_GENERATIONS, commit=commit
            )
        except SQLAlchemyError as e:
            raise self._storage_failure("get or create user", device_id, e) from e

    def get_quota(self, device_id: str) -> QuotaState:
        return self.get_or_create_user(device_id)

    def consume_one_generation(self, device_id: str) -> QuotaState:
        """
        생성 1회 예약 - 남은 횟수 1 차감, 누적 생성 1 증가

        남은 횟수 > 0 조건을 UPDATE 문에 포함하여 동시 요청에도
        음수로 내려가지 않는다.

        Raises:
            QuotaExhaustedError: 남은 횟수가 없는 경우 (현재 카운트 포함)
            StorageError: 저장소 오류
        """
        device_id = normalize_device_id(device_id)
        try:
            user = self.user_repo.get_or_create(
                device_id, self.settings.INITIAL_FREE_GENERATIONS, commit=False
            )
            updated = self.user_repo.consume_generation(device_id, commit=False)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._storage_failure("consume generation", device_id, e) from e

        if updated is None:
            logger.info(f"Device {device_id} has no generations remaining")
            raise QuotaExhaustedError(
                generations_remaining=user.generations_remaining,
                total_generated=user.total_generated,
            )

        logger.info(
            f"Reserved 1 generation for device {device_id}: "
            f"remaining={updated.generations_remaining}, total={updated.total_generated}"
        )
        return updated

    def restore_one_generation(self, device_id: str) -> QuotaState:
        """실패한 생성에 대한 보정 - 남은 횟수만 1 복구 (누적 생성 수는 유지)"""
        device_id = normalize_device_id(device_id)
        try:
            restored = self.user_repo.add_generations(device_id, 1)
        except SQLAlchemyError as e:
            raise self._storage_failure("restore generation", device_id, e) from e

        if restored is None:
            # 예약이 성공했다면 행이 존재해야 한다
            logger.error(f"Restore requested for unknown device {device_id}")
            raise StorageError()

        logger.info(
            f"Restored 1 generation for device {device_id}: "
            f"remaining={restored.generations_remaining}"
        )
        return restored

    def credit_generations(
        self, device_id: str, amount: int, *, commit: bool = True
    ) -> QuotaState:
        """
        생성 횟수 지급 (추천 보상, 구매 크레딧)

        Args:
            device_id: 디바이스 ID
            amount: 지급할 횟수 (양의 정수)
            commit: False면 호출자의 트랜잭션에 포함된다

        Returns:
            QuotaState: 지급 후 쿼터 상태
        """
        device_id = normalize_device_id(device_id)
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError(
                "Invalid credit amount", details=["amount must be a positive integer"]
            )

        try:
            self.user_repo.get_or_create(
                device_id, self.settings.INITIAL_FREE_GENERATIONS, commit=False
            )
            credited = self.user_repo.add_generations(device_id, amount, commit=commit)
        except SQLAlchemyError as e:
            raise self._storage_failure("credit generations", device_id, e) from e

        if credited is None:
            raise StorageError()

        logger.info(
            f"Credited {amount} generations to device {device_id}: "
            f"remaining={credited.generations_remaining}"
        )
        return credited
