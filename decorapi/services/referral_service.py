"""
추천 코드 서비스 - 코드 발급, 클레임, 통계

코드 상태는 "발급됨" 이후 종료 상태가 없다. 서로 다른 디바이스가 각각
한 번씩, 제한 없이 클레임할 수 있다.
"""

import logging
import secrets

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from decorapi.config import Settings
from decorapi.core.exceptions import (
    AlreadyClaimedError,
    CodeGenerationExhaustedError,
    NotFoundError,
    SelfClaimError,
    StorageError,
    ValidationError,
)
from decorapi.repositories.referral_repository import (
    ReferralClaimRepository,
    ReferralRepository,
)
from decorapi.schemas.referral import (
    ClaimReferralResponse,
    ClaimReward,
    ReferralClaimEntry,
    ReferralCodeResponse,
    ReferralCodeStatsResponse,
    ReferralStatsResponse,
)
from decorapi.services.quota_service import QuotaService, normalize_device_id

logger = logging.getLogger(__name__)

# 혼동되는 문자 제외 (0, O, 1, I) - 32개 문자
REFERRAL_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_referral_code(length: int = 6) -> str:
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


def normalize_code(code) -> str:
    if not isinstance(code, str) or not code.strip():
        raise ValidationError(
            "Code and claimer device ID are required", details=["code is required"]
        )
    return code.strip().upper()


class ReferralService:
    """추천 코드 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings, quota_service: QuotaService):
        self.db = db
        self.settings = settings
        self.quota_service = quota_service
        self.referral_repo = ReferralRepository(db)
        self.claim_repo = ReferralClaimRepository(db)

    def _share_url(self, code: str) -> str:
        return f"{self.settings.REFERRAL_BASE_URL}{code}"

    def generate_or_get_code(self, device_id: str) -> ReferralCodeResponse:
        """
        디바이스의 추천 코드 조회 또는 신규 발급 (멱등)

        충돌 검사 후 INSERT하며, 검사와 삽입 사이의 경합은 코드 기본 키와
        device_id 유니크 제약이 최종적으로 막는다.

        Raises:
            ValidationError: 디바이스 ID 누락
            CodeGenerationExhaustedError: 재시도 한도 내에 고유 코드를 만들지 못한 경우
            StorageError: 저장소 오류
        """
        device_id = normalize_device_id(device_id)
        self.quota_service.get_or_create_user(device_id)

        try:
            existing = self.referral_repo.get_by_device_id(device_id)
            if existing:
                return ReferralCodeResponse(
                    code=existing.code,
                    share_url=self._share_url(existing.code),
                    message="Existing referral code returned",
                )

            max_attempts = self.settings.REFERRAL_CODE_MAX_ATTEMPTS
            for attempt in range(1, max_attempts + 1):
                candidate = generate_referral_code(self.settings.REFERRAL_CODE_LENGTH)
                if self.referral_repo.code_exists(candidate):
                    logger.warning(
                        f"Referral code collision on attempt {attempt}, retrying..."
                    )
                    continue

                try:
                    record = self.referral_repo.create_code(candidate, device_id)
                except IntegrityError:
                    self.db.rollback()
                    # 같은 디바이스의 동시 요청이 먼저 발급했다면 그 코드를 반환
                    winner = self.referral_repo.get_by_device_id(device_id)
                    if winner:
                        return ReferralCodeResponse(
                            code=winner.code,
                            share_url=self._share_url(winner.code),
                            message="Existing referral code returned",
                        )
                    logger.warning(
                        f"Referral code insert collided on attempt {attempt}, retrying..."
                    )
                    continue

                logger.info(f"Issued referral code {record.code} to device {device_id}")
                return ReferralCodeResponse(
                    code=record.code,
                    share_url=self._share_url(record.code),
                    message="Referral code generated successfully",
                )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to generate referral code for {device_id}: {str(e)}")
            raise StorageError() from e

        logger.error(
            f"Failed to generate unique referral code after {max_attempts} attempts"
        )
        raise CodeGenerationExhaustedError(attempts=max_attempts)

    def claim_code(self, code: str, claimer_device_id: str) -> ClaimReferralResponse:
        """
        추천 코드 클레임

        검증 순서:
        1. 코드 존재 (NotFoundError)
        2. 본인 코드 여부 (SelfClaimError)
        3. 동일 디바이스의 재클레임 여부 (AlreadyClaimedError)

        성공 시 클레임 기록, total_claims 증가, 양쪽 보상 지급을
        하나의 트랜잭션으로 처리한다. 동시 요청으로 유니크 제약이 위반되면
        전체를 롤백하고 AlreadyClaimedError를 반환한다.
        """
        code = normalize_code(code)
        claimer_device_id = normalize_device_id(claimer_device_id, "claimerDeviceId")

        try:
            referral = self.referral_repo.get_by_code(code)
            if referral is None:
                raise NotFoundError("Invalid referral code")

            if referral.device_id == claimer_device_id:
                raise SelfClaimError()

            if self.claim_repo.has_claimed(code, claimer_device_id):
                raise AlreadyClaimedError()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to validate claim of {code}: {str(e)}")
            raise StorageError() from e

        claimer_reward = self.settings.REFERRAL_CLAIMER_REWARD
        referrer_reward = self.settings.REFERRAL_REFERRER_REWARD

        try:
            self.quota_service.get_or_create_user(claimer_device_id, commit=False)
            self.quota_service.get_or_create_user(referral.device_id, commit=False)
            self.claim_repo.record_claim(code, claimer_device_id, commit=False)
            self.referral_repo.increment_total_claims(code, commit=False)
            self.quota_service.credit_generations(
                claimer_device_id, claimer_reward, commit=False
            )
            self.quota_service.credit_generations(
                referral.device_id, referrer_reward, commit=False
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(
                f"Concurrent duplicate claim of {code} by {claimer_device_id} rejected"
            )
            raise AlreadyClaimedError()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to claim {code} for {claimer_device_id}: {str(e)}")
            raise StorageError() from e

        logger.info(
            f"Referral {code} claimed by {claimer_device_id}; "
            f"+{claimer_reward} claimer, +{referrer_reward} referrer {referral.device_id}"
        )
        return ClaimReferralResponse(
            reward=ClaimReward(claimer=claimer_reward, referrer=referrer_reward),
            referrer_device_id=referral.device_id,
        )

    def get_referral_stats(self, device_id: str) -> ReferralStatsResponse:
        """디바이스의 추천 실적 및 현재 쿼터"""
        device_id = normalize_device_id(device_id)
        try:
            referral = self.referral_repo.get_by_device_id(device_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to fetch referral stats for {device_id}: {str(e)}")
            raise StorageError() from e

        if referral is None:
            raise NotFoundError(
                "No referral code found for this device", extra={"hasCode": False}
            )

        quota = self.quota_service.get_or_create_user(device_id)
        return ReferralStatsResponse(
            code=referral.code,
            share_url=self._share_url(referral.code),
            total_referrals=referral.total_claims,
            designs_earned_from_referrals=referral.total_claims
            * self.settings.REFERRAL_REFERRER_REWARD,
            generations_remaining=quota.generations_remaining,
            total_generated=quota.total_generated,
            created_at=referral.created_at,
        )

    def get_code_stats(self, code: str) -> ReferralCodeStatsResponse:
        """코드별 클레임 통계 (클레임한 디바이스 ID는 제외)"""
        code = normalize_code(code)
        try:
            referral = self.referral_repo.get_by_code(code)
            if referral is None:
                raise NotFoundError("Referral code not found")
            claims = self.claim_repo.get_claims_for_code(code)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to fetch stats for code {code}: {str(e)}")
            raise StorageError() from e

        return ReferralCodeStatsResponse(
            code=referral.code,
            created_at=referral.created_at,
            total_claims=referral.total_claims,
            claims=[ReferralClaimEntry(claimed_at=claim.claimed_at) for claim in claims],
        )
