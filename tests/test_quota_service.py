import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from decorapi.core.exceptions import QuotaExhaustedError, StorageError, ValidationError
from decorapi.services.quota_service import normalize_device_id


class TestNormalizeDeviceId:
    def test_strips_whitespace(self):
        assert normalize_device_id("  device-1 ") == "device-1"

    @pytest.mark.parametrize("value", [None, "", "   ", 123])
    def test_rejects_missing(self, value):
        with pytest.raises(ValidationError):
            normalize_device_id(value)

    def test_rejects_too_long(self):
        with pytest.raises(ValidationError):
            normalize_device_id("x" * 256)


class TestQuotaService:
    """QuotaService 테스트 (SQLite 인메모리)"""

    def test_new_device_gets_initial_quota(self, quota_service):
        quota = quota_service.get_or_create_user("D1")

        assert quota.device_id == "D1"
        assert quota.generations_remaining == 3
        assert quota.total_generated == 0

    def test_get_or_create_does_not_reset_existing(self, quota_service):
        quota_service.get_or_create_user("D1")
        quota_service.consume_one_generation("D1")

        quota = quota_service.get_or_create_user("D1")

        assert quota.generations_remaining == 2
        assert quota.total_generated == 1

    def test_consume_until_exhausted(self, quota_service):
        for expected in (2, 1, 0):
            assert quota_service.consume_one_generation("D1").generations_remaining == expected

        with pytest.raises(QuotaExhaustedError) as exc_info:
            quota_service.consume_one_generation("D1")

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["generationsRemaining"] == 0
        assert exc_info.value.detail["totalGenerated"] == 3
        assert quota_service.get_quota("D1").generations_remaining == 0

    def test_restore_returns_to_pre_reservation_value(self, quota_service):
        before = quota_service.get_or_create_user("D1").generations_remaining

        quota_service.consume_one_generation("D1")
        restored = quota_service.restore_one_generation("D1")

        assert restored.generations_remaining == before
        # 예약 시 증가한 누적 생성 수는 보정하지 않는다
        assert restored.total_generated == 1

    def test_restore_unknown_device_raises_storage_error(self, quota_service):
        with pytest.raises(StorageError):
            quota_service.restore_one_generation("ghost")

    def test_credit_generations(self, quota_service):
        quota = quota_service.credit_generations("D1", 10)

        assert quota.generations_remaining == 13
        assert quota.total_generated == 0

    @pytest.mark.parametrize("amount", [0, -1, 1.5, True])
    def test_credit_rejects_non_positive_integer(self, quota_service, amount):
        with pytest.raises(ValidationError):
            quota_service.credit_generations("D1", amount)

    def test_storage_failure_is_wrapped(self, quota_service):
        with patch.object(
            quota_service.user_repo,
            "get_or_create",
            side_effect=OperationalError("SELECT 1", {}, Exception("db down")),
        ):
            with pytest.raises(StorageError) as exc_info:
                quota_service.get_or_create_user("D1")

        assert exc_info.value.status_code == 500
        assert "db down" not in exc_info.value.message
