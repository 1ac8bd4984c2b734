import pytest
from unittest.mock import patch

from decorapi.core.exceptions import UnsupportedProductError, ValidationError


class TestCreditPurchase:
    """PurchaseService 테스트 - 거래당 정확히 한 번 지급"""

    def test_credits_each_new_transaction(self, purchase_service):
        result = purchase_service.credit_purchase(
            "D1", "holiday_basic_pack", ["tx1", "tx2"]
        )

        assert result.credited_transactions == 2
        assert result.credited_amount == 20
        assert result.generations_remaining == 23
        assert result.total_generated == 0

    def test_resubmitted_batch_credits_nothing(self, purchase_service):
        purchase_service.credit_purchase("D1", "holiday_basic_pack", ["tx1", "tx2"])

        for _ in range(3):
            result = purchase_service.credit_purchase(
                "D1", "holiday_basic_pack", ["tx1", "tx2"]
            )
            assert result.credited_transactions == 0
            assert result.credited_amount == 0
            assert result.generations_remaining == 23

    def test_partial_overlap_credits_only_new(self, purchase_service):
        purchase_service.credit_purchase("D1", "holiday_basic_pack", ["tx1"])

        result = purchase_service.credit_purchase(
            "D1", "holiday_basic_pack", ["tx1", "tx2"]
        )

        assert result.credited_transactions == 1
        assert result.credited_amount == 10
        assert result.generations_remaining == 23

    def test_duplicates_within_batch_collapse(self, purchase_service):
        result = purchase_service.credit_purchase(
            "D1", "holiday_basic_pack", ["tx1", " tx1 ", "tx1"]
        )

        assert result.credited_transactions == 1
        assert result.credited_amount == 10

    def test_transaction_is_global_across_devices(self, purchase_service):
        purchase_service.credit_purchase("D1", "holiday_basic_pack", ["tx1"])

        result = purchase_service.credit_purchase("D2", "holiday_basic_pack", ["tx1"])

        assert result.credited_amount == 0
        assert result.generations_remaining == 3

    def test_unsupported_product(self, purchase_service, quota_service):
        with pytest.raises(UnsupportedProductError) as exc_info:
            purchase_service.credit_purchase("D1", "unknown_pack", ["tx1"])

        assert exc_info.value.status_code == 400
        assert quota_service.user_repo.get_by_device_id("D1") is None

    @pytest.mark.parametrize(
        "device_id,product_id,transaction_ids",
        [
            (None, "holiday_basic_pack", ["tx1"]),
            ("D1", None, ["tx1"]),
            ("D1", "  ", ["tx1"]),
            ("D1", "holiday_basic_pack", []),
            ("D1", "holiday_basic_pack", ["tx1", ""]),
        ],
    )
    def test_missing_input(self, purchase_service, device_id, product_id, transaction_ids):
        with pytest.raises(ValidationError):
            purchase_service.credit_purchase(device_id, product_id, transaction_ids)

    def test_concurrent_record_is_reevaluated_once(self, purchase_service):
        purchase_service.credit_purchase("D1", "holiday_basic_pack", ["tx1"])

        original = purchase_service.purchase_repo.filter_unprocessed
        calls = []

        # 첫 평가는 다른 요청이 커밋하기 전의 상태를 본 것처럼 동작
        def stale_first_read(transaction_ids):
            calls.append(list(transaction_ids))
            if len(calls) == 1:
                return list(transaction_ids)
            return original(transaction_ids)

        with patch.object(
            purchase_service.purchase_repo,
            "filter_unprocessed",
            side_effect=stale_first_read,
        ):
            result = purchase_service.credit_purchase(
                "D1", "holiday_basic_pack", ["tx1"]
            )

        assert len(calls) == 2
        assert result.credited_transactions == 0
        assert result.credited_amount == 0
        assert result.generations_remaining == 13
