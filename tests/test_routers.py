import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from conftest import SAMPLE_IMAGE, FakeImageClient
from decorapi.core.exceptions import ImageGenerationError
from decorapi.database.session import get_db
from decorapi.main import app


@pytest.fixture
def image_client():
    return FakeImageClient()


@pytest.fixture
def client(session_factory, test_settings, image_client, product_service):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.container.config.config.override(providers.Object(test_settings))
    app.container.external.image_client.override(providers.Object(image_client))
    app.container.external.product_service.override(providers.Object(product_service))
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        app.container.config.config.reset_override()
        app.container.external.image_client.reset_override()
        app.container.external.product_service.reset_override()


def generate_body(device_id="D1", **overrides):
    body = {
        "device_id": device_id,
        "scene": "interior",
        "style": "cozy_family",
        "lighting": "day",
        "intensity": "medium",
        "image_base64": SAMPLE_IMAGE,
    }
    body.update(overrides)
    return body


class TestHealthAndLiveness:
    def test_health(self, client, test_settings):
        res = client.get("/health")

        assert res.status_code == 200
        assert res.json()["status"] == "ok"
        assert res.json()["service"] == test_settings.APP_NAME

    def test_generate_liveness(self, client):
        res = client.get("/generate")

        assert res.status_code == 200
        assert "working" in res.json()["message"]


class TestGenerateRouter:
    def test_three_generations_then_403(self, client):
        for expected in (2, 1, 0):
            res = client.post("/generate", json=generate_body())
            assert res.status_code == 200
            body = res.json()
            assert body["generationsRemaining"] == expected
            assert body["decorated_image_base64"].startswith("data:image/png;base64,")
            assert len(body["products"]) == 4
            assert body["meta"]["aiGenerated"] is True

        res = client.post("/generate", json=generate_body())

        assert res.status_code == 403
        body = res.json()
        assert body["error"] == "QUOTA_EXHAUSTED"
        assert body["generationsRemaining"] == 0
        assert body["totalGenerated"] == 3

    def test_generation_failure_restores_quota(self, client, image_client):
        image_client.fail_with = ImageGenerationError()

        res = client.post("/generate", json=generate_body())

        assert res.status_code == 500
        assert res.json()["error"] == "GENERATION_FAILED"
        assert client.get("/referral/user/D1").json()["generationsRemaining"] == 3

    @pytest.mark.parametrize(
        "overrides",
        [
            {"style": "gothic"},
            {"scene": "garage"},
            {"style": "custom"},
            {"intensity": "extreme"},
            {"image_base64": "https://example.com/photo.jpg"},
        ],
    )
    def test_invalid_request_is_400(self, client, image_client, overrides):
        res = client.post("/generate", json=generate_body(**overrides))

        assert res.status_code == 400
        assert res.json()["error"] == "VALIDATION_ERROR"
        assert image_client.generate_calls == 0

    def test_custom_style_with_prompt(self, client):
        res = client.post(
            "/generate",
            json=generate_body(style="custom", prompt="Candy canes everywhere"),
        )

        assert res.status_code == 200
        assert res.json()["meta"]["style"] == "custom"


class TestReferralRouter:
    def test_user_quota_for_new_device(self, client):
        res = client.get("/referral/user/D9")

        assert res.status_code == 200
        assert res.json() == {
            "deviceId": "D9",
            "generationsRemaining": 3,
            "totalGenerated": 0,
        }

    def test_generate_referral_is_idempotent(self, client):
        first = client.post("/referral/generate-referral", json={"deviceId": "D1"}).json()
        second = client.post("/referral/generate-referral", json={"deviceId": "D1"}).json()

        assert first["code"] == second["code"]
        assert first["shareUrl"].endswith(first["code"])

    def test_generate_referral_requires_device(self, client):
        res = client.post("/referral/generate-referral", json={})

        assert res.status_code == 400
        assert res.json()["error"] == "VALIDATION_ERROR"

    def test_claim_scenario(self, client):
        code = client.post(
            "/referral/generate-referral", json={"deviceId": "D1"}
        ).json()["code"]

        res = client.post(
            "/referral/claim-referral", json={"code": code, "claimerDeviceId": "D2"}
        )
        assert res.status_code == 200
        assert res.json()["reward"] == {"claimer": 3, "referrer": 3}
        assert res.json()["referrerDeviceId"] == "D1"

        again = client.post(
            "/referral/claim-referral", json={"code": code, "claimerDeviceId": "D2"}
        )
        assert again.status_code == 400
        assert again.json()["error"] == "ALREADY_CLAIMED"

        assert client.get("/referral/user/D1").json()["generationsRemaining"] == 6
        assert client.get("/referral/user/D2").json()["generationsRemaining"] == 6

    def test_self_claim(self, client):
        code = client.post(
            "/referral/generate-referral", json={"deviceId": "D1"}
        ).json()["code"]

        res = client.post(
            "/referral/claim-referral", json={"code": code, "claimerDeviceId": "D1"}
        )

        assert res.status_code == 400
        assert res.json()["error"] == "SELF_CLAIM"

    def test_unknown_code(self, client):
        res = client.post(
            "/referral/claim-referral", json={"code": "ZZZZZZ", "claimerDeviceId": "D2"}
        )

        assert res.status_code == 404
        assert res.json()["error"] == "NOT_FOUND"

    def test_claim_requires_fields(self, client):
        res = client.post("/referral/claim-referral", json={"code": "ABCDEF"})

        assert res.status_code == 400

    def test_stats(self, client):
        missing = client.get("/referral/stats/D1")
        assert missing.status_code == 404
        assert missing.json()["hasCode"] is False

        code = client.post(
            "/referral/generate-referral", json={"deviceId": "D1"}
        ).json()["code"]
        client.post("/referral/claim-referral", json={"code": code, "claimerDeviceId": "D2"})

        body = client.get("/referral/stats/D1").json()

        assert body["hasCode"] is True
        assert body["code"] == code
        assert body["totalReferrals"] == 1
        assert body["designsEarnedFromReferrals"] == 3
        assert body["generationsRemaining"] == 6

    def test_code_stats(self, client):
        code = client.post(
            "/referral/generate-referral", json={"deviceId": "D1"}
        ).json()["code"]
        client.post("/referral/claim-referral", json={"code": code, "claimerDeviceId": "D2"})

        body = client.get(f"/referral/referral-stats/{code}").json()

        assert body["totalClaims"] == 1
        assert len(body["claims"]) == 1
        assert set(body["claims"][0]) == {"claimedAt"}


class TestGenerationsRouter:
    def test_purchase_scenario(self, client):
        payload = {
            "deviceId": "D1",
            "productId": "holiday_basic_pack",
            "transactionIds": ["tx1", "tx2"],
        }

        first = client.post("/generations/credit", json=payload)
        second = client.post("/generations/credit", json=payload)

        assert first.status_code == 200
        assert first.json()["creditedTransactions"] == 2
        assert first.json()["creditedAmount"] == 20
        assert first.json()["generationsRemaining"] == 23
        assert second.json()["creditedTransactions"] == 0
        assert second.json()["creditedAmount"] == 0
        assert second.json()["generationsRemaining"] == 23

    def test_unsupported_product(self, client):
        res = client.post(
            "/generations/credit",
            json={"deviceId": "D1", "productId": "mystery", "transactionIds": ["tx1"]},
        )

        assert res.status_code == 400
        assert res.json()["error"] == "UNSUPPORTED_PRODUCT"

    def test_empty_transactions(self, client):
        res = client.post(
            "/generations/credit",
            json={"deviceId": "D1", "productId": "holiday_basic_pack", "transactionIds": []},
        )

        assert res.status_code == 400
        assert res.json()["error"] == "VALIDATION_ERROR"
