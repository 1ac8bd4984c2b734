import logging

from decorapi.logging_config import setup_logging


class TestSetupLogging:
    def test_levels(self):
        setup_logging("debug")

        assert logging.getLogger("decorapi").level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG
        # 요청 URL에 API 키가 실리므로 httpx INFO 로그는 남기지 않는다
        assert logging.getLogger("httpx").level == logging.WARNING
        assert not logging.getLogger("httpx").isEnabledFor(logging.INFO)

    def test_decorapi_propagates_to_root(self):
        setup_logging("INFO")

        app_logger = logging.getLogger("decorapi.services.quota_service")
        assert app_logger.getEffectiveLevel() == logging.INFO
        assert logging.getLogger("decorapi").handlers == []
        assert logging.getLogger("decorapi").propagate is True
