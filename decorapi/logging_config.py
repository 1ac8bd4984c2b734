import logging.config
import sys


def setup_logging(log_level: str = "INFO"):
    """
    decorapi 로거 설정

    애플리케이션 로그는 stdout, WARNING 이상은 stderr로 상세 위치와 함께 출력한다.
    httpx는 요청 URL(쿼리의 Gemini API 키 포함)을 INFO로 남기므로 WARNING으로 올린다.
    """
    log_level = log_level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
                },
                "detailed": {
                    "format": "%(asctime)s | %(levelname)-8s | %(name)s\n%(pathname)s:%(lineno)d\n%(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "simple",
                    "stream": sys.stdout,
                    "level": "DEBUG",
                },
                "error_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "detailed",
                    "stream": sys.stderr,
                    "level": "WARNING",
                },
            },
            "root": {"handlers": ["console", "error_console"], "level": log_level},
            "loggers": {
                "decorapi": {"level": log_level, "propagate": True},
                "httpx": {"level": "WARNING", "propagate": True},
            },
        }
    )
