import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure project root is on path for `decorapi` imports
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# 모듈 레벨 engine이 Postgres에 붙지 않도록 import 전에 설정
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from decorapi.config import Settings
from decorapi.models import Base
from decorapi.schemas.generate import DetectedProduct, GeneratedImage
from decorapi.services.product_service import ProductService, load_product_catalog
from decorapi.services.purchase_service import PurchaseService
from decorapi.services.quota_service import QuotaService
from decorapi.services.referral_service import ReferralService

SAMPLE_IMAGE = "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQ=="


class FakeImageClient:
    """외부 이미지 서비스 대역"""

    def __init__(self, fail_with=None, detected=None):
        self.fail_with = fail_with
        self.detected = detected if detected is not None else [
            DetectedProduct(
                product_name="Red Velvet Bow",
                description="Large bow on the wreath",
                search_term="red velvet christmas bow",
            )
        ]
        self.generate_calls = 0

    async def generate_decorated_image(self, request):
        self.generate_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return GeneratedImage(image_base64="ZGVjb3JhdGVk", mime_type="image/png")

    async def find_similar_products(self, image):
        return list(self.detected)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        INITIAL_FREE_GENERATIONS=3,
        REFERRAL_CLAIMER_REWARD=3,
        REFERRAL_REFERRER_REWARD=3,
        PRODUCT_CREDIT_MAP={"holiday_basic_pack": 10},
        GEMINI_API_KEY="test-key",
        AMAZON_AFFILIATE_TAG="holidayhome-20",
    )


@pytest.fixture
def quota_service(db_session, test_settings):
    return QuotaService(db=db_session, settings=test_settings)


@pytest.fixture
def referral_service(db_session, test_settings, quota_service):
    return ReferralService(
        db=db_session, settings=test_settings, quota_service=quota_service
    )


@pytest.fixture
def purchase_service(db_session, test_settings, quota_service):
    return PurchaseService(
        db=db_session, settings=test_settings, quota_service=quota_service
    )


@pytest.fixture
def product_service(test_settings):
    return ProductService(
        catalog=load_product_catalog(),
        affiliate_tag=test_settings.AMAZON_AFFILIATE_TAG,
        min_suggestions=test_settings.MIN_PRODUCT_SUGGESTIONS,
        max_suggestions=test_settings.MAX_PRODUCT_SUGGESTIONS,
    )


@pytest.fixture
def fake_image_client():
    return FakeImageClient()
