from fastapi import Depends, Request
from sqlalchemy.orm import Session

from decorapi.config import Settings
from decorapi.database.session import get_db
from decorapi.providers.image.gemini import ImageClient

# Services
from decorapi.services.generation_service import GenerationService
from decorapi.services.product_service import ProductService
from decorapi.services.purchase_service import PurchaseService
from decorapi.services.quota_service import QuotaService
from decorapi.services.referral_service import ReferralService


def get_settings(request: Request) -> Settings:
    return request.app.container.config.config()


def get_image_client(request: Request) -> ImageClient:
    return request.app.container.external.image_client()


def get_product_service(request: Request) -> ProductService:
    return request.app.container.external.product_service()


def get_quota_service(
    db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
) -> QuotaService:
    return QuotaService(db=db, settings=settings)


def get_referral_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    quota_service: QuotaService = Depends(get_quota_service),
) -> ReferralService:
    return ReferralService(db=db, settings=settings, quota_service=quota_service)


def get_purchase_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    quota_service: QuotaService = Depends(get_quota_service),
) -> PurchaseService:
    return PurchaseService(db=db, settings=settings, quota_service=quota_service)


def get_generation_service(
    quota_service: QuotaService = Depends(get_quota_service),
    image_client: ImageClient = Depends(get_image_client),
    product_service: ProductService = Depends(get_product_service),
) -> GenerationService:
    return GenerationService(
        quota_service=quota_service,
        image_client=image_client,
        product_service=product_service,
    )
