from dependency_injector import containers, providers

from decorapi.config import Settings
from decorapi.providers.image.gemini import GeminiImageClient
from decorapi.services.product_service import ProductService, load_product_catalog


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class ExternalModule(containers.DeclarativeContainer):
    """External collaborators shared across requests."""

    settings = providers.Dependency(instance_of=Settings)

    image_client = providers.Singleton(
        GeminiImageClient,
        api_key=settings.provided.GEMINI_API_KEY,
        base_url=settings.provided.GEMINI_API_BASE_URL,
        image_model=settings.provided.GEMINI_IMAGE_MODEL,
        vision_model=settings.provided.GEMINI_VISION_MODEL,
        timeout_seconds=settings.provided.GENERATION_TIMEOUT_SECONDS,
    )
    product_catalog = providers.Singleton(load_product_catalog)
    product_service = providers.Singleton(
        ProductService,
        catalog=product_catalog,
        affiliate_tag=settings.provided.AMAZON_AFFILIATE_TAG,
        min_suggestions=settings.provided.MIN_PRODUCT_SUGGESTIONS,
        max_suggestions=settings.provided.MAX_PRODUCT_SUGGESTIONS,
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    config = providers.Container(ConfigModule)
    external = providers.Container(ExternalModule, settings=config.config)
