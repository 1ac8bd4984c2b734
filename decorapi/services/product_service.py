"""
상품 추천 서비스

생성 이미지에서 인식된 장식 아이템을 Amazon 검색 링크로 변환하고,
개수가 부족하면 스타일별 정적 카탈로그로 채운다. 추천 실패가 생성 요청을
실패시키지는 않는다.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote

from decorapi.schemas.generate import AffiliateProduct, DecorStyle, DetectedProduct

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "products.json"
DEFAULT_CATALOG_STYLE = DecorStyle.CLASSIC_CHRISTMAS.value

DETECTED_PRODUCT_PRICE = "From $19.99"
DETECTED_PRODUCT_IMAGE = "https://images.unsplash.com/photo-1512389142860-9c449e58a543?w=400"
AMAZON_SEARCH_URL = "https://www.amazon.com/s"


def load_product_catalog(path: Optional[Path] = None) -> Dict[str, List[AffiliateProduct]]:
    """스타일별 대체 상품 카탈로그 로드 (파일이 없거나 깨졌으면 빈 카탈로그)"""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Error loading product catalog {catalog_path}: {str(e)}")
        return {}

    return {
        style: [AffiliateProduct.model_validate(item) for item in items]
        for style, items in raw.items()
    }


def with_affiliate_tag(link: str, tag: str) -> str:
    if not tag or f"tag={tag}" in link:
        return link
    separator = "&" if "?" in link else "?"
    return f"{link}{separator}tag={tag}"


class ProductService:
    def __init__(
        self,
        catalog: Dict[str, List[AffiliateProduct]],
        affiliate_tag: str = "",
        min_suggestions: int = 4,
        max_suggestions: int = 6,
    ):
        self.catalog = catalog
        self.affiliate_tag = affiliate_tag
        self.min_suggestions = min_suggestions
        self.max_suggestions = max_suggestions

    def from_detected(self, product: DetectedProduct) -> AffiliateProduct:
        link = f"{AMAZON_SEARCH_URL}?k={quote(product.search_term, safe='')}"
        return AffiliateProduct(
            name=product.product_name,
            price=DETECTED_PRODUCT_PRICE,
            image=DETECTED_PRODUCT_IMAGE,
            link=with_affiliate_tag(link, self.affiliate_tag),
        )

    def fallback_products(self, style: DecorStyle) -> List[AffiliateProduct]:
        """스타일 카탈로그 (custom 등 없는 스타일은 classic_christmas)"""
        products = self.catalog.get(style.value) or self.catalog.get(DEFAULT_CATALOG_STYLE, [])
        return [
            product.model_copy(
                update={"link": with_affiliate_tag(product.link, self.affiliate_tag)}
            )
            for product in products
        ]

    def build_suggestions(
        self, detected: List[DetectedProduct], style: DecorStyle
    ) -> List[AffiliateProduct]:
        products = [self.from_detected(item) for item in detected if item.search_term][
            : self.max_suggestions
        ]
        if len(products) < self.min_suggestions:
            logger.info(
                f"Detected {len(products)} products, padding from {style.value} catalog"
            )
            needed = self.min_suggestions - len(products)
            products.extend(self.fallback_products(style)[:needed])
        return products
