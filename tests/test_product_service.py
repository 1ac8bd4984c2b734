from pathlib import Path

from decorapi.schemas.generate import DecorStyle, DetectedProduct
from decorapi.services.product_service import (
    ProductService,
    load_product_catalog,
    with_affiliate_tag,
)


def detected(n):
    return [
        DetectedProduct(
            product_name=f"Item {i}", description="", search_term=f"item {i}"
        )
        for i in range(n)
    ]


class TestProductCatalog:
    def test_catalog_covers_every_preset_style(self):
        catalog = load_product_catalog()

        for style in DecorStyle:
            if style == DecorStyle.CUSTOM:
                continue
            assert len(catalog[style.value]) >= 4

    def test_missing_catalog_file_is_empty(self, tmp_path: Path):
        assert load_product_catalog(tmp_path / "missing.json") == {}


class TestAffiliateTag:
    def test_appends_with_ampersand(self):
        assert (
            with_affiliate_tag("https://www.amazon.com/s?k=bow", "tag-20")
            == "https://www.amazon.com/s?k=bow&tag=tag-20"
        )

    def test_appends_with_question_mark(self):
        assert (
            with_affiliate_tag("https://www.amazon.com/dp/B01", "tag-20")
            == "https://www.amazon.com/dp/B01?tag=tag-20"
        )

    def test_no_tag_or_already_tagged(self):
        link = "https://www.amazon.com/s?k=bow&tag=tag-20"
        assert with_affiliate_tag(link, "tag-20") == link
        assert with_affiliate_tag("https://x.test/a", "") == "https://x.test/a"


class TestBuildSuggestions:
    def test_pads_to_minimum(self, product_service):
        products = product_service.build_suggestions(detected(1), DecorStyle.ELEGANT_GOLD)

        assert len(products) == 4
        assert products[1].name == "Gold Glitter Ornament Set"

    def test_keeps_all_detected_when_enough(self, product_service):
        products = product_service.build_suggestions(detected(6), DecorStyle.ELEGANT_GOLD)

        assert [p.name for p in products] == [f"Item {i}" for i in range(6)]

    def test_detected_products_are_capped(self, product_service):
        products = product_service.build_suggestions(detected(9), DecorStyle.ELEGANT_GOLD)

        assert [p.name for p in products] == [f"Item {i}" for i in range(6)]

    def test_custom_style_falls_back_to_classic(self, product_service):
        products = product_service.build_suggestions([], DecorStyle.CUSTOM)

        assert len(products) == 4
        assert products[0].name == "Warm White String Lights"

    def test_catalog_links_are_not_mutated(self):
        catalog = load_product_catalog()
        service = ProductService(catalog=catalog, affiliate_tag="tag-20")

        service.fallback_products(DecorStyle.COZY_FAMILY)

        assert all("tag=" not in p.link for p in catalog["cozy_family"])
