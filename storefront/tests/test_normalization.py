"""
Test normalization behavior.
Ensures raw GraphQL payloads are safely normalized.
"""
import pytest

from storefront.errors import NormalizationError
from storefront.normalizers.storefront import StorefrontNormalizer


RAW_PRODUCT = {
    "id": "gid://shopify/Product/7982853619896",
    "title": "The Collection Snowboard: Liquid",
    "publishedAt": "2023-01-10T12:00:00Z",
    "handle": "the-collection-snowboard-liquid",
    "variants": {
        "nodes": [
            {
                "id": "gid://shopify/ProductVariant/43696148152504",
                "image": {
                    "url": "https://cdn.shopify.com/s/files/liquid.png",
                    "altText": "Liquid snowboard",
                    "width": 1600,
                    "height": 1600
                },
                "price": {"amount": "749.95", "currencyCode": "USD"},
                "compareAtPrice": {"amount": "899.95", "currencyCode": "USD"},
                "selectedOptions": [{"name": "Title", "value": "Default Title"}]
            }
        ]
    }
}


def test_normalize_valid_product():
    product = StorefrontNormalizer.normalize_product(RAW_PRODUCT)

    assert product.id == "gid://shopify/Product/7982853619896"
    assert product.handle == "the-collection-snowboard-liquid"
    assert product.published_at == "2023-01-10T12:00:00Z"
    assert product.variant.price.amount == "749.95"
    assert product.variant.compare_at_price.currency_code == "USD"
    assert product.variant.image.alt_text == "Liquid snowboard"
    assert product.variant.selected_options == (("Title", "Default Title"),)
    assert product.raw is RAW_PRODUCT


def test_normalize_product_without_variants():
    product = StorefrontNormalizer.normalize_product(
        {"id": "gid://shopify/Product/1", "title": "Gift card", "handle": "gift-card"}
    )

    assert product.variant is None
    assert product.to_dict()["variant"] is None


def test_normalize_variant_without_optional_fields():
    raw = dict(RAW_PRODUCT, variants={"nodes": [{"id": "gid://shopify/ProductVariant/1", "price": None, "image": None}]})

    product = StorefrontNormalizer.normalize_product(raw)

    assert product.variant.price is None
    assert product.variant.image is None


def test_normalize_product_missing_handle():
    with pytest.raises(NormalizationError) as exc_info:
        StorefrontNormalizer.normalize_product({"id": "gid://shopify/Product/1", "title": "No handle"})

    assert "handle" in str(exc_info.value)


def test_flatten_connection_edges_and_nodes():
    nodes = [{"id": "1"}, {"id": "2"}]

    assert StorefrontNormalizer.flatten_connection({"nodes": nodes}) == nodes
    assert StorefrontNormalizer.flatten_connection({"edges": [{"node": n} for n in nodes]}) == nodes
    assert StorefrontNormalizer.flatten_connection(None) == []


def test_normalize_product_page_keeps_order():
    raw = {
        "pageInfo": {"hasNextPage": True, "endCursor": "eyJsYXN0X2lkIjo"},
        "nodes": [
            dict(RAW_PRODUCT, id="gid://shopify/Product/2", handle="b"),
            dict(RAW_PRODUCT, id="gid://shopify/Product/1", handle="a"),
        ]
    }

    page = StorefrontNormalizer.normalize_product_page(raw)

    assert [p.handle for p in page.products] == ["b", "a"]
    assert page.page_info.has_next_page is True
    assert page.page_info.end_cursor == "eyJsYXN0X2lkIjo"


def test_normalize_empty_product_page():
    page = StorefrontNormalizer.normalize_product_page({})

    assert page.products == ()
    assert page.page_info.has_next_page is False
    assert page.page_info.end_cursor is None


def test_normalize_collection_with_facets():
    raw = {
        "id": "gid://shopify/Collection/1",
        "title": "Snowboards",
        "description": None,
        "handle": "snowboards",
        "products": {
            "filters": [
                {
                    "id": "filter.v.option.color",
                    "label": "Color",
                    "type": "LIST",
                    "values": [
                        {"id": "filter.v.option.color.red", "label": "Red", "count": 3,
                         "input": "{\"variantOption\":{\"name\":\"color\",\"value\":\"Red\"}}"}
                    ]
                }
            ],
            "pageInfo": {"hasNextPage": False, "endCursor": None},
            "nodes": [RAW_PRODUCT]
        }
    }

    collection = StorefrontNormalizer.normalize_collection(raw)

    assert collection.description == ""
    assert collection.facets[0].id == "filter.v.option.color"
    assert collection.facets[0].values[0].count == 3
    assert len(collection.products.products) == 1


def test_normalize_collection_missing_id():
    with pytest.raises(NormalizationError):
        StorefrontNormalizer.normalize_collection({"title": "Broken", "handle": "broken"})


def test_normalize_collection_summaries():
    summaries = StorefrontNormalizer.normalize_collection_summaries(
        {"edges": [{"node": {"title": "Shoes", "handle": "shoes"}}, {"node": {"title": "Hats", "handle": "hats"}}]}
    )

    assert [s.handle for s in summaries] == ["shoes", "hats"]
    assert summaries[0].to_dict() == {"title": "Shoes", "handle": "shoes"}


def test_normalize_shop():
    layout = StorefrontNormalizer.normalize_shop({"name": "Hydrogen Demo", "description": "Demo store"})

    assert layout.name == "Hydrogen Demo"

    with pytest.raises(NormalizationError):
        StorefrontNormalizer.normalize_shop(None)


def test_normalize_served_page_reads_collection_endpoint_body():
    served = StorefrontNormalizer.normalize_collection({
        "id": "gid://shopify/Collection/1",
        "title": "Snowboards",
        "handle": "snowboards",
        "products": {"pageInfo": {"hasNextPage": True, "endCursor": "abc"}, "nodes": [RAW_PRODUCT]}
    })

    page = StorefrontNormalizer.normalize_served_page(served.to_dict())

    assert page == served.products
    assert page.products[0].variant.compare_at_price.amount == "899.95"


def test_normalize_served_page_without_products():
    with pytest.raises(NormalizationError):
        StorefrontNormalizer.normalize_served_page({"pageInfo": {}})
