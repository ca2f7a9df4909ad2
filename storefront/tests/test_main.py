"""
HTTP surface tests.
The Storefront API is mocked at the service boundary.
"""
import pytest
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from storefront.config import config
from storefront.errors import ExternalServiceError, NotFoundError
from storefront.main import app
from storefront.models.catalog import (
    CollectionPage,
    CollectionResult,
    CollectionSummary,
    FilterFacet,
    PageInfo,
    Product,
    ProductPage,
    ShopLayout,
)
from storefront.services.storefront_service import storefront_service


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def collection_result():
    return CollectionResult(
        collection=CollectionPage(
            id="gid://shopify/Collection/1",
            title="Shoes",
            handle="shoes",
            description="All the shoes",
            products=ProductPage(
                products=(Product(id="gid://shopify/Product/1", title="Runner", handle="runner"),),
                page_info=PageInfo(has_next_page=True, end_cursor="abc")
            ),
            facets=(
                FilterFacet(id="filter.p.vendor", label="Brand", type="LIST"),
                FilterFacet(id="filter.v.price", label="Price", type="PRICE_RANGE"),
            )
        ),
        collections=[CollectionSummary(title="Shoes", handle="shoes")]
    )


def test_collection_page(client, collection_result):
    with patch.object(storefront_service, "get_collection", new=AsyncMock(return_value=collection_result)) as mock_get:
        response = client.get("/collections/shoes?available=true&productVendor=Acme&minPrice=10&sort=newest")

    assert response.status_code == 200
    data = response.json()

    assert data["collection"]["title"] == "Shoes"
    assert data["collection"]["pageInfo"] == {"hasNextPage": True, "endCursor": "abc"}
    assert [f["label"] for f in data["applied_filters"]] == ["In stock", "Acme", "Min: $10"]
    assert data["applied_filters"][1]["urlParam"] == {"key": "productVendor", "value": "Acme"}
    assert data["applied_filters"][1]["remove_url"] == "/collections/shoes?available=true&minPrice=10&sort=newest"
    assert [f["id"] for f in data["drawer_facets"]] == ["filter.v.price"]
    assert data["sort"] == {"sortKey": "CREATED", "reverse": True}
    assert data["seo"] == {"title": "Shoes", "description": "All the shoes"}
    assert data["analytics"]["resource_id"] == "gid://shopify/Collection/1"

    handle, filter_query = mock_get.await_args.args
    assert handle == "shoes"
    assert filter_query.filter_inputs() == [{"available": True}, {"productVendor": "Acme"}, {"price": {"min": 10}}]


def test_collection_page_with_cursor(client, collection_result):
    with patch.object(storefront_service, "get_collection", new=AsyncMock(return_value=collection_result)) as mock_get:
        response = client.get("/collections/shoes?cursor=abc")

    assert response.status_code == 200
    assert mock_get.await_args.args[1].cursor == "abc"


def test_remove_last_filter_links_to_bare_collection(client, collection_result):
    with patch.object(storefront_service, "get_collection", new=AsyncMock(return_value=collection_result)):
        response = client.get("/collections/shoes?productType=Shoes&cursor=abc")

    assert response.json()["applied_filters"][0]["remove_url"] == "/collections/shoes"


def test_remove_url_quotes_handle(client, collection_result):
    with patch.object(storefront_service, "get_collection", new=AsyncMock(return_value=collection_result)) as mock_get:
        response = client.get("/collections/summer%20sale?productVendor=Acme&productType=Shoes")

    assert mock_get.await_args.args[0] == "summer sale"
    assert response.json()["applied_filters"][0]["remove_url"] == "/collections/summer%20sale?productType=Shoes"


def test_collection_not_found(client):
    with patch.object(storefront_service, "get_collection", new=AsyncMock(side_effect=NotFoundError("collection", "nope"))):
        response = client.get("/collections/nope")

    assert response.status_code == 404


def test_collection_upstream_failure(client):
    with patch.object(storefront_service, "get_collection", new=AsyncMock(side_effect=ExternalServiceError("boom"))):
        response = client.get("/collections/shoes")

    assert response.status_code == 503


def test_strict_filter_params(client):
    with patch.object(config, "STRICT_FILTER_PARAMS", True), \
         patch.object(storefront_service, "get_collection", new=AsyncMock()) as mock_get:
        response = client.get("/collections/shoes?variantOption=Red")

    assert response.status_code == 400
    mock_get.assert_not_awaited()


def test_home(client):
    with patch.object(storefront_service, "get_layout", new=AsyncMock(return_value=ShopLayout(name="Demo"))), \
         patch.object(storefront_service, "get_featured_collections",
                      new=AsyncMock(return_value=[CollectionSummary(title="Summer", handle="summer")])):
        response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["shop"]["name"] == "Demo"
    assert data["collections"] == [{"title": "Summer", "handle": "summer"}]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
