"""
Test data contract stability.
Ensures the internal model and its wire shape don't break.
"""
from storefront.models.catalog import (
    PageInfo,
    PageState,
    Product,
    ProductPage,
)
from storefront.models.filters import (
    AppliedFilter,
    AvailableFilter,
    FilterQuery,
    PriceFilter,
    ProductTypeFilter,
    UrlParam,
    VariantOptionFilter,
    VendorFilter,
)


def test_filter_inputs_contract():
    query = FilterQuery(filters=(
        AvailableFilter(True),
        VendorFilter("Acme"),
        ProductTypeFilter("Shoes"),
        VariantOptionFilter("Color", "Red"),
        PriceFilter(min=10, max=20.5),
    ))

    assert query.filter_inputs() == [
        {"available": True},
        {"productVendor": "Acme"},
        {"productType": "Shoes"},
        {"variantOption": {"name": "Color", "value": "Red"}},
        {"price": {"min": 10, "max": 20.5}},
    ]


def test_price_filter_omits_missing_bound():
    assert PriceFilter(max=0).to_input() == {"price": {"max": 0}}


def test_applied_filter_contract():
    applied = AppliedFilter(label="In stock", url_param=UrlParam("available", "true"))

    assert applied.to_dict() == {"label": "In stock", "urlParam": {"key": "available", "value": "true"}}


def test_product_equality_ignores_raw():
    a = Product(id="1", title="A", handle="a", raw={"extra": 1})
    b = Product(id="1", title="A", handle="a", raw={"extra": 2})

    assert a == b


def test_page_state_never_shrinks():
    state = PageState.from_page(ProductPage(
        products=(Product(id="1", title="A", handle="a"),),
        page_info=PageInfo(has_next_page=True, end_cursor="abc")
    ))

    merged = state.merged(ProductPage(products=(), page_info=PageInfo(has_next_page=False, end_cursor=None)))

    assert len(merged.products) == 1
    assert merged.has_next_page is False
    assert merged.end_cursor is None
    # The earlier snapshot is untouched
    assert state.has_next_page is True
