"""
Query-string translation for collection pages.

Turns the shopper's query string into the GraphQL product filters, the
applied-filter chips shown above the grid and the sort order. Malformed
input never fails the page: it degrades to a default value instead.
"""
import math
import re
from typing import Iterable, List, Optional, Sequence, Union

from storefront.errors import InvalidParameterError
from storefront.logger import logger
from storefront.models.catalog import FilterFacet
from storefront.models.filters import (
    AppliedFilter,
    AvailableFilter,
    DEFAULT_SORT,
    FilterParam,
    FilterQuery,
    PriceFilter,
    ProductTypeFilter,
    QueryPairs,
    SortKey,
    SortSpec,
    UrlParam,
    VendorFilter,
    VariantOptionFilter,
    query_pairs,
)

AVAILABLE_KEY = "available"
VARIANT_OPTION_MARKER = "variantOption"
MIN_PRICE_KEY = "minPrice"
MAX_PRICE_KEY = "maxPrice"
SORT_KEY = "sort"
CURSOR_KEY = "cursor"

SCALAR_FILTERS = {
    "productVendor": VendorFilter,
    "productType": ProductTypeFilter,
}

SORT_OPTIONS = {
    "price-high-low": SortSpec(SortKey.PRICE, True),
    "price-low-high": SortSpec(SortKey.PRICE, False),
    "best-selling": SortSpec(SortKey.BEST_SELLING, False),
    "newest": SortSpec(SortKey.CREATED, True),
    "featured": SortSpec(SortKey.MANUAL, False),
}

# Facets shown in the filter drawer, in upstream order
DRAWER_FACET_IDS = ("filter.v.price", "filter.p.product_type", "filter.v.option.color")


# Unsigned prefixed integer literals, read the way a plain number input reads them
RADIX_LITERAL = re.compile(r"0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))")
RADIX_BASES = {"hex": 16, "oct": 8, "bin": 2}


def _parse_number(raw: Optional[str]) -> Optional[float]:
    """Read `raw` as a finite number, or None."""
    if raw is None:
        return None
    text = raw.strip()
    # float() accepts digit separators, a plain number input does not
    if not text or "_" in text:
        return None
    literal = RADIX_LITERAL.fullmatch(text)
    try:
        if literal:
            group, digits = next((g, d) for g, d in literal.groupdict().items() if d)
            number = float(int(digits, RADIX_BASES[group]))
        else:
            number = float(text)
    except (ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_price(raw: Optional[str]) -> Union[int, float]:
    """
    Price coercion policy: anything that is not a finite number becomes 0.

    Hex, octal and binary literals (`0x10`, `0o17`, `0b11`) are read as
    numbers. Integral values come back as int so labels render as `$10`,
    not `$10.0`.
    """
    number = _parse_number(raw)
    if number is None:
        return 0
    if number.is_integer():
        return int(number)
    return number


def _is_price_number(raw: str) -> bool:
    return _parse_number(raw) is not None


def sort_from_param(sort_param: Optional[str]) -> SortSpec:
    """Map a `sort` token to a SortSpec; unknown or missing gives relevance."""
    return SORT_OPTIONS.get(sort_param or "", DEFAULT_SORT)


def _variant_option(key: str, value: str, strict: bool) -> VariantOptionFilter:
    name, separator, option_value = value.partition(":")
    if separator:
        return VariantOptionFilter(name=name, value=option_value)

    if strict:
        raise InvalidParameterError(key, value, "expected <option name>:<option value>")
    logger.warning(f"Variant option parameter {key}={value!r} has no name:value separator")
    return VariantOptionFilter(name=value, value=None)


def parse_filter_query(query: QueryPairs, strict: bool = False) -> FilterQuery:
    """
    Translate query-string pairs into a FilterQuery.

    Args:
        query: Raw query string or ordered (key, value) pairs
        strict: Raise InvalidParameterError for malformed variant options
            and prices instead of coercing them

    Returns:
        FilterQuery with filters and applied filters in parameter order;
        the combined price filter and its chips always come last
    """
    pairs = query_pairs(query)
    filters: List[FilterParam] = []
    applied: List[AppliedFilter] = []
    sort_token = None
    cursor = None
    min_price = None
    max_price = None

    for key, value in pairs:
        if key == AVAILABLE_KEY:
            in_stock = value == "true"
            filters.append(AvailableFilter(in_stock))
            applied.append(AppliedFilter(
                label="In stock" if in_stock else "Out of stock",
                url_param=UrlParam(key, value)
            ))
        elif key in SCALAR_FILTERS:
            filters.append(SCALAR_FILTERS[key](value))
            applied.append(AppliedFilter(label=value, url_param=UrlParam(key, value)))
        elif VARIANT_OPTION_MARKER in key:
            option = _variant_option(key, value, strict)
            filters.append(option)
            applied.append(AppliedFilter(
                label=option.value if option.value is not None else value,
                url_param=UrlParam(key, value)
            ))
        elif key == MIN_PRICE_KEY and min_price is None:
            min_price = value
        elif key == MAX_PRICE_KEY and max_price is None:
            max_price = value
        elif key == SORT_KEY and sort_token is None:
            sort_token = value
        elif key == CURSOR_KEY and cursor is None:
            cursor = value or None

    if min_price is not None or max_price is not None:
        bounds = {}
        for key, raw, label in ((MIN_PRICE_KEY, min_price, "Min"), (MAX_PRICE_KEY, max_price, "Max")):
            if raw is None:
                continue
            if strict and not _is_price_number(raw):
                raise InvalidParameterError(key, raw, "expected a number")
            amount = coerce_price(raw)
            bounds["min" if key == MIN_PRICE_KEY else "max"] = amount
            applied.append(AppliedFilter(label=f"{label}: ${amount}", url_param=UrlParam(key, raw)))
        filters.append(PriceFilter(**bounds))

    return FilterQuery(
        filters=tuple(filters),
        applied_filters=tuple(applied),
        sort=sort_from_param(sort_token),
        cursor=cursor
    )


def select_drawer_facets(facets: Iterable[FilterFacet], facet_ids: Sequence[str] = DRAWER_FACET_IDS) -> List[FilterFacet]:
    """Keep the facets the filter drawer shows."""
    return [facet for facet in facets if facet.id in facet_ids]
