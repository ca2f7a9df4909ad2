"""
Filter, sort and applied-filter contracts.
The GraphQL `ProductFilter` input is built from these and nothing else.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode

from storefront.errors import DataContractError

QueryPairs = Union[str, Iterable[Tuple[str, str]]]

# Keys read by first occurrence only; a repeat never becomes its own filter.
SINGLE_VALUED_KEYS = frozenset({"minPrice", "maxPrice"})


def query_pairs(query: QueryPairs) -> List[Tuple[str, str]]:
    if isinstance(query, str):
        return parse_qsl(query.lstrip("?"), keep_blank_values=True)
    return [(str(key), str(value)) for key, value in query]


class FilterParam:
    """Base class of the closed set of product filter kinds."""

    def to_input(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class AvailableFilter(FilterParam):
    available: bool

    def __post_init__(self):
        if not isinstance(self.available, bool):
            raise DataContractError(f"available must be a bool, got {self.available!r}")

    def to_input(self) -> Dict[str, Any]:
        return {"available": self.available}


@dataclass(frozen=True)
class VendorFilter(FilterParam):
    vendor: str

    def __post_init__(self):
        if not isinstance(self.vendor, str):
            raise DataContractError(f"vendor must be a string, got {self.vendor!r}")

    def to_input(self) -> Dict[str, Any]:
        return {"productVendor": self.vendor}


@dataclass(frozen=True)
class ProductTypeFilter(FilterParam):
    product_type: str

    def __post_init__(self):
        if not isinstance(self.product_type, str):
            raise DataContractError(f"product_type must be a string, got {self.product_type!r}")

    def to_input(self) -> Dict[str, Any]:
        return {"productType": self.product_type}


@dataclass(frozen=True)
class VariantOptionFilter(FilterParam):
    name: str
    value: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise DataContractError(f"variant option name must be a string, got {self.name!r}")
        if self.value is not None and not isinstance(self.value, str):
            raise DataContractError(f"variant option value must be a string, got {self.value!r}")

    def to_input(self) -> Dict[str, Any]:
        return {"variantOption": {"name": self.name, "value": self.value}}


@dataclass(frozen=True)
class PriceFilter(FilterParam):
    min: Optional[float] = None
    max: Optional[float] = None

    def __post_init__(self):
        if self.min is None and self.max is None:
            raise DataContractError("price filter needs at least one bound")
        for bound in (self.min, self.max):
            if bound is not None and (isinstance(bound, bool) or not isinstance(bound, (int, float))):
                raise DataContractError(f"price bound must be a number, got {bound!r}")

    def to_input(self) -> Dict[str, Any]:
        price = {}
        if self.min is not None:
            price["min"] = self.min
        if self.max is not None:
            price["max"] = self.max
        return {"price": price}


FILTER_KINDS = (AvailableFilter, VendorFilter, ProductTypeFilter, VariantOptionFilter, PriceFilter)


@dataclass(frozen=True)
class UrlParam:
    """The exact query-string pair that produced a filter."""
    key: str
    value: str

    def strip_from(self, query: QueryPairs) -> str:
        """
        Return `query` re-encoded without this pair.

        For repeatable keys only the first matching occurrence is dropped.
        Single-valued keys (the price bounds) lose every occurrence, since
        only the first one is ever read. Any `cursor` is dropped too: a
        cursor belongs to the result set it was issued for.
        """
        remaining = []
        removed = False
        for key, value in query_pairs(query):
            if key == "cursor":
                continue
            if key == self.key and key in SINGLE_VALUED_KEYS:
                continue
            if not removed and key == self.key and value == self.value:
                removed = True
                continue
            remaining.append((key, value))
        return urlencode(remaining)

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass(frozen=True)
class AppliedFilter:
    """A filter currently in effect, as shown to (and removable by) the shopper."""
    label: str
    url_param: UrlParam

    def remove_query(self, query: QueryPairs) -> str:
        return self.url_param.strip_from(query)

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "urlParam": self.url_param.to_dict()}


class SortKey(str, Enum):
    RELEVANCE = "RELEVANCE"
    PRICE = "PRICE"
    BEST_SELLING = "BEST_SELLING"
    CREATED = "CREATED"
    MANUAL = "MANUAL"


@dataclass(frozen=True)
class SortSpec:
    sort_key: SortKey = SortKey.RELEVANCE
    reverse: bool = False

    def to_variables(self) -> Dict[str, Any]:
        return {"sortKey": self.sort_key.value, "reverse": self.reverse}


DEFAULT_SORT = SortSpec()


@dataclass(frozen=True)
class FilterQuery:
    """Everything the collection query needs from the incoming query string."""
    filters: Tuple[FilterParam, ...] = ()
    applied_filters: Tuple[AppliedFilter, ...] = ()
    sort: SortSpec = field(default=DEFAULT_SORT)
    cursor: Optional[str] = None

    def __post_init__(self):
        prices = [f for f in self.filters if isinstance(f, PriceFilter)]
        if len(prices) > 1:
            raise DataContractError("at most one price filter per request")
        for f in self.filters:
            if not isinstance(f, FILTER_KINDS):
                raise DataContractError(f"unknown filter kind: {f!r}")

    def filter_inputs(self) -> List[Dict[str, Any]]:
        return [f.to_input() for f in self.filters]
