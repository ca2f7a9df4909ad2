"""
Canonical internal catalog contract.
Product data is owned by the commerce API; these records only carry
what the storefront renders plus the raw node.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Money:
    amount: str
    currency_code: str

    def to_dict(self) -> Dict:
        return {"amount": self.amount, "currencyCode": self.currency_code}


@dataclass(frozen=True)
class Image:
    url: str
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            "url": self.url,
            "altText": self.alt_text,
            "width": self.width,
            "height": self.height
        }


@dataclass(frozen=True)
class ProductVariant:
    id: str
    price: Optional[Money] = None
    compare_at_price: Optional[Money] = None
    image: Optional[Image] = None
    selected_options: Tuple[Tuple[str, str], ...] = ()

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "price": self.price.to_dict() if self.price else None,
            "compareAtPrice": self.compare_at_price.to_dict() if self.compare_at_price else None,
            "image": self.image.to_dict() if self.image else None,
            "selectedOptions": [
                {"name": name, "value": value} for name, value in self.selected_options
            ]
        }


@dataclass(frozen=True)
class Product:
    """
    One product card.
    `raw` keeps the upstream node untouched for anything not modelled here.
    """
    id: str
    title: str
    handle: str
    published_at: Optional[str] = None
    variant: Optional[ProductVariant] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "handle": self.handle,
            "publishedAt": self.published_at,
            "variant": self.variant.to_dict() if self.variant else None
        }


@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool = False
    end_cursor: Optional[str] = None

    def to_dict(self) -> Dict:
        return {"hasNextPage": self.has_next_page, "endCursor": self.end_cursor}


@dataclass(frozen=True)
class ProductPage:
    """One page of a product connection."""
    products: Tuple[Product, ...] = ()
    page_info: PageInfo = field(default_factory=PageInfo)


@dataclass(frozen=True)
class FilterValue:
    id: str
    label: str
    count: int = 0
    input: Optional[str] = None

    def to_dict(self) -> Dict:
        return {"id": self.id, "label": self.label, "count": self.count, "input": self.input}


@dataclass(frozen=True)
class FilterFacet:
    """A filter dimension offered by the API for the current result set."""
    id: str
    label: str
    type: str
    values: Tuple[FilterValue, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type,
            "values": [value.to_dict() for value in self.values]
        }


@dataclass(frozen=True)
class CollectionSummary:
    title: str
    handle: str
    id: Optional[str] = None
    image: Optional[Image] = None

    def to_dict(self) -> Dict:
        data = {"title": self.title, "handle": self.handle}
        if self.id is not None:
            data["id"] = self.id
        if self.image is not None:
            data["image"] = self.image.to_dict()
        return data


@dataclass(frozen=True)
class CollectionPage:
    id: str
    title: str
    handle: str
    description: str = ""
    products: ProductPage = field(default_factory=ProductPage)
    facets: Tuple[FilterFacet, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "handle": self.handle,
            "description": self.description,
            "products": [product.to_dict() for product in self.products.products],
            "pageInfo": self.products.page_info.to_dict()
        }


@dataclass(frozen=True)
class PageState:
    """
    Products visible in a collection view.
    Only ever replaced by a longer state; never shrinks.
    """
    products: Tuple[Product, ...] = ()
    end_cursor: Optional[str] = None
    has_next_page: bool = False

    @classmethod
    def from_page(cls, page: ProductPage) -> "PageState":
        return cls(
            products=tuple(page.products),
            end_cursor=page.page_info.end_cursor,
            has_next_page=page.page_info.has_next_page
        )

    def merged(self, page: ProductPage) -> "PageState":
        """Append `page` in arrival order; duplicate ids are kept."""
        return PageState(
            products=self.products + tuple(page.products),
            end_cursor=page.page_info.end_cursor,
            has_next_page=page.page_info.has_next_page
        )


@dataclass(frozen=True)
class ShopLayout:
    name: str
    description: Optional[str] = None

    def to_dict(self) -> Dict:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True)
class CollectionResult:
    """The collection page plus the collection list shown in navigation."""
    collection: CollectionPage
    collections: List[CollectionSummary] = field(default_factory=list)
