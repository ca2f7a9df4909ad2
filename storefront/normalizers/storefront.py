"""
Explicit normalization layer.
Converts Storefront API GraphQL payloads into the internal catalog model.
"""
from typing import Any, Dict, List, Optional

from storefront.errors import NormalizationError
from storefront.models.catalog import (
    CollectionPage,
    CollectionSummary,
    FilterFacet,
    FilterValue,
    Image,
    Money,
    PageInfo,
    Product,
    ProductPage,
    ProductVariant,
    ShopLayout,
)


class StorefrontNormalizer:
    """
    Normalizes raw GraphQL nodes into internal model.
    Connections may arrive as `nodes` or as `edges { node }`.
    """

    @staticmethod
    def flatten_connection(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Return the node list of a GraphQL connection."""
        if not connection:
            return []
        if connection.get("nodes") is not None:
            return list(connection["nodes"])
        return [edge["node"] for edge in connection.get("edges") or [] if edge.get("node")]

    @staticmethod
    def normalize_product(raw_product: Dict[str, Any]) -> Product:
        """
        Convert a product node, or a served product card, to internal model.

        Raises:
            NormalizationError: If the node lacks id, title or handle
        """
        try:
            variants = StorefrontNormalizer.flatten_connection(raw_product.get("variants"))
            # Served product cards carry their first variant directly
            if not variants and raw_product.get("variant"):
                variants = [raw_product["variant"]]
            return Product(
                id=raw_product["id"],
                title=raw_product["title"],
                handle=raw_product["handle"],
                published_at=raw_product.get("publishedAt"),
                variant=StorefrontNormalizer._normalize_variant(variants[0]) if variants else None,
                raw=raw_product
            )
        except (KeyError, TypeError, AttributeError) as e:
            keys = list(raw_product.keys()) if isinstance(raw_product, dict) else type(raw_product).__name__
            raise NormalizationError(
                f"Failed to normalize product: {str(e)}. Data keys: {keys}"
            ) from e

    @staticmethod
    def _normalize_variant(raw_variant: Dict[str, Any]) -> ProductVariant:
        return ProductVariant(
            id=raw_variant["id"],
            price=StorefrontNormalizer._normalize_money(raw_variant.get("price")),
            compare_at_price=StorefrontNormalizer._normalize_money(raw_variant.get("compareAtPrice")),
            image=StorefrontNormalizer._normalize_image(raw_variant.get("image")),
            selected_options=tuple(
                (option["name"], option["value"])
                for option in raw_variant.get("selectedOptions") or []
            )
        )

    @staticmethod
    def _normalize_money(raw_money: Optional[Dict[str, Any]]) -> Optional[Money]:
        if not raw_money:
            return None
        return Money(amount=str(raw_money["amount"]), currency_code=raw_money["currencyCode"])

    @staticmethod
    def _normalize_image(raw_image: Optional[Dict[str, Any]]) -> Optional[Image]:
        if not raw_image or not raw_image.get("url"):
            return None
        return Image(
            url=raw_image["url"],
            alt_text=raw_image.get("altText"),
            width=raw_image.get("width"),
            height=raw_image.get("height")
        )

    @staticmethod
    def normalize_product_page(raw_products: Dict[str, Any]) -> ProductPage:
        """Normalize a `products` connection, keeping upstream order."""
        if not raw_products:
            return ProductPage()

        page_info = raw_products.get("pageInfo") or {}
        return ProductPage(
            products=tuple(
                StorefrontNormalizer.normalize_product(node)
                for node in StorefrontNormalizer.flatten_connection(raw_products)
            ),
            page_info=PageInfo(
                has_next_page=bool(page_info.get("hasNextPage", False)),
                end_cursor=page_info.get("endCursor")
            )
        )

    @staticmethod
    def normalize_served_page(raw_collection: Optional[Dict[str, Any]]) -> ProductPage:
        """
        Normalize the `collection` member served by the collection page
        endpoint: a flat `products` list plus `pageInfo`.

        Raises:
            NormalizationError: If the payload has no product list
        """
        if not isinstance(raw_collection, dict) or not isinstance(raw_collection.get("products"), list):
            raise NormalizationError("Collection page payload has no products list")
        return StorefrontNormalizer.normalize_product_page({
            "nodes": raw_collection["products"],
            "pageInfo": raw_collection.get("pageInfo")
        })

    @staticmethod
    def normalize_facets(raw_filters: Optional[List[Dict[str, Any]]]) -> List[FilterFacet]:
        facets = []
        for raw in raw_filters or []:
            try:
                facets.append(FilterFacet(
                    id=raw["id"],
                    label=raw.get("label", ""),
                    type=raw.get("type", ""),
                    values=tuple(
                        FilterValue(
                            id=value["id"],
                            label=value.get("label", ""),
                            count=int(value.get("count") or 0),
                            input=value.get("input")
                        )
                        for value in raw.get("values") or []
                    )
                ))
            except (KeyError, TypeError, ValueError) as e:
                raise NormalizationError(f"Failed to normalize filter facet: {str(e)}") from e
        return facets

    @staticmethod
    def normalize_collection(raw_collection: Dict[str, Any]) -> CollectionPage:
        try:
            products = raw_collection.get("products") or {}
            return CollectionPage(
                id=raw_collection["id"],
                title=raw_collection["title"],
                handle=raw_collection["handle"],
                description=raw_collection.get("description") or "",
                products=StorefrontNormalizer.normalize_product_page(products),
                facets=tuple(StorefrontNormalizer.normalize_facets(products.get("filters")))
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise NormalizationError(f"Failed to normalize collection: {str(e)}") from e

    @staticmethod
    def normalize_collection_summaries(raw_collections: Optional[Dict[str, Any]]) -> List[CollectionSummary]:
        summaries = []
        for node in StorefrontNormalizer.flatten_connection(raw_collections):
            try:
                summaries.append(CollectionSummary(
                    title=node["title"],
                    handle=node["handle"],
                    id=node.get("id"),
                    image=StorefrontNormalizer._normalize_image(node.get("image"))
                ))
            except (KeyError, TypeError) as e:
                raise NormalizationError(f"Failed to normalize collection summary: {str(e)}") from e
        return summaries

    @staticmethod
    def normalize_shop(raw_shop: Optional[Dict[str, Any]]) -> ShopLayout:
        if not raw_shop or "name" not in raw_shop:
            raise NormalizationError("Shop payload has no name")
        return ShopLayout(name=raw_shop["name"], description=raw_shop.get("description"))
