"""
Wrapper for the Storefront GraphQL API.
Includes timeout, retry, response validation, error translation.
All network logic is isolated here.
"""
import aiohttp
import asyncio
import json
from typing import Any, Dict, List, Optional

from storefront.errors import ExternalServiceError, GraphQLError, NotFoundError
from storefront.utils.retry import async_retry
from storefront.config import config
from storefront.logger import logger
from storefront.models.catalog import CollectionResult, CollectionSummary, ShopLayout
from storefront.models.filters import FilterQuery
from storefront.normalizers.storefront import StorefrontNormalizer
from storefront.services.queries import COLLECTION_QUERY, FEATURED_COLLECTIONS_QUERY, LAYOUT_QUERY


class StorefrontService:
    """
    Wrapper for Storefront API calls.
    Views never talk to the API directly; loaders go through the page endpoint.
    """

    def __init__(self):
        self.api_token = config.STOREFRONT_API_TOKEN
        self.graphql_url = config.graphql_url
        self.session: Optional[aiohttp.ClientSession] = None
        self.is_available = config.is_configured

    async def initialize(self):
        """Initialize HTTP session (called after startup)."""
        if not self.is_available:
            logger.warning("Storefront API not configured")
            return

        self.session = aiohttp.ClientSession(
            headers={
                "X-Shopify-Storefront-Access-Token": self.api_token,
                "Content-Type": "application/json",
                "Accept": "application/json"
            },
            timeout=aiohttp.ClientTimeout(total=config.REQUEST_TIMEOUT)
        )
        logger.info(f"Storefront service initialized for {self.graphql_url}")

    async def close(self):
        """Close HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    @async_retry(exceptions=(aiohttp.ClientError, asyncio.TimeoutError))
    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.session.post(self.graphql_url, json=payload)

        if response.status != 200:
            error_text = await response.text()
            logger.error(f"Storefront API error {response.status}: {error_text[:200]}")
            raise ExternalServiceError(
                f"Storefront API error {response.status}: {error_text[:200]}"
            )

        return await response.json()

    async def query(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL query.

        Args:
            document: GraphQL query document
            variables: Query variables

        Returns:
            The `data` member of the response

        Raises:
            ExternalServiceError: If the API is not configured or answers badly
            GraphQLError: If the response carries errors
            RetryExhaustedError: If the API stays unreachable after retries
        """
        if not self.is_available or self.session is None:
            raise ExternalServiceError("Storefront service not configured")

        try:
            body = await self._post({"query": document, "variables": variables or {}})
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON response from Storefront API: {str(e)}")
            raise ExternalServiceError(f"Invalid JSON response from Storefront API: {str(e)}") from e

        if not isinstance(body, dict):
            raise ExternalServiceError("Invalid response format from Storefront API")

        if body.get("errors"):
            messages = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in body["errors"]
            )
            logger.error(f"GraphQL errors: {messages}")
            raise GraphQLError(f"GraphQL errors: {messages}", body["errors"])

        data = body.get("data")
        if not isinstance(data, dict):
            raise ExternalServiceError("Storefront API response has no data")
        return data

    async def get_collection(self, handle: str, filter_query: Optional[FilterQuery] = None,
                             cursor: Optional[str] = None,
                             page_size: Optional[int] = None) -> CollectionResult:
        """
        Fetch one page of a collection with its navigation list.

        `cursor` overrides the cursor carried by `filter_query`.

        Raises:
            NotFoundError: If no collection has this handle
        """
        filter_query = filter_query or FilterQuery()
        after = cursor if cursor is not None else filter_query.cursor

        variables = {
            "handle": handle,
            "cursor": after,
            "filters": filter_query.filter_inputs(),
            "pageBy": page_size or config.PAGE_SIZE,
            "collectionsLimit": config.COLLECTIONS_LIMIT,
            **filter_query.sort.to_variables()
        }
        logger.info(
            f"Fetching collection '{handle}' (cursor: {after}, filters: {len(filter_query.filters)})"
        )

        data = await self.query(COLLECTION_QUERY, variables)

        if not data.get("collection"):
            logger.info(f"Collection not found: '{handle}'")
            raise NotFoundError("collection", handle)

        collection = StorefrontNormalizer.normalize_collection(data["collection"])
        collections = StorefrontNormalizer.normalize_collection_summaries(data.get("collections"))
        logger.info(
            f"Fetched {len(collection.products.products)} products for '{handle}' "
            f"(has next page: {collection.products.page_info.has_next_page})"
        )
        return CollectionResult(collection=collection, collections=collections)

    async def get_featured_collections(self, limit: Optional[int] = None) -> List[CollectionSummary]:
        data = await self.query(
            FEATURED_COLLECTIONS_QUERY,
            {"first": limit or config.FEATURED_COLLECTIONS_LIMIT}
        )
        return StorefrontNormalizer.normalize_collection_summaries(data.get("collections"))

    async def get_layout(self) -> ShopLayout:
        data = await self.query(LAYOUT_QUERY)
        return StorefrontNormalizer.normalize_shop(data.get("shop"))


# Global service instance
storefront_service = StorefrontService()
