"""
Incremental "load more" pagination for a collection product grid.
"""
import asyncio
import json
from typing import Awaitable, Callable, Hashable, List, Optional

import aiohttp

from storefront.errors import ExternalServiceError, NetworkError, NotFoundError
from storefront.logger import logger
from storefront.models.catalog import PageState, ProductPage
from storefront.models.filters import QueryPairs, query_pairs
from storefront.normalizers.storefront import StorefrontNormalizer
from storefront.translator import CURSOR_KEY, parse_filter_query

FetchPage = Callable[[Optional[str]], Awaitable[ProductPage]]
Subscriber = Callable[[PageState], None]


class ProductLoader:
    """
    Owns the PageState of one collection view.

    States: idle, fetching (one request in flight) and exhausted (no next
    page). `load_next_page` while fetching or exhausted is a no-op. A fetch
    that fails leaves the state untouched and re-raises to the caller.
    """

    def __init__(self, collection_key: Hashable, initial_page: ProductPage, fetch_page: FetchPage):
        self.collection_key = collection_key
        self._fetch_page = fetch_page
        self._state = PageState.from_page(initial_page)
        self._fetching = False
        self._generation = 0
        self._subscribers: List[Subscriber] = []

    @property
    def is_fetching(self) -> bool:
        return self._fetching

    @property
    def is_exhausted(self) -> bool:
        return not self._state.has_next_page

    def current_state(self) -> PageState:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` for state changes. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self):
        for callback in list(self._subscribers):
            callback(self._state)

    async def load_next_page(self) -> PageState:
        """Fetch the page after the current end cursor and append it."""
        if self._fetching:
            logger.debug(f"Load more ignored for {self.collection_key!r}: fetch in flight")
            return self._state
        if not self._state.has_next_page:
            logger.debug(f"Load more ignored for {self.collection_key!r}: no next page")
            return self._state

        self._fetching = True
        generation = self._generation
        cursor = self._state.end_cursor
        try:
            page = await self._fetch_page(cursor)
        finally:
            if generation == self._generation:
                self._fetching = False

        if generation != self._generation:
            logger.info(f"Discarding page for {self.collection_key!r} fetched before reset")
            return self._state

        self._state = self._state.merged(page)
        logger.info(
            f"Loaded {len(page.products)} more products for {self.collection_key!r} "
            f"(total: {len(self._state.products)}, has next page: {self._state.has_next_page})"
        )
        self._publish()
        return self._state

    def reset(self, collection_key: Hashable, initial_page: ProductPage,
              fetch_page: Optional[FetchPage] = None) -> PageState:
        """
        Reseed from a new first page when the collection changes.
        The same collection key keeps the current state.
        """
        if collection_key == self.collection_key:
            return self._state

        logger.info(f"Resetting product loader: {self.collection_key!r} -> {collection_key!r}")
        self.collection_key = collection_key
        if fetch_page is not None:
            self._fetch_page = fetch_page
        self._state = PageState.from_page(initial_page)
        self._fetching = False
        self._generation += 1
        self._publish()
        return self._state


def collection_endpoint_fetcher(session: aiohttp.ClientSession, collection_url: str,
                                query: QueryPairs = "") -> FetchPage:
    """
    Build a loader fetch function over the collection page endpoint.

    Each call GETs `collection_url` with the first page's filter and sort
    parameters plus `cursor=<cursor>`, so every page comes from the same
    result set. A `None` cursor fetches the first page.
    """
    base_params = [(key, value) for key, value in query_pairs(query) if key != CURSOR_KEY]

    async def fetch_page(cursor: Optional[str]) -> ProductPage:
        params = base_params + ([(CURSOR_KEY, cursor)] if cursor else [])
        try:
            response = await session.get(collection_url, params=params)

            if response.status == 404:
                raise NotFoundError("collection", collection_url)
            if response.status != 200:
                error_text = await response.text()
                logger.error(f"Collection endpoint error {response.status}: {error_text[:200]}")
                raise ExternalServiceError(
                    f"Collection endpoint error {response.status}: {error_text[:200]}"
                )

            body = await response.json()

        except (aiohttp.ContentTypeError, json.JSONDecodeError) as e:
            logger.error(f"Invalid JSON from collection endpoint {collection_url}: {str(e)}")
            raise ExternalServiceError(f"Invalid JSON from collection endpoint: {str(e)}") from e

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Collection endpoint unreachable {collection_url}: {str(e)}")
            raise NetworkError(f"Collection endpoint unreachable: {str(e)}") from e

        if not isinstance(body, dict):
            raise ExternalServiceError("Invalid response format from collection endpoint")
        return StorefrontNormalizer.normalize_served_page(body.get("collection"))

    return fetch_page


def loader_for_collection(session: aiohttp.ClientSession, collection_url: str, query: QueryPairs,
                          initial_page: ProductPage) -> ProductLoader:
    """A ProductLoader keyed by collection URL, filters and sort, seeded with the first page."""
    filter_query = parse_filter_query(query)
    return ProductLoader(
        collection_key=(collection_url, filter_query.filters, filter_query.sort),
        initial_page=initial_page,
        fetch_page=collection_endpoint_fetcher(session, collection_url, query)
    )


async def open_collection_loader(session: aiohttp.ClientSession, collection_url: str,
                                 query: QueryPairs = "") -> ProductLoader:
    """Fetch the first page from the endpoint and return a loader seeded with it."""
    first_page = await collection_endpoint_fetcher(session, collection_url, query)(None)
    return loader_for_collection(session, collection_url, query, first_page)
