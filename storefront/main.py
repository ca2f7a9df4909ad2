"""
Main application entry point.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List
from urllib.parse import quote

from fastapi import FastAPI, Request, HTTPException

from storefront.config import config
from storefront.logger import logger
from storefront.errors import (
    DataContractError,
    ExternalServiceError,
    InvalidParameterError,
    NotFoundError,
)
from storefront.health import router as health_router
from storefront.models.filters import FilterQuery
from storefront.readiness import readiness_manager
from storefront.sentry import capture_upstream_failure, initialize_sentry
from storefront.services.storefront_service import storefront_service
from storefront.translator import parse_filter_query, select_drawer_facets

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    logger.info("Starting storefront service")
    initialize_sentry()
    await readiness_manager.initialize_services(storefront_service)

    yield

    # Shutdown
    logger.info("Shutting down storefront service")
    await storefront_service.close()

# Create FastAPI app
app = FastAPI(
    title="Storefront API",
    description="Collection pages with filters, sorting and incremental pagination",
    version="1.0.0",
    lifespan=lifespan
)
app.include_router(health_router)


def _collection_url(handle: str, query: str = "") -> str:
    url = f"/collections/{quote(handle, safe='')}"
    return f"{url}?{query}" if query else url


def _applied_filters_payload(handle: str, filter_query: FilterQuery,
                             query_pairs: List) -> List[Dict[str, Any]]:
    return [
        {
            **applied.to_dict(),
            "remove_url": _collection_url(handle, applied.remove_query(query_pairs))
        }
        for applied in filter_query.applied_filters
    ]


@app.get("/")
async def home():
    """Featured collections and shop details."""
    try:
        layout = await storefront_service.get_layout()
        featured = await storefront_service.get_featured_collections()

        return {
            "shop": layout.to_dict(),
            "collections": [collection.to_dict() for collection in featured],
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    except ExternalServiceError as e:
        logger.error(f"External service error: {e}")
        capture_upstream_failure("home", e, {})
        raise HTTPException(status_code=503, detail="Service unavailable")

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@app.get("/collections/{handle}")
async def collection_page(handle: str, request: Request):
    """
    One page of a collection.

    The same URL with `cursor=<endCursor>` serves the next page for
    "load more"; filters and sort come from the rest of the query string.
    """
    query_pairs = request.query_params.multi_items()

    try:
        filter_query = parse_filter_query(query_pairs, strict=config.STRICT_FILTER_PARAMS)
    except InvalidParameterError as e:
        logger.warning(f"Rejected query parameter: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = await storefront_service.get_collection(handle, filter_query)

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    except ExternalServiceError as e:
        logger.error(f"External service error: {e}")
        capture_upstream_failure("collection", e, {"handle": handle, "cursor": filter_query.cursor})
        raise HTTPException(status_code=503, detail="Service unavailable")

    except DataContractError as e:
        logger.error(f"Unusable collection payload for '{handle}': {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    collection = result.collection
    return {
        "collection": collection.to_dict(),
        "applied_filters": _applied_filters_payload(handle, filter_query, query_pairs),
        "drawer_facets": [facet.to_dict() for facet in select_drawer_facets(collection.facets)],
        "collections": [summary.to_dict() for summary in result.collections],
        "sort": filter_query.sort.to_variables(),
        "seo": {
            "title": collection.title,
            "description": collection.description
        },
        "analytics": {
            "page_type": "collection",
            "handle": handle,
            "resource_id": collection.id
        }
    }

if __name__ == "__main__":
    import os
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
