"""
Sentry initialization for centralized error tracking.
Observes failures, never controls logic.
"""
import logging
from typing import Dict, Any

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from storefront.config import config
from storefront.errors import NotFoundError
from storefront.logger import logger


def initialize_sentry():
    """Initialize Sentry SDK if DSN is configured."""
    if not config.has_sentry:
        logger.info("Sentry not configured, skipping initialization")
        return

    try:
        sentry_sdk.init(
            dsn=config.SENTRY_DSN,
            environment=config.ENVIRONMENT,
            integrations=[
                AsyncioIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
            ],
            traces_sample_rate=0.1,
            send_default_pii=False,
            debug=config.DEBUG,
            before_send=_enrich_sentry_event
        )

        logger.info("Sentry initialized for error tracking")

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")


def _enrich_sentry_event(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events and drop 404s, which are expected traffic."""
    if hint and "exc_info" in hint:
        exc = hint["exc_info"][1]
        if isinstance(exc, NotFoundError):
            return None

    event.setdefault("tags", {})
    event["tags"]["system"] = "storefront"
    event["tags"]["environment"] = config.ENVIRONMENT

    # Group by exception type and module
    exceptions = event.get("exception", {}).get("values", [])
    if exceptions:
        exc = exceptions[0]
        event["fingerprint"] = [
            "{{ default }}",
            exc.get("type", "Unknown"),
            exc.get("module", "unknown")
        ]

    return event


def capture_upstream_failure(operation: str, error: Exception, context: Dict[str, Any]):
    """Capture a failed Storefront API call in Sentry."""
    if not config.has_sentry:
        return

    with sentry_sdk.new_scope() as scope:
        scope.set_tag("operation", operation)
        scope.set_tag("error_type", type(error).__name__)
        scope.set_extra("context", context)
        sentry_sdk.capture_exception(error)
