"""
Startup readiness and health checks.
Application starts without network, recovers after.
"""
import time
from typing import Dict, Any

from storefront.logger import logger


class ReadinessManager:
    """
    Manages application readiness state.
    Startup succeeds even when the Storefront API is not configured.
    """

    def __init__(self):
        self.is_ready = False
        self.services: Dict[str, bool] = {
            "config": True,  # Config is read at import
            "storefront_api": False
        }
        self.startup_time = None

    async def initialize_services(self, service):
        """
        Initialize the Storefront API session.
        Failures are logged and reported, never raised.
        """
        logger.info("Starting service initialization...")

        try:
            await service.initialize()
            self.services["storefront_api"] = service.is_available
        except Exception as e:
            logger.warning(f"Storefront service initialization failed: {e}")
            self.services["storefront_api"] = False

        self.is_ready = True
        self.startup_time = time.monotonic()

        logger.info(f"Services initialized. Ready: {self.is_ready}")
        logger.info(f"Service status: {self.services}")

    def get_status(self) -> Dict[str, Any]:
        """Get readiness status."""
        return {
            "ready": self.is_ready,
            "services": self.services,
            "uptime": time.monotonic() - self.startup_time if self.startup_time else 0
        }


# Global readiness manager
readiness_manager = ReadinessManager()
