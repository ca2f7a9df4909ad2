"""
Test that all modules import correctly.
Catches circular imports early.
"""
import importlib

import pytest


@pytest.mark.parametrize("module_name", [
    "storefront.config",
    "storefront.errors",
    "storefront.logger",
    "storefront.readiness",
    "storefront.health",
    "storefront.sentry",
    "storefront.models.catalog",
    "storefront.models.filters",
    "storefront.normalizers.storefront",
    "storefront.services.queries",
    "storefront.services.storefront_service",
    "storefront.utils.retry",
    "storefront.translator",
    "storefront.loader",
    "storefront.main",
])
def test_imports(module_name):
    """Test importing all application modules."""
    importlib.import_module(module_name)


def test_loader_api_exported_from_package():
    import storefront

    for name in ("ProductLoader", "collection_endpoint_fetcher", "loader_for_collection", "open_collection_loader"):
        assert name in storefront.__all__
        assert callable(getattr(storefront, name))
