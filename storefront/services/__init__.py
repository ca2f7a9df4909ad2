"""
Services package initialization.
Centralizes service imports.
"""

from storefront.services.storefront_service import StorefrontService, storefront_service

__all__ = [
    'StorefrontService',
    'storefront_service'
]
