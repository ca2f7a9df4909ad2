"""
Storefront - collection pages over a commerce GraphQL API.
"""

__version__ = "1.0.0"
__author__ = "Engineering Team"

# Export main components for easy import
from storefront.config import config
from storefront.logger import logger
from storefront.errors import (
    NetworkError,
    ExternalServiceError,
    GraphQLError,
    RetryExhaustedError,
    NotFoundError,
    DataContractError,
    NormalizationError,
    InvalidParameterError
)
from storefront.loader import (
    ProductLoader,
    collection_endpoint_fetcher,
    loader_for_collection,
    open_collection_loader
)

__all__ = [
    'config',
    'logger',
    'NetworkError',
    'ExternalServiceError',
    'GraphQLError',
    'RetryExhaustedError',
    'NotFoundError',
    'DataContractError',
    'NormalizationError',
    'InvalidParameterError',
    'ProductLoader',
    'collection_endpoint_fetcher',
    'loader_for_collection',
    'open_collection_loader'
]
