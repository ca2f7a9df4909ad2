"""
Custom domain exceptions for the storefront service.
Every failure has a name.
"""


class NetworkError(Exception):
    """Raised when a caller that does not retry cannot reach the service."""
    pass


class ExternalServiceError(Exception):
    """Raised when the commerce API answers with an unusable response."""
    pass


class GraphQLError(ExternalServiceError):
    """Raised when a GraphQL response carries an `errors` list."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = errors or []


class RetryExhaustedError(ExternalServiceError):
    """Raised when all retry attempts for an external service are exhausted."""
    pass


class NotFoundError(Exception):
    """Raised when the requested resource does not exist upstream."""

    def __init__(self, resource: str, handle: str):
        super().__init__(f"{resource} not found: {handle!r}")
        self.resource = resource
        self.handle = handle


class DataContractError(Exception):
    """Raised when data doesn't conform to internal model."""
    pass


class NormalizationError(DataContractError):
    """Raised when raw API data cannot be normalized."""
    pass


class InvalidParameterError(ValueError):
    """Raised for malformed query parameters when strict parsing is requested."""

    def __init__(self, key: str, value: str, reason: str):
        super().__init__(f"Invalid query parameter {key}={value!r}: {reason}")
        self.key = key
        self.value = value
        self.reason = reason
