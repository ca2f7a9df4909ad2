import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    def __init__(self):
        # Storefront API
        self.STOREFRONT_DOMAIN = os.environ.get("STOREFRONT_DOMAIN", "")
        self.STOREFRONT_API_TOKEN = os.environ.get("STOREFRONT_API_TOKEN", "")
        self.STOREFRONT_API_VERSION = os.environ.get("STOREFRONT_API_VERSION", "2023-01")

        # Catalog paging
        self.PAGE_SIZE = int(os.environ.get("PAGE_SIZE", "12"))
        self.COLLECTIONS_LIMIT = int(os.environ.get("COLLECTIONS_LIMIT", "100"))
        self.FEATURED_COLLECTIONS_LIMIT = int(os.environ.get("FEATURED_COLLECTIONS_LIMIT", "3"))
        self.STRICT_FILTER_PARAMS = os.environ.get("STRICT_FILTER_PARAMS", "false").lower() == "true"

        # Retry configuration
        self.MAX_RETRIES = int(os.environ.get("MAX_RETRIES", "3"))
        self.REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "30"))
        self.RETRY_BACKOFF = float(os.environ.get("RETRY_BACKOFF", "1.5"))

        # Error tracking
        self.SENTRY_DSN = os.environ.get("SENTRY_DSN", "")
        self.ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

        # Application settings
        self.DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def graphql_url(self) -> str:
        return f"https://{self.STOREFRONT_DOMAIN}/api/{self.STOREFRONT_API_VERSION}/graphql.json"

    @property
    def is_configured(self) -> bool:
        return bool(self.STOREFRONT_DOMAIN and self.STOREFRONT_API_TOKEN)

    @property
    def has_sentry(self) -> bool:
        return bool(self.SENTRY_DSN)

# Create an instance
config = Config()
