"""DRMtoday REST API client package.

Provides a synchronous HTTP client for the Castlabs DRMtoday API. Each call
authenticates through CAS tickets and returns pydantic-validated responses.

Exports:
    CastlabsClient: API client with one method per DRMtoday operation.
    CastlabsError: Raised when DRMtoday rejects a request.
    types: Module containing Pydantic models for requests and responses.
    DEFAULT_AUTH_BASE_URL: Production CAS server.
    DEFAULT_INGESTION_BASE_URL: Production API server.
    DEFAULT_TIMEOUT: Default connection timeout (unset).
"""

from . import types
from .client import (
    DEFAULT_AUTH_BASE_URL,
    DEFAULT_INGESTION_BASE_URL,
    DEFAULT_TIMEOUT,
    CastlabsClient,
)
from .errors import CastlabsError

__all__ = [
    "DEFAULT_AUTH_BASE_URL",
    "DEFAULT_INGESTION_BASE_URL",
    "DEFAULT_TIMEOUT",
    "CastlabsClient",
    "CastlabsError",
    "types",
]
