"""Rest client layer with checked execution and a typed error taxonomy.

This module provides:
- Immutable request/response models with builder-style construction
- A closed error taxonomy shared by every transport
- Checked execution with opt-in retries on enrolled statuses
- An httpx-backed network transport
- Pluggable JSON codec and header redaction for logging
"""

from shared_rest.rest.client import RestClient
from shared_rest.rest.codec import JsonCodec, PydanticJsonCodec, get_default_codec
from shared_rest.rest.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)
from shared_rest.rest.errors import RestError, RestErrorKind
from shared_rest.rest.metrics import RestMetrics
from shared_rest.rest.models import (
    HttpMethod,
    RawResponse,
    RestRequest,
    RestResponse,
    RetryPolicy,
)
from shared_rest.rest.redact import redact_headers, redact_url_credentials
from shared_rest.rest.transport import HttpxTransport, RestTransport


__all__ = [
    # Client
    "RestClient",
    # Transport
    "RestTransport",
    "HttpxTransport",
    # Models
    "HttpMethod",
    "RestRequest",
    "RestResponse",
    "RawResponse",
    "RetryPolicy",
    # Errors
    "RestError",
    "RestErrorKind",
    # Codec
    "JsonCodec",
    "PydanticJsonCodec",
    "get_default_codec",
    # Constants
    "DEFAULT_TIMEOUT_SECONDS",
    "HTTP_STATUS_OK_MIN",
    "HTTP_STATUS_OK_MAX",
    # Metrics
    "RestMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
