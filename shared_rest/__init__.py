"""Rest client layer with checked execution and a deterministic mock transport."""

from shared_rest.mock import (
    MockBehavior,
    MockBehaviorPlan,
    MockResponse,
    MockRestAdapter,
    MockScenario,
    MockStateSnapshot,
)
from shared_rest.rest import (
    HttpMethod,
    HttpxTransport,
    RestClient,
    RestError,
    RestErrorKind,
    RestRequest,
    RestResponse,
    RestTransport,
    RetryPolicy,
)


__version__ = "0.1.0"

__all__ = [
    "HttpMethod",
    "HttpxTransport",
    "MockBehavior",
    "MockBehaviorPlan",
    "MockResponse",
    "MockRestAdapter",
    "MockScenario",
    "MockStateSnapshot",
    "RestClient",
    "RestError",
    "RestErrorKind",
    "RestRequest",
    "RestResponse",
    "RestTransport",
    "RetryPolicy",
]
