"""HTTP constants for the rest layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_MIN = 100
HTTP_STATUS_MAX = 599
HTTP_STATUS_OK = 200
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Status used when a rejection carries no explicit status
DEFAULT_REJECT_STATUS = 500
DEFAULT_REJECT_REASON = "rejected"

# Request timeout applied when the request does not set one (seconds)
DEFAULT_TIMEOUT_SECONDS = 2.0

DROPPED_RESPONSE_MESSAGE = "mock transport dropped response"
