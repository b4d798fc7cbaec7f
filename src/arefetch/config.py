r"""Default configurations for HTTP requests with automatic retry logic.

All durations used by the retry engine are expressed in milliseconds.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_ACCEPT_STATUS_CODES",
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_METHOD",
    "DEFAULT_RETRY_STATUS_CODES",
    "DEFAULT_RETRY_TIMEOUT",
    "DEFAULT_SIGNAL_TIMEOUT",
]

# Default maximum number of attempts
# Unlike a retry count, this includes the first attempt
DEFAULT_MAX_RETRIES = 3

# Default per-attempt timeout in milliseconds
# An attempt still in flight after this delay is aborted
DEFAULT_SIGNAL_TIMEOUT = 100

# Default delay in milliseconds between two attempts
DEFAULT_RETRY_TIMEOUT = 100

# HTTP status codes that end the retry loop successfully
DEFAULT_ACCEPT_STATUS_CODES = (200,)

# HTTP status codes that should trigger automatic retry
# Empty means: retry on anything not accepted
DEFAULT_RETRY_STATUS_CODES = ()

# Default timeout in seconds for the underlying httpx client
DEFAULT_HTTP_TIMEOUT = 10.0

# Default HTTP method used when the request options do not set one
DEFAULT_METHOD = "GET"
