"""HTTP transport: session setup, payload shapes and the retry policy."""

from indextank.transport.executor import ClientResponse, RequestContext, RetryingRequestExecutor
from indextank.transport.retry import RetryDecision, backoff_delay, classify_http_status

__all__ = [
  "ClientResponse",
  "RequestContext",
  "RetryDecision",
  "RetryingRequestExecutor",
  "backoff_delay",
  "classify_http_status",
]
