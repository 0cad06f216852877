from dataclasses import dataclass

from indextank.errors import (
  IndexInitializing,
  IndexTankError,
  InvalidApiKey,
  InvalidArgument,
  NonExistentIndex,
  UnexpectedHTTPException,
)


BACKOFF_BASE_SECONDS = 2.0
MAX_ATTEMPTS = 5
SUCCESS_STATUSES = (200, 204)


@dataclass(frozen=True)
class RetryDecision:
  status: str
  retryable: bool
  reason: str | None = None
  error: IndexTankError | None = None
  cause: Exception | None = None


def classify_http_status(status_code: int, response_text: str = "") -> RetryDecision:
  reason = f"http-{status_code}"
  if status_code in SUCCESS_STATUSES:
    return RetryDecision(status="success", retryable=False)
  if status_code == 401:
    return RetryDecision(status="permanent_failed", retryable=False, reason=reason, error=InvalidApiKey())
  if status_code == 404:
    return RetryDecision(status="permanent_failed", retryable=False, reason=reason, error=NonExistentIndex())
  if status_code == 409:
    return RetryDecision(status="permanent_failed", retryable=False, reason=reason, error=IndexInitializing())
  if status_code == 400:
    return RetryDecision(
        status="permanent_failed",
        retryable=False,
        reason=reason,
        error=InvalidArgument(response_text or ""),
    )
  return RetryDecision(
      status="retryable_failed",
      retryable=True,
      reason=reason,
      error=UnexpectedHTTPException(status_code, response_text or ""),
  )


def classify_transport_error(exc: Exception, detail: str | None = None) -> RetryDecision:
  return RetryDecision(
      status="retryable_failed",
      retryable=True,
      reason=f"transport-{type(exc).__name__}",
      error=UnexpectedHTTPException(None, str(exc) if detail is None else detail),
      cause=exc,
  )


def backoff_delay(attempt_number: int, base: float = BACKOFF_BASE_SECONDS) -> float:
  """Seconds to wait after the given failed attempt: 2, 4, 6, 8 with the default base."""
  return max(attempt_number, 0) * base
