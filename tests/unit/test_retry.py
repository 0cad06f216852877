import pytest

from indextank.errors import (
  IndexInitializing,
  InvalidApiKey,
  InvalidArgument,
  NonExistentIndex,
  UnexpectedHTTPException,
)
from indextank.transport.retry import backoff_delay, classify_http_status, classify_transport_error


@pytest.mark.parametrize("status_code", [200, 204])
def test_success_statuses(status_code: int) -> None:
  decision = classify_http_status(status_code)
  assert decision.status == "success"
  assert decision.retryable is False
  assert decision.error is None


@pytest.mark.parametrize(
    "status_code, error_type",
    [(401, InvalidApiKey), (404, NonExistentIndex), (409, IndexInitializing), (400, InvalidArgument)],
)
def test_permanent_failures(status_code: int, error_type: type) -> None:
  decision = classify_http_status(status_code)
  assert decision.status == "permanent_failed"
  assert decision.retryable is False
  assert isinstance(decision.error, error_type)
  assert decision.reason == f"http-{status_code}"


def test_400_carries_response_body() -> None:
  decision = classify_http_status(400, "invalid field 'title'")
  assert decision.error.detail == "invalid field 'title'"


@pytest.mark.parametrize("status_code", [500, 503, 429, 201, 302, 418])
def test_other_statuses_are_retryable(status_code: int) -> None:
  decision = classify_http_status(status_code, "boom")
  assert decision.status == "retryable_failed"
  assert decision.retryable is True
  assert isinstance(decision.error, UnexpectedHTTPException)
  assert decision.error.status_code == status_code
  assert decision.error.body == "boom"


def test_transport_errors_are_retryable() -> None:
  decision = classify_transport_error(ConnectionError("refused"))
  assert decision.retryable is True
  assert decision.error.status_code is None
  assert decision.reason == "transport-ConnectionError"


def test_backoff_grows_linearly() -> None:
  assert [backoff_delay(n) for n in range(1, 5)] == [2, 4, 6, 8]
  assert backoff_delay(3, base=0.5) == 1.5
