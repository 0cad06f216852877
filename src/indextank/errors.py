"""Typed failures raised by the IndexTank document client."""

__all__ = (
  "IndexTankError",
  "InvalidApiKey",
  "NonExistentIndex",
  "IndexInitializing",
  "InvalidArgument",
  "UnexpectedHTTPException",
  "OperationCancelled",
)


class IndexTankError(Exception):
  """Base class for every error the client raises."""


class InvalidApiKey(IndexTankError):
  """The service rejected the credentials embedded in the index URL."""


class NonExistentIndex(IndexTankError):
  """The index addressed by the document URL does not exist."""


class IndexInitializing(IndexTankError):
  """
  The index exists but is not ready to accept documents yet.

  Callers may retry later at a higher level; the client does not.
  """


class InvalidArgument(IndexTankError, ValueError):
  """The request was malformed, either locally or according to the service."""

  def __init__(self, detail: str = ""):
    super().__init__(detail)
    self.detail = detail


class UnexpectedHTTPException(IndexTankError):
  """Any other status code, or a transport failure (``status_code`` is None)."""

  def __init__(self, status_code: int | None, body: str = ""):
    label = f"HTTP {status_code}" if status_code is not None else "transport error"
    super().__init__(f"{label}: {body}" if body else label)
    self.status_code = status_code
    self.body = body


class OperationCancelled(IndexTankError):
  """The caller's cancellation token fired before the operation finished."""
