"""Client for the IndexTank hosted search API: add, delete and update documents."""

from indextank.api.document import Document
from indextank.errors import (
  IndexInitializing,
  IndexTankError,
  InvalidApiKey,
  InvalidArgument,
  NonExistentIndex,
  OperationCancelled,
  UnexpectedHTTPException,
)
from indextank.transport.executor import ClientResponse, RequestContext, RetryingRequestExecutor

__version__ = "0.1.0"

__all__ = [
  "ClientResponse",
  "Document",
  "IndexInitializing",
  "IndexTankError",
  "InvalidApiKey",
  "InvalidArgument",
  "NonExistentIndex",
  "OperationCancelled",
  "RequestContext",
  "RetryingRequestExecutor",
  "UnexpectedHTTPException",
]
