import threading
from typing import Any, Mapping

import requests
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from indextank.config.settings import Settings, get_settings
from indextank.errors import InvalidArgument
from indextank.log import Logger
from indextank.transport.executor import RequestContext, RetryingRequestExecutor
from indextank.transport.payloads import (
  to_add_req,
  to_categories_req,
  to_delete_req,
  to_variables_req,
)


MAX_DOCID_BYTES = 1024


class DocumentRef(BaseModel):
  model_config = ConfigDict(frozen=True)

  document_url: str
  docid: str

  @field_validator("docid", mode="before")
  @classmethod
  def _stringify_docid(cls, value: Any) -> str:
    return value if isinstance(value, str) else str(value)

  @field_validator("docid")
  @classmethod
  def _check_docid_size(cls, value: str) -> str:
    size = len(value.encode("utf-8"))
    if size > MAX_DOCID_BYTES:
      raise ValueError(f"docid too long. max is {MAX_DOCID_BYTES} bytes and got {size}")
    return value


class Document:
  """
  A single document of an IndexTank index.

  ``document_url`` is the index's document endpoint, e.g.
  ``http://:KEY@api.indextank.com/v1/indexes/my-index/docs``.
  Every operation returns the final success status (200 or 204) or raises
  one of the errors in ``indextank.errors``.

  Documents can share one ``requests.Session`` through ``session``. Otherwise
  each builds its own, released by ``close()`` or by using the document as a
  context manager.
  """

  def __init__(
      self,
      document_url: str,
      docid: Any,
      *,
      executor: RetryingRequestExecutor | None = None,
      settings: Settings | None = None,
      logger: Logger | None = None,
      session: requests.Session | None = None,
  ):
    try:
      self._ref = DocumentRef(document_url=document_url, docid=docid)
    except ValidationError as exc:
      raise InvalidArgument("; ".join(err["msg"] for err in exc.errors())) from exc
    self._owns_executor = executor is None
    self.executor = executor or RetryingRequestExecutor.from_settings(
        self._ref.document_url,
        settings or get_settings(),
        session=session,
        logger=logger,
    )

  @property
  def docid(self) -> str:
    return self._ref.docid

  @property
  def document_url(self) -> str:
    return self._ref.document_url

  def __repr__(self) -> str:
    return f"Document(docid={self.docid!r})"

  def close(self) -> None:
    if self._owns_executor:
      self.executor.close()

  def __enter__(self) -> "Document":
    return self

  def __exit__(self, *exc_info) -> None:
    self.close()

  def add(
      self,
      fields: Mapping[str, Any],
      variables: Mapping[int, float] | None = None,
      categories: Mapping[str, str] | None = None,
      *,
      cancel: threading.Event | None = None,
      **options: Any,
  ) -> int:
    """
    Index the document with the given fields.

    ``variables`` maps variable numbers to float values usable by scoring
    functions; ``categories`` maps category names to values. Any extra
    keyword options are sent along in the request body.
    """
    body = to_add_req(self.docid, fields, variables, categories, options)
    return self._send("PUT", "", body, cancel)

  def delete(self, *, cancel: threading.Event | None = None, **options: Any) -> int:
    body = to_delete_req(self.docid, options)
    return self._send("DELETE", "", body, cancel)

  def update_variables(
      self,
      variables: Mapping[int, float],
      *,
      cancel: threading.Event | None = None,
      **options: Any,
  ) -> int:
    body = to_variables_req(self.docid, variables, options)
    return self._send("PUT", "variables", body, cancel)

  def update_categories(
      self,
      categories: Mapping[str, str],
      *,
      cancel: threading.Event | None = None,
      **options: Any,
  ) -> int:
    """Replace the value of each given category (a str to str mapping) for this document."""
    body = to_categories_req(self.docid, categories, options)
    return self._send("PUT", "categories", body, cancel)

  def _send(self, method: str, path: str, body: dict[str, Any], cancel: threading.Event | None) -> int:
    def build(_ctx: RequestContext) -> dict[str, Any]:
      return dict(body)

    resp = self.executor.execute(method, path, build, docid=self.docid, cancel=cancel)
    return resp.status_code
