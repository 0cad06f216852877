import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

import requests
from requests.utils import urldefragauth

from indextank.config.settings import Settings
from indextank.errors import InvalidArgument, OperationCancelled
from indextank.log import Logger, resolve_logger
from indextank.transport.connection import DEFAULT_USER_AGENT, setup_session
from indextank.transport.retry import (
  BACKOFF_BASE_SECONDS,
  MAX_ATTEMPTS,
  RetryDecision,
  backoff_delay,
  classify_http_status,
  classify_transport_error,
)


SUPPORTED_METHODS = ("PUT", "DELETE")

# Raised by requests before anything is sent.
REQUEST_SETUP_ERRORS = (
    requests.exceptions.InvalidJSONError,
    requests.exceptions.InvalidURL,
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
)


@dataclass
class ClientResponse:
  status_code: int
  data: Any
  text: str


@dataclass(frozen=True)
class RequestContext:
  """Everything that stays fixed across the attempts of one logical call."""
  method: str
  path: str
  url: str
  docid: str | None = None

  @property
  def safe_url(self) -> str:
    """The URL without the API key embedded in its userinfo."""
    return urldefragauth(self.url)

  def describe(self) -> str:
    return f"{self.method} {self.safe_url} docid={self.docid}"


BodyBuilder = Callable[[RequestContext], dict[str, Any]]


def _decode(resp: requests.Response) -> ClientResponse:
  data = None
  try:
    data = resp.json()
  except ValueError:
    data = None
  return ClientResponse(resp.status_code, data, resp.text)


def _redact(exc: Exception, ctx: RequestContext) -> str:
  return str(exc).replace(ctx.url, ctx.safe_url)


def _check_serializable(ctx: RequestContext, body: dict[str, Any]) -> None:
  try:
    json.dumps(body, allow_nan=False)
  except (TypeError, ValueError) as exc:
    raise InvalidArgument(f"{ctx.describe()} body is not valid JSON: {exc}") from exc


class RetryingRequestExecutor:
  """
  Sends a JSON request to an index endpoint and applies the retry policy.

  Successful statuses (200, 204) return immediately. 400, 401, 404 and 409
  raise their typed error on the first attempt. Any other status, and any
  transport failure, is retried up to ``max_attempts`` attempts in total,
  sleeping ``attempt * backoff_seconds`` between them. A body that cannot be
  encoded, or a malformed URL, raises ``InvalidArgument`` without retrying.

  A session built by the executor is closed by ``close()``; a session passed
  in belongs to the caller.
  """

  def __init__(
      self,
      base_url: str,
      *,
      session: requests.Session | None = None,
      timeout: float = 15.0,
      max_attempts: int = MAX_ATTEMPTS,
      backoff_seconds: float = BACKOFF_BASE_SECONDS,
      logger: Logger | None = None,
      sleep: Callable[[float], None] = time.sleep,
      user_agent: str = DEFAULT_USER_AGENT,
  ):
    if max_attempts < 1:
      raise InvalidArgument(f"max_attempts must be at least 1, got {max_attempts}")
    self.base_url = base_url.rstrip("/")
    self._owns_session = session is None
    self.session = session if session is not None else setup_session(user_agent)
    self.timeout = timeout
    self.max_attempts = max_attempts
    self.backoff_seconds = backoff_seconds
    self.logger = resolve_logger(logger)
    self._sleep = sleep

  @classmethod
  def from_settings(
      cls,
      base_url: str,
      settings: Settings,
      *,
      session: requests.Session | None = None,
      logger: Logger | None = None,
  ) -> "RetryingRequestExecutor":
    return cls(
        base_url,
        session=session,
        timeout=settings.timeout_seconds,
        max_attempts=settings.max_attempts,
        backoff_seconds=settings.backoff_seconds,
        logger=logger,
        user_agent=settings.user_agent,
    )

  def close(self) -> None:
    if self._owns_session:
      self.session.close()

  def __enter__(self) -> "RetryingRequestExecutor":
    return self

  def __exit__(self, *exc_info) -> None:
    self.close()

  def _url(self, path: str) -> str:
    if not path:
      return self.base_url
    return f"{self.base_url}/{path.lstrip('/')}"

  def context_for(self, method: str, path: str = "", docid: str | None = None) -> RequestContext:
    verb = method.upper()
    if verb not in SUPPORTED_METHODS:
      raise InvalidArgument(f"unsupported method {method!r}, expected one of {SUPPORTED_METHODS}")
    return RequestContext(method=verb, path=path, url=self._url(path), docid=docid)

  def execute(
      self,
      method: str,
      path: str,
      body_builder: BodyBuilder,
      *,
      docid: str | None = None,
      cancel: threading.Event | None = None,
  ) -> ClientResponse:
    ctx = self.context_for(method, path, docid)
    attempt = 0
    while True:
      if cancel is not None and cancel.is_set():
        raise OperationCancelled(f"{ctx.describe()} cancelled before attempt {attempt + 1}")
      attempt += 1
      decision, resp = self._attempt(ctx, body_builder(ctx))

      if decision.status == "success":
        self.logger.log(logging.DEBUG, f"{ctx.describe()} status={resp.status_code} attempt={attempt}")
        return resp

      if not decision.retryable:
        self.logger.log(logging.ERROR, f"{ctx.describe()} failed ({decision.reason})")
        raise decision.error

      if attempt >= self.max_attempts:
        self.logger.log(logging.ERROR, f"{ctx.describe()} failed ({decision.reason}) after {attempt} attempts")
        raise decision.error from decision.cause

      delay = backoff_delay(attempt, self.backoff_seconds)
      self.logger.log(
          logging.WARNING,
          f"{ctx.describe()} attempt {attempt}/{self.max_attempts} failed "
          f"({decision.reason}), retrying in {delay:g}s",
      )
      self._wait(ctx, delay, cancel)

  def _attempt(self, ctx: RequestContext, body: dict[str, Any]) -> tuple[RetryDecision, ClientResponse | None]:
    _check_serializable(ctx, body)
    try:
      raw = self.session.request(ctx.method, ctx.url, json=body, timeout=self.timeout)
    except REQUEST_SETUP_ERRORS as exc:
      self.logger.log(logging.ERROR, f"{ctx.describe()} rejected before sending ({type(exc).__name__})")
      raise InvalidArgument(f"{ctx.describe()} {type(exc).__name__}: {_redact(exc, ctx)}") from exc
    except requests.RequestException as exc:
      return classify_transport_error(exc, _redact(exc, ctx)), None
    resp = _decode(raw)
    return classify_http_status(resp.status_code, resp.text), resp

  def _wait(self, ctx: RequestContext, delay: float, cancel: threading.Event | None) -> None:
    if cancel is None:
      self._sleep(delay)
      return
    # Event.wait returns True as soon as the token is set.
    if cancel.wait(delay):
      raise OperationCancelled(f"{ctx.describe()} cancelled during backoff")
