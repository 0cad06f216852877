"""Pluggable logging for the client: anything with ``log(level, message)``."""

import logging
from typing import Protocol


class Logger(Protocol):
  def log(self, level: int, message: str) -> None: ...


class NullLogger:
  """Discards every message. Used when no logger is injected."""

  def log(self, level: int, message: str) -> None:
    return None


class StdlibLogger:
  """Forwards messages to a standard library logger."""

  def __init__(self, name: str = "indextank"):
    self._logger = logging.getLogger(name)

  def log(self, level: int, message: str) -> None:
    self._logger.log(level, message)


def resolve_logger(logger: Logger | None) -> Logger:
  return logger if logger is not None else NullLogger()
