import math
from numbers import Real
from typing import Any, Mapping

from indextank.errors import InvalidArgument


RESERVED_KEYS = ("docid", "fields", "variables", "categories")


def _merge_options(body: dict[str, Any], options: Mapping[str, Any]) -> dict[str, Any]:
  clashes = sorted(k for k in options if k in RESERVED_KEYS)
  if clashes:
    raise InvalidArgument(f"options may not override {', '.join(clashes)}")
  merged = dict(options)
  merged.update(body)
  return merged


def normalize_variables(variables: Mapping[int, float]) -> dict[str, float]:
  out: dict[str, float] = {}
  for index, value in variables.items():
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
      raise InvalidArgument(f"variable index must be a non-negative int, got {index!r}")
    if isinstance(value, bool) or not isinstance(value, Real):
      raise InvalidArgument(f"variable {index} must be a number, got {value!r}")
    if not math.isfinite(value):
      raise InvalidArgument(f"variable {index} must be finite, got {value!r}")
    out[str(index)] = float(value)
  return out


def normalize_categories(categories: Mapping[str, str]) -> dict[str, str]:
  for name, value in categories.items():
    if not isinstance(name, str) or not isinstance(value, str):
      raise InvalidArgument(f"categories must map str to str, got {name!r}: {value!r}")
  return dict(categories)


def to_add_req(
    docid: str,
    fields: Mapping[str, Any],
    variables: Mapping[int, float] | None = None,
    categories: Mapping[str, str] | None = None,
    options: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
  body: dict[str, Any] = {"docid": docid, "fields": dict(fields)}
  if variables:
    body["variables"] = normalize_variables(variables)
  if categories:
    body["categories"] = normalize_categories(categories)
  return _merge_options(body, options or {})


def to_delete_req(docid: str, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
  return _merge_options({"docid": docid}, options or {})


def to_variables_req(
    docid: str,
    variables: Mapping[int, float],
    options: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
  return _merge_options({"docid": docid, "variables": normalize_variables(variables)}, options or {})


def to_categories_req(
    docid: str,
    categories: Mapping[str, str],
    options: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
  return _merge_options({"docid": docid, "categories": normalize_categories(categories)}, options or {})
