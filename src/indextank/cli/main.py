import argparse
import logging

from indextank.api.document import Document
from indextank.config.settings import get_settings
from indextank.errors import IndexTankError
from indextank.log import StdlibLogger


def _pairs(values: list[str] | None, flag: str) -> dict[str, str]:
  out: dict[str, str] = {}
  for raw in values or []:
    key, sep, value = raw.partition("=")
    if not sep or not key:
      raise argparse.ArgumentTypeError(f"{flag} expects KEY=VALUE, got {raw!r}")
    out[key] = value
  return out


def _variables(values: list[str] | None) -> dict[int, float]:
  out: dict[int, float] = {}
  for key, value in _pairs(values, "--var").items():
    try:
      out[int(key)] = float(value)
    except ValueError as exc:
      raise argparse.ArgumentTypeError(f"--var expects INDEX=NUMBER, got {key}={value}") from exc
  return out


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(prog="indextank")
  parser.add_argument("--url", help="Document endpoint of the index (overrides INDEXTANK_API_URL)")
  sub = parser.add_subparsers(dest="command", required=True)

  add = sub.add_parser("add")
  add.add_argument("docid")
  add.add_argument("--field", action="append", metavar="NAME=VALUE")
  add.add_argument("--var", action="append", metavar="INDEX=NUMBER")
  add.add_argument("--category", action="append", metavar="NAME=VALUE")

  delete = sub.add_parser("delete")
  delete.add_argument("docid")

  update_vars = sub.add_parser("update-variables")
  update_vars.add_argument("docid")
  update_vars.add_argument("--var", action="append", required=True, metavar="INDEX=NUMBER")

  update_cats = sub.add_parser("update-categories")
  update_cats.add_argument("docid")
  update_cats.add_argument("--category", action="append", required=True, metavar="NAME=VALUE")
  return parser


def run_command(args: argparse.Namespace, document: Document) -> int:
  if args.command == "add":
    return document.add(
        _pairs(args.field, "--field"),
        variables=_variables(args.var),
        categories=_pairs(args.category, "--category"),
    )
  if args.command == "delete":
    return document.delete()
  if args.command == "update-variables":
    return document.update_variables(_variables(args.var))
  if args.command == "update-categories":
    return document.update_categories(_pairs(args.category, "--category"))
  raise ValueError(f"unknown command {args.command!r}")


def main(argv: list[str] | None = None) -> int:
  parser = build_parser()
  args = parser.parse_args(argv)
  settings = get_settings()
  logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

  url = args.url or settings.api_url
  if not url:
    print(f"[{args.command}] error=missing index url (pass --url or set INDEXTANK_API_URL)")
    return 2

  try:
    with Document(url, args.docid, settings=settings, logger=StdlibLogger()) as document:
      status = run_command(args, document)
  except argparse.ArgumentTypeError as exc:
    print(f"[{args.command}] error={exc}")
    return 2
  except IndexTankError as exc:
    print(f"[{args.command}] docid={args.docid} error={type(exc).__name__} {exc}".rstrip())
    return 1

  print(f"[{args.command}] docid={document.docid} status={status}")
  return 0
