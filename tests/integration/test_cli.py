from indextank.cli import main as cli
from indextank.config.settings import Settings
from indextank.errors import IndexInitializing


class FakeDocument:
  calls: list[tuple] = []
  error: Exception | None = None
  closed = 0

  def __init__(self, url, docid, settings=None, logger=None):
    self.url = url
    self.docid = docid

  def __enter__(self):
    return self

  def __exit__(self, *exc_info):
    FakeDocument.closed += 1

  def _record(self, *call) -> int:
    FakeDocument.calls.append((self.url, self.docid) + call)
    if FakeDocument.error is not None:
      raise FakeDocument.error
    return 200

  def add(self, fields, variables=None, categories=None):
    return self._record("add", fields, variables, categories)

  def delete(self):
    return self._record("delete")

  def update_variables(self, variables):
    return self._record("update_variables", variables)

  def update_categories(self, categories):
    return self._record("update_categories", categories)


def _patch(monkeypatch, api_url: str = "http://:k@host/docs") -> None:
  FakeDocument.calls = []
  FakeDocument.error = None
  FakeDocument.closed = 0
  monkeypatch.setattr(cli, "Document", FakeDocument)
  monkeypatch.setattr(cli, "get_settings", lambda: Settings(_env_file=None, INDEXTANK_API_URL=api_url))


def test_cli_add(monkeypatch, capsys) -> None:
  _patch(monkeypatch)
  code = cli.main(["add", "post-1", "--field", "title=x", "--var", "0=1.5", "--category", "kind=post"])
  assert code == 0
  assert FakeDocument.calls == [("http://:k@host/docs", "post-1", "add", {"title": "x"}, {0: 1.5}, {"kind": "post"})]
  assert "[add] docid=post-1 status=200" in capsys.readouterr().out
  assert FakeDocument.closed == 1


def test_cli_url_flag_overrides_settings(monkeypatch) -> None:
  _patch(monkeypatch)
  assert cli.main(["--url", "http://other/docs", "delete", "post-1"]) == 0
  assert FakeDocument.calls == [("http://other/docs", "post-1", "delete")]


def test_cli_update_commands(monkeypatch) -> None:
  _patch(monkeypatch)
  assert cli.main(["update-variables", "post-1", "--var", "2=3"]) == 0
  assert cli.main(["update-categories", "post-1", "--category", "kind=post"]) == 0
  assert FakeDocument.calls[0][2:] == ("update_variables", {2: 3.0})
  assert FakeDocument.calls[1][2:] == ("update_categories", {"kind": "post"})


def test_cli_reports_typed_errors(monkeypatch, capsys) -> None:
  _patch(monkeypatch)
  FakeDocument.error = IndexInitializing()
  assert cli.main(["delete", "post-1"]) == 1
  assert "error=IndexInitializing" in capsys.readouterr().out


def test_cli_requires_url(monkeypatch, capsys) -> None:
  _patch(monkeypatch, api_url="")
  assert cli.main(["delete", "post-1"]) == 2
  assert "missing index url" in capsys.readouterr().out


def test_cli_rejects_malformed_pairs(monkeypatch, capsys) -> None:
  _patch(monkeypatch)
  assert cli.main(["add", "post-1", "--field", "title"]) == 2
  assert FakeDocument.calls == []
