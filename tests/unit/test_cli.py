import json
from pathlib import Path

import pytest

from recombiner.cli import main as cli_main
from recombiner.cli.commands import catalog_cmd, harvest_cmd
from recombiner.core.errors import FetchFailedError
from recombiner.domain.models.book import Book, BookQuery, TocEntry


class _FakeHarvestService:
    def harvest_book(self, query: BookQuery) -> Book:
        if query.release == "missing":
            raise FetchFailedError(f"{query.code_url}/_toc.yml", 404)
        return Book(
            html_url=query.html_url,
            code_url=query.code_url,
            release=query.release,
            toc_path=query.toc_path,
            title="MyBook",
            logo="undefined",
            author="Author",
            toc=TocEntry(
                title="MyBook",
                html_url=query.html_url,
                external_url=f"{query.code_url}/blob/{query.release}/book/intro.md",
                children=[TocEntry(title="Chapter 1", html_url=f"{query.html_url}ch1.html", external_url=None)],
            ),
        )


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RECOMBINER_HOME", raising=False)
    monkeypatch.setattr(harvest_cmd, "HarvestService", _FakeHarvestService)


def test_harvest_add_then_list_and_remove(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = ["--project-root", str(tmp_path)]

    code = cli_main.main(
        [*root, "harvest", "https://example.org/mybook/", "https://github.com/Org/MyBook", "main", "--add"]
    )
    assert code == 0
    catalog_file = tmp_path / ".recombiner" / "catalog.json"
    stored = json.loads(catalog_file.read_text(encoding="utf-8"))
    assert stored[0]["title"] == "MyBook"
    assert stored[0]["toc_path"] == "book/_toc.yml"

    assert cli_main.main([*root, "catalog", "list"]) == 0
    assert "MyBook" in capsys.readouterr().out

    assert cli_main.main([*root, "catalog", "remove", "0"]) == 0
    assert json.loads(catalog_file.read_text(encoding="utf-8")) == []


def test_harvest_json_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli_main.main(
        [
            "--project-root",
            str(tmp_path),
            "harvest",
            "https://example.org/mybook/",
            "https://github.com/Org/MyBook",
            "main",
            "book/_toc.yml",
            "--json",
        ]
    )

    assert code == 0
    out = capsys.readouterr().out
    assert '"Chapter 1"' in out
    assert not (tmp_path / ".recombiner" / "catalog.json").exists()


def test_errors_exit_with_status_one(tmp_path: Path) -> None:
    code = cli_main.main(
        ["--project-root", str(tmp_path), "harvest", "https://example.org/b/", "https://github.com/O/B", "missing"]
    )
    assert code == 1

    assert cli_main.main(["--project-root", str(tmp_path), "catalog", "show", "4"]) == 1


def test_refresh_with_empty_catalog(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(catalog_cmd, "HarvestService", _FakeHarvestService)
    assert cli_main.main(["--project-root", str(tmp_path), "catalog", "refresh"]) == 0
