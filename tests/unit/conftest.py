from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from recombiner.core.errors import FetchFailedError
from recombiner.domain.models.book import BookQuery


class FakeFetcher:
    def __init__(self) -> None:
        self.pages: dict[str, Any] = {}
        self.existing: set[str] = set()
        self.failures: dict[str, Exception] = {}
        self.requested: list[str] = []
        self.checked: list[str] = []

    def get_text(self, url: str) -> str:
        self.requested.append(url)
        if url in self.failures:
            raise self.failures[url]
        if url not in self.pages:
            raise FetchFailedError(url, 404)
        value = self.pages[url]
        return value if isinstance(value, str) else json.dumps(value)

    def get_json(self, url: str) -> Any:
        return json.loads(self.get_text(url))

    def exists(self, url: str) -> bool:
        self.checked.append(url)
        return url in self.existing


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def github_query() -> BookQuery:
    return BookQuery(
        html_url="https://example.org/mybook/",
        code_url="https://github.com/Org/MyBook",
        release="main",
        toc_path="book/_toc.yml",
    )


@pytest.fixture
def nav_html() -> Callable[..., str]:
    def build(links: list[tuple[str, str]], *, logo: str | None = None, by_class: bool = False) -> str:
        items = "\n".join(f'<li><a class="reference internal" href="{href}">\n  {title}\n</a></li>' for href, title in links)
        nav_attr = 'class="bd-docs-nav"' if by_class else 'id="bd-docs-nav" class="bd-links"'
        brand = f'<a class="navbar-brand logo" href="intro.html"><img src="{logo}" alt="logo"></a>' if logo else ""
        return (
            "<html><head><title>Book</title></head><body>"
            f"<div class=\"navbar-header\">{brand}</div>"
            f"<nav {nav_attr}><ul>{items}</ul></nav>"
            "<main><a href=\"elsewhere.html\">Not in nav</a></main>"
            "</body></html>"
        )

    return build
