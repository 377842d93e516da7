from __future__ import annotations

from bs4 import BeautifulSoup

from recombiner.core.errors import NavigationNotFoundError
from recombiner.infrastructure.http.fetcher import Fetcher

NAV_CONTAINER = "bd-docs-nav"

Anchor = tuple[str, str]


def extract_anchors(html: str, url: str = "") -> list[Anchor]:
    """Ordered ``(href, title)`` pairs from the sidebar of a rendered book page."""
    soup = BeautifulSoup(html, "html.parser")
    nav = soup.find(id=NAV_CONTAINER)
    if nav is None:
        nav = soup.find(class_=NAV_CONTAINER)
    if nav is None:
        raise NavigationNotFoundError(url)

    anchors: list[Anchor] = []
    for link in nav.find_all("a", href=True):
        href = str(link.get("href") or "")
        title = link.get_text().strip()
        if href and title:
            anchors.append((href, title))
    soup.decompose()
    return anchors


class AnchorScraper:
    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    def scrape_anchors(self, site_root_url: str) -> list[Anchor]:
        return extract_anchors(self.fetcher.get_text(site_root_url), site_root_url)
