import pytest

from recombiner.application.services.anchor_scraper import AnchorScraper, extract_anchors
from recombiner.core.errors import FetchFailedError, NavigationNotFoundError


def test_extract_anchors_from_navigation_by_id(nav_html) -> None:
    html = nav_html([("intro.html", "Introduction"), ("ch1.html", "Chapter 1"), ("ch1.html", "Duplicate")])

    anchors = extract_anchors(html)

    assert anchors == [("intro.html", "Introduction"), ("ch1.html", "Chapter 1"), ("ch1.html", "Duplicate")]


def test_extract_anchors_falls_back_to_class(nav_html) -> None:
    html = nav_html([("intro.html", "Introduction")], by_class=True)
    assert extract_anchors(html) == [("intro.html", "Introduction")]


def test_anchors_with_empty_href_or_title_are_discarded() -> None:
    html = (
        '<nav id="bd-docs-nav">'
        '<a href="">Empty href</a><a href="a.html">   </a><a>No href</a>'
        '<a href="b.html"><span>B</span> title</a>'
        "</nav>"
    )
    assert extract_anchors(html) == [("b.html", "B title")]


def test_missing_navigation_raises() -> None:
    with pytest.raises(NavigationNotFoundError, match="https://example.org/"):
        extract_anchors("<html><body><a href='x.html'>x</a></body></html>", "https://example.org/")


def test_scraper_fetches_site_root(fake_fetcher, nav_html) -> None:
    fake_fetcher.pages["https://example.org/book/"] = nav_html([("intro.html", "Intro")])

    assert AnchorScraper(fake_fetcher).scrape_anchors("https://example.org/book/") == [("intro.html", "Intro")]


def test_scraper_propagates_fetch_failure(fake_fetcher) -> None:
    with pytest.raises(FetchFailedError):
        AnchorScraper(fake_fetcher).scrape_anchors("https://example.org/missing/")
