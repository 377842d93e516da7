from __future__ import annotations

import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from recombiner.application.services.address_resolver import AddressResolver
from recombiner.core.errors import RecombinerError
from recombiner.core.paths import is_absolute_url, sibling_path
from recombiner.domain.models.book import LOGO_SENTINEL, BookQuery, SiteConfig
from recombiner.infrastructure.http.fetcher import Fetcher

logger = logging.getLogger(__name__)

NAVBAR_LOGO_SELECTOR = "a.navbar-brand.logo"


class LogoResolver:
    """Finds a displayable logo URL for a book; never raises.

    Order: absolute ``logo`` from the config, relative ``logo`` resolved in the
    repository, Sphinx ``html_static_path`` + theme logo, then the navbar logo
    image of the rendered site. ``"undefined"`` when all of them come up empty.
    """

    def __init__(self, fetcher: Fetcher, resolver: AddressResolver) -> None:
        self.fetcher = fetcher
        self.resolver = resolver

    def resolve_logo(self, config: SiteConfig, query: BookQuery) -> str:
        logo = self._from_config(config, query)
        if logo == LOGO_SENTINEL:
            logo = self.scrape_navbar_logo(query.html_url)
        return logo

    def _from_config(self, config: SiteConfig, query: BookQuery) -> str:
        if config.logo:
            if is_absolute_url(config.logo):
                return config.logo
            return self._raw_url(query, sibling_path(query.toc_path, config.logo))
        if config.static_path and config.theme_logo:
            static_dir = sibling_path(query.toc_path, config.static_path)
            return self._raw_url(query, f"{static_dir}/{config.theme_logo}")
        return LOGO_SENTINEL

    def _raw_url(self, query: BookQuery, path: str) -> str:
        try:
            return self.resolver.resolve_raw_url(query.code_url, query.release, path)
        except RecombinerError as exc:
            logger.warning("Could not resolve logo path %s: %s", path, exc)
            return LOGO_SENTINEL

    def scrape_navbar_logo(self, page_url: str) -> str:
        try:
            html = self.fetcher.get_text(page_url)
        except RecombinerError as exc:
            logger.warning("Failed to fetch or parse %s for a logo: %s", page_url, exc)
            return LOGO_SENTINEL

        soup = BeautifulSoup(html, "html.parser")
        anchor = soup.select_one(NAVBAR_LOGO_SELECTOR)
        image = anchor.find("img") if anchor is not None else None
        src = image.get("src") if image is not None else None
        if not src:
            return LOGO_SENTINEL
        return urljoin(page_url, str(src))
