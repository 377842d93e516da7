from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable

from recombiner.application.services.address_resolver import AddressResolver
from recombiner.application.services.anchor_scraper import AnchorScraper
from recombiner.application.services.logo_resolver import LogoResolver
from recombiner.application.services.manifest_fetcher import ManifestFetcher
from recombiner.application.services.toc_merger import TocMerger
from recombiner.core.errors import HarvestCancelledError, RecombinerError
from recombiner.core.paths import last_path_segment
from recombiner.domain.models.book import Book, BookQuery
from recombiner.infrastructure.http.fetcher import Fetcher, HttpFetcher

logger = logging.getLogger(__name__)

TEMPLATE_TITLE = "Template"


@dataclass(slots=True)
class HarvestBatch:
    books: list[Book] = field(default_factory=list)
    errors: list[tuple[BookQuery, str]] = field(default_factory=list)


class HarvestService:
    def __init__(self, fetcher: Fetcher | None = None, merger: TocMerger | None = None) -> None:
        self.fetcher = fetcher or HttpFetcher()
        self.merger = merger or TocMerger()

    def harvest_book(
        self,
        query: BookQuery,
        cancellation_check: Callable[[], bool] | None = None,
    ) -> Book:
        def cancelled() -> bool:
            return cancellation_check is not None and bool(cancellation_check())

        if cancelled():
            raise HarvestCancelledError(f"Harvest of {query.html_url} cancelled before it started.")
        try:
            book = self._harvest(query, self._fetcher_for(cancellation_check))
        except HarvestCancelledError:
            raise
        except RecombinerError as exc:
            if cancelled():
                raise HarvestCancelledError(f"Harvest of {query.html_url} cancelled by caller.") from exc
            raise
        if cancelled():
            raise HarvestCancelledError(f"Harvest of {query.html_url} cancelled by caller.")
        return book

    def harvest_many(self, queries: Iterable[BookQuery]) -> HarvestBatch:
        batch = HarvestBatch()
        for query in queries:
            try:
                batch.books.append(self.harvest_book(query))
            except RecombinerError as exc:
                logger.warning("Harvest of %s failed: %s", query.html_url, exc)
                batch.errors.append((query, str(exc)))
        return batch

    def _harvest(self, query: BookQuery, fetcher: Fetcher) -> Book:
        resolver = AddressResolver(fetcher)
        manifests = ManifestFetcher(fetcher, resolver)
        scraper = AnchorScraper(fetcher)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="anchor-scrape") as executor:
            anchors_future = executor.submit(scraper.scrape_anchors, query.html_url)
            try:
                manifest, config = manifests.fetch_manifest_and_config(query)
            except BaseException:
                anchors_future.cancel()
                raise
            anchors = anchors_future.result()

        toc = self.merger.merge(query, manifest, anchors)
        logo = LogoResolver(fetcher, resolver).resolve_logo(config, query)

        title = config.title
        if title == TEMPLATE_TITLE and query.code_url:
            title = last_path_segment(query.code_url)
        if not toc.title:
            toc.title = title

        return Book(
            html_url=query.html_url,
            code_url=query.code_url,
            release=query.release,
            toc_path=query.toc_path,
            title=title,
            logo=logo,
            author=config.author,
            toc=toc,
        )

    def _fetcher_for(self, cancellation_check: Callable[[], bool] | None) -> Fetcher:
        if cancellation_check is not None and isinstance(self.fetcher, HttpFetcher):
            return self.fetcher.with_cancellation(cancellation_check)
        return self.fetcher
