"""Merge a ``_toc.yml`` manifest with the anchors scraped from the rendered site.

The manifest decides the shape of the tree, the rendered navigation decides
titles and which pages exist. A content node without a rendered page is
dropped and its children are spliced into the nearest surviving ancestor.
Every other error aborts the merge.
"""

from __future__ import annotations

import logging
from typing import Sequence

from recombiner.application.services.address_resolver import resolve_blob_url
from recombiner.application.services.anchor_scraper import Anchor
from recombiner.core.errors import (
    TitleNotFoundError,
    UnknownContentTypeError,
    UnsupportedContentError,
)
from recombiner.core.paths import encode_uri, with_suffix
from recombiner.domain.models.book import BookQuery, TocEntry
from recombiner.domain.models.manifest import (
    ContentRef,
    ExternalLink,
    ManifestNode,
    TocManifest,
    UnsupportedEntry,
)

logger = logging.getLogger(__name__)

# chapter, section, subsection, subsubsection
MAX_CONTENT_DEPTH = 4


def rendered_path(file: str) -> str:
    if file == "#":
        return file
    return encode_uri(with_suffix(file, ".html"))


def find_title(file: str, anchors: Sequence[Anchor]) -> tuple[str, str]:
    """First ``(title, href)`` whose href equals the rendered path of ``file``."""
    search_path = rendered_path(file)
    for href, title in anchors:
        if href == search_path:
            return title, href
    raise TitleNotFoundError(file)


def html_root(query: BookQuery, manifest: TocManifest) -> str:
    root_file = with_suffix(manifest.root, ".html")
    if query.html_url.endswith(root_file):
        return query.html_url[: -len(root_file)]
    return query.html_url


class TocMerger:
    def __init__(self, max_depth: int = MAX_CONTENT_DEPTH) -> None:
        self.max_depth = max_depth

    def merge(self, query: BookQuery, manifest: TocManifest, anchors: Sequence[Anchor]) -> TocEntry:
        toc = TocEntry(
            title="",
            html_url=query.html_url,
            external_url=resolve_blob_url(query, manifest.root),
        )
        root_url = html_root(query, manifest)

        if manifest.has_parts:
            for part in manifest.parts or ():
                part_toc = TocEntry(title=part.caption, html_url=None, external_url=None)
                toc.children.append(part_toc)
                for chapter in part.chapters:
                    self._visit(query, chapter, anchors, root_url, part_toc, depth=1)
        else:
            for chapter in manifest.chapters:
                self._visit(query, chapter, anchors, root_url, toc, depth=1)

        return toc

    def _visit(
        self,
        query: BookQuery,
        node: ManifestNode,
        anchors: Sequence[Anchor],
        root_url: str,
        parent: TocEntry,
        depth: int,
    ) -> None:
        if depth > self.max_depth:
            logger.debug("Ignoring TOC entry nested deeper than %d levels: %r", self.max_depth, node)
            return

        try:
            entry = content_entry(query, node, anchors, root_url)
        except TitleNotFoundError as exc:
            logger.debug("Skipping TOC entry: %s", exc)
            target = parent
        else:
            parent.children.append(entry)
            target = entry

        for child in node.children:
            self._visit(query, child, anchors, root_url, target, depth + 1)


def content_entry(
    query: BookQuery,
    node: ManifestNode,
    anchors: Sequence[Anchor],
    root_url: str,
) -> TocEntry:
    if isinstance(node, ContentRef):
        title, href = find_title(node.file, anchors)
        return TocEntry(
            title=title,
            html_url=root_url + href,
            external_url=resolve_blob_url(query, node.file),
        )
    if isinstance(node, ExternalLink):
        return TocEntry(title=node.title, html_url=node.url, external_url=None)
    if isinstance(node, UnsupportedEntry):
        raise UnsupportedContentError(f"External content not supported: {node.raw!r}")
    raise UnknownContentTypeError(node.raw)
