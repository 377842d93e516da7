"""Typed view of a Jupyter Book ``_toc.yml`` manifest.

Each node is classified exactly once, when the manifest is parsed:

* ``ContentRef``: has a ``file`` key and renders to a page.
* ``ExternalLink``: has both ``url`` and ``title``.
* ``UnsupportedEntry``: carries an ``external`` key.
* ``UnknownEntry``: anything else (``glob`` entries included).

The merge walk raises for the last two when it reaches them, so a manifest
with a bad node still parses but never produces a book.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from recombiner.core.errors import ManifestFormatError


@dataclass(frozen=True, slots=True)
class ContentRef:
    file: str
    children: tuple[ManifestNode, ...] = ()


@dataclass(frozen=True, slots=True)
class ExternalLink:
    title: str
    url: str
    children: tuple[ManifestNode, ...] = ()


@dataclass(frozen=True, slots=True)
class UnsupportedEntry:
    raw: Any
    children: tuple[ManifestNode, ...] = ()


@dataclass(frozen=True, slots=True)
class UnknownEntry:
    raw: Any
    children: tuple[ManifestNode, ...] = ()


ManifestNode = Union[ContentRef, ExternalLink, UnsupportedEntry, UnknownEntry]


@dataclass(frozen=True, slots=True)
class Part:
    caption: str
    chapters: tuple[ManifestNode, ...] = ()


@dataclass(frozen=True, slots=True)
class TocManifest:
    format: str
    root: str
    chapters: tuple[ManifestNode, ...] = ()
    parts: tuple[Part, ...] | None = None

    @property
    def has_parts(self) -> bool:
        return self.parts is not None


def parse_manifest(raw: Any) -> TocManifest:
    if not isinstance(raw, dict):
        raise ManifestFormatError(f"TOC manifest must be a mapping, got {type(raw).__name__}")
    if "root" not in raw:
        raise ManifestFormatError("TOC manifest has no 'root' entry")

    parts = None
    if "parts" in raw:
        parts = tuple(
            Part(
                caption=str(part.get("caption") or "") if isinstance(part, dict) else "",
                chapters=_parse_nodes(part.get("chapters") if isinstance(part, dict) else None),
            )
            for part in raw.get("parts") or []
        )

    top_level = raw.get("chapters")
    if top_level is None:
        top_level = raw.get("sections")

    return TocManifest(
        format=str(raw.get("format") or ""),
        root=str(raw["root"]),
        chapters=_parse_nodes(top_level),
        parts=parts,
    )


def parse_node(raw: Any) -> ManifestNode:
    if not isinstance(raw, dict):
        return UnknownEntry(raw=raw)

    nested = raw.get("sections")
    if nested is None:
        nested = raw.get("chapters")
    children = _parse_nodes(nested)

    if "file" in raw:
        return ContentRef(file=str(raw.get("file") or ""), children=children)
    if "url" in raw and "title" in raw:
        return ExternalLink(title=str(raw.get("title") or ""), url=str(raw.get("url") or ""), children=children)
    if "external" in raw:
        return UnsupportedEntry(raw=raw, children=children)
    return UnknownEntry(raw=raw, children=children)


def _parse_nodes(raw: Any) -> tuple[ManifestNode, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise ManifestFormatError(f"Expected a list of TOC entries, got {type(raw).__name__}")
    return tuple(parse_node(item) for item in raw)
