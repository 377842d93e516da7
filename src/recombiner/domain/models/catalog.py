from __future__ import annotations

from dataclasses import dataclass, field

from recombiner.domain.models.book import Book, TocEntry


@dataclass(slots=True, eq=False)
class SelectedSection:
    book: Book
    entry: TocEntry
    parents: str


@dataclass(slots=True)
class Catalog:
    books: list[Book] = field(default_factory=list)
    selected: list[SelectedSection] = field(default_factory=list)
