from __future__ import annotations

from recombiner.application.services.harvest_service import HarvestBatch, HarvestService
from recombiner.core.errors import CatalogError
from recombiner.domain.models.book import Book, BookQuery, TocEntry
from recombiner.domain.models.catalog import Catalog, SelectedSection
from recombiner.infrastructure.catalog.store import CatalogStore


def meta_of_book(book: Book) -> BookQuery:
    return book.query


class CatalogService:
    """Operations on a caller-owned :class:`Catalog`.

    Books and entries are matched by identity, so two harvests of the same
    book are distinct catalog items.
    """

    def __init__(self, store: CatalogStore | None = None, harvest_service: HarvestService | None = None) -> None:
        self.store = store
        self.harvest_service = harvest_service

    def load(self) -> Catalog:
        if self.store is None:
            return Catalog()
        return Catalog(books=self.store.load())

    def save(self, catalog: Catalog) -> None:
        if self.store is None:
            raise CatalogError("No catalog store configured.")
        self.store.save(catalog.books)

    def add_book(self, catalog: Catalog, book: Book) -> Catalog:
        catalog.books.append(book)
        return catalog

    def delete_book(self, catalog: Catalog, book: Book) -> Catalog:
        if not any(existing is book for existing in catalog.books):
            raise CatalogError(f"Book not in catalog: {book.title or book.html_url}")
        if not book.deleteable:
            raise CatalogError(f"Book cannot be deleted: {book.title or book.html_url}")
        catalog.books = [existing for existing in catalog.books if existing is not book]
        catalog.selected = [item for item in catalog.selected if item.book is not book]
        return catalog

    def book_at(self, catalog: Catalog, index: int) -> Book:
        if not 0 <= index < len(catalog.books):
            raise CatalogError(f"No book at index {index} (catalog has {len(catalog.books)}).")
        return catalog.books[index]

    def toggle_section(self, catalog: Catalog, book: Book, entry: TocEntry, parents: str) -> bool:
        """Select ``entry`` of ``book`` or unselect it; returns the new state."""
        for index, item in enumerate(catalog.selected):
            if item.book is book and item.entry is entry:
                del catalog.selected[index]
                return False
        catalog.selected.append(SelectedSection(book=book, entry=entry, parents=parents))
        return True

    def is_selected(self, catalog: Catalog, book: Book, entry: TocEntry) -> bool:
        return any(item.book is book and item.entry is entry for item in catalog.selected)

    def clear_selection(self, catalog: Catalog) -> Catalog:
        catalog.selected = []
        return catalog

    def refresh(self, catalog: Catalog) -> HarvestBatch:
        """Re-harvest every book; failed books are kept as they were."""
        if self.harvest_service is None:
            raise CatalogError("No harvest service configured.")
        refreshed: list[Book] = []
        batch = HarvestBatch()
        for book in catalog.books:
            query = meta_of_book(book)
            single = self.harvest_service.harvest_many([query])
            if single.books:
                new_book = single.books[0]
                new_book.deleteable = book.deleteable
                refreshed.append(new_book)
                batch.books.append(new_book)
            else:
                refreshed.append(book)
                batch.errors.extend(single.errors)
        catalog.books = refreshed
        catalog.selected = []
        return batch


def entry_at_path(toc: TocEntry, path: list[int]) -> tuple[TocEntry, str]:
    """Entry reached by child indices ``path`` and the ``" > "``-joined titles above it."""
    entry = toc
    parents: list[str] = []
    for index in path:
        if not 0 <= index < len(entry.children):
            raise CatalogError(f"No TOC entry at path {path}")
        parents.append(entry.title)
        entry = entry.children[index]
    return entry, " > ".join(parents)
