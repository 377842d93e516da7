from __future__ import annotations

import json
import os
from pathlib import Path

from recombiner.core.errors import CatalogError
from recombiner.domain.models.book import Book


class CatalogStore:
    def __init__(self, catalog_path: Path) -> None:
        self.catalog_path = catalog_path

    def load(self) -> list[Book]:
        if not self.catalog_path.exists():
            return []
        try:
            payload = json.loads(self.catalog_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Catalog file is not valid JSON: {self.catalog_path}") from exc
        if not isinstance(payload, list):
            raise CatalogError(f"Catalog file must hold a list of books: {self.catalog_path}")
        try:
            return [Book.from_dict(item) for item in payload]
        except (KeyError, TypeError, AttributeError) as exc:
            raise CatalogError(f"Malformed book record in {self.catalog_path}: {exc}") from exc

    def save(self, books: list[Book]) -> None:
        self.catalog_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.catalog_path.parent / f".{self.catalog_path.name}.tmp"
        temp_path.write_text(
            json.dumps([book.to_dict() for book in books], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        os.replace(temp_path, self.catalog_path)
