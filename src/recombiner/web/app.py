from __future__ import annotations

import threading
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from recombiner.application.services.catalog_service import CatalogService, entry_at_path
from recombiner.application.services.harvest_service import HarvestService
from recombiner.core.config import AppPaths
from recombiner.core.errors import CatalogError, HarvestCancelledError, RecombinerError
from recombiner.domain.models.book import BookQuery
from recombiner.domain.models.catalog import Catalog
from recombiner.infrastructure.catalog.store import CatalogStore


class BookQueryRequest(BaseModel):
    html_url: str
    code_url: str
    release: str
    toc_path: str = "book/_toc.yml"


class ToggleSelectionRequest(BaseModel):
    book_index: int
    path: list[int]


def create_app(paths: AppPaths, harvest_service: HarvestService | None = None) -> FastAPI:
    app = FastAPI(title="TeachBook Recombiner", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    harvester = harvest_service or HarvestService()
    service = CatalogService(store=CatalogStore(paths.catalog_path), harvest_service=harvester)
    catalog: Catalog = service.load()
    lock = threading.Lock()

    def selection_payload() -> dict[str, Any]:
        items = []
        for item in catalog.selected:
            book_index = next(i for i, book in enumerate(catalog.books) if book is item.book)
            items.append(
                {
                    "book_index": book_index,
                    "book_title": item.book.title,
                    "parents": item.parents,
                    "entry": item.entry.to_dict(),
                }
            )
        return {"count": len(items), "items": items}

    @app.get("/api/books")
    def list_books() -> dict[str, Any]:
        with lock:
            books = [book.to_dict() for book in catalog.books]
        return {"count": len(books), "books": books}

    @app.get("/api/books/{index}")
    def get_book(index: int) -> dict[str, Any]:
        with lock:
            try:
                return service.book_at(catalog, index).to_dict()
            except CatalogError as exc:
                raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.post("/api/books")
    def harvest_book(request: BookQueryRequest) -> dict[str, Any]:
        query = BookQuery(
            html_url=request.html_url,
            code_url=request.code_url,
            release=request.release,
            toc_path=request.toc_path,
        )
        try:
            book = harvester.harvest_book(query)
        except HarvestCancelledError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except RecombinerError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        with lock:
            service.add_book(catalog, book)
            service.save(catalog)
            index = len(catalog.books) - 1
        return {"index": index, "book": book.to_dict()}

    @app.delete("/api/books/{index}")
    def delete_book(index: int) -> dict[str, Any]:
        with lock:
            try:
                book = service.book_at(catalog, index)
                service.delete_book(catalog, book)
            except CatalogError as exc:
                raise HTTPException(status_code=404, detail=str(exc)) from exc
            service.save(catalog)
            return {"deleted": book.title, "count": len(catalog.books)}

    @app.get("/api/selection")
    def get_selection() -> dict[str, Any]:
        with lock:
            return selection_payload()

    @app.post("/api/selection/toggle")
    def toggle_selection(request: ToggleSelectionRequest) -> dict[str, Any]:
        with lock:
            try:
                book = service.book_at(catalog, request.book_index)
                entry, parents = entry_at_path(book.toc, request.path)
            except CatalogError as exc:
                raise HTTPException(status_code=404, detail=str(exc)) from exc
            selected = service.toggle_section(catalog, book, entry, parents)
            return {"selected": selected, **selection_payload()}

    @app.delete("/api/selection")
    def clear_selection() -> dict[str, Any]:
        with lock:
            service.clear_selection(catalog)
            return selection_payload()

    return app
