from __future__ import annotations

import argparse

from rich.panel import Panel
from rich.table import Table

from recombiner.application.services.catalog_service import CatalogService
from recombiner.application.services.harvest_service import HarvestService
from recombiner.cli.context import CLIContext
from recombiner.cli.rendering import book_tree
from recombiner.infrastructure.catalog.store import CatalogStore


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("catalog", help="Manage harvested books")
    catalog_subparsers = parser.add_subparsers(dest="catalog_command", required=True)

    list_books = catalog_subparsers.add_parser("list", help="List books in the catalog")
    list_books.set_defaults(handler=run_list)

    show = catalog_subparsers.add_parser("show", help="Show the table of contents of a book")
    show.add_argument("index", type=int)
    show.set_defaults(handler=run_show)

    remove = catalog_subparsers.add_parser("remove", help="Remove a book from the catalog")
    remove.add_argument("index", type=int)
    remove.set_defaults(handler=run_remove)

    refresh = catalog_subparsers.add_parser("refresh", help="Harvest every book in the catalog again")
    refresh.set_defaults(handler=run_refresh)


def _build_service(ctx: CLIContext, *, harvest: bool = False) -> CatalogService:
    return CatalogService(
        store=CatalogStore(ctx.paths.catalog_path),
        harvest_service=HarvestService() if harvest else None,
    )


def run_list(args: argparse.Namespace, ctx: CLIContext) -> int:
    catalog = _build_service(ctx).load()

    table = Table(title=f"Books ({len(catalog.books)})")
    table.add_column("#", justify="right")
    table.add_column("Title", overflow="fold")
    table.add_column("Author", overflow="fold")
    table.add_column("Release")
    table.add_column("Entries", justify="right")
    table.add_column("HTML", overflow="fold")

    for index, book in enumerate(catalog.books):
        entries = sum(1 for _ in book.toc.walk()) - 1
        table.add_row(str(index), book.title, book.author, book.release, str(entries), book.html_url)

    ctx.console.print(table)
    return 0


def run_show(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = _build_service(ctx)
    book = service.book_at(service.load(), args.index)
    ctx.console.print(book_tree(book))
    return 0


def run_remove(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = _build_service(ctx)
    catalog = service.load()
    book = service.book_at(catalog, args.index)
    service.save(service.delete_book(catalog, book))
    ctx.console.print(f"Removed: {book.title}")
    return 0


def run_refresh(args: argparse.Namespace, ctx: CLIContext) -> int:
    service = _build_service(ctx, harvest=True)
    catalog = service.load()
    with ctx.console.status(f"Refreshing {len(catalog.books)} books"):
        batch = service.refresh(catalog)
    service.save(catalog)

    lines = [f"Refreshed: {len(batch.books)}", f"Failed: {len(batch.errors)}"]
    lines.extend(f"{query.html_url}: {message}" for query, message in batch.errors)
    ctx.console.print(Panel.fit("\n".join(lines), title="Catalog Refresh Summary"))
    return 0 if not batch.errors else 1
