from __future__ import annotations

import argparse
import json

from recombiner.application.services.catalog_service import CatalogService
from recombiner.application.services.harvest_service import HarvestService
from recombiner.cli.context import CLIContext
from recombiner.cli.rendering import book_tree
from recombiner.domain.models.book import BookQuery
from recombiner.infrastructure.catalog.store import CatalogStore


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("harvest", help="Harvest the table of contents of a book")
    parser.add_argument("html_url", help="Root URL of the rendered book")
    parser.add_argument("code_url", help="URL of the GitHub or GitLab repository")
    parser.add_argument("release", help="Tag or branch to read the sources from")
    parser.add_argument("toc_path", nargs="?", default="book/_toc.yml", help="Path of _toc.yml in the repository")
    parser.add_argument("--json", action="store_true", help="Print the harvested book as JSON")
    parser.add_argument("--add", action="store_true", help="Append the harvested book to the catalog")
    parser.set_defaults(handler=run_harvest)


def run_harvest(args: argparse.Namespace, ctx: CLIContext) -> int:
    query = BookQuery(
        html_url=args.html_url,
        code_url=args.code_url,
        release=args.release,
        toc_path=args.toc_path,
    )
    with ctx.console.status(f"Harvesting {query.html_url}"):
        book = HarvestService().harvest_book(query)

    if args.json:
        ctx.console.print_json(json.dumps(book.to_dict()))
    else:
        ctx.console.print(book_tree(book))
        ctx.console.print(f"Logo: {book.logo}")

    if args.add:
        service = CatalogService(store=CatalogStore(ctx.paths.catalog_path))
        catalog = service.add_book(service.load(), book)
        service.save(catalog)
        ctx.console.print(f"Added to catalog ({len(catalog.books)} books): {ctx.paths.catalog_path}")
    return 0
