from __future__ import annotations

from rich.markup import escape
from rich.tree import Tree

from recombiner.domain.models.book import Book, TocEntry


def book_tree(book: Book) -> Tree:
    tree = Tree(f"[bold]{escape(book.title)}[/bold] [dim]{escape(book.author)}[/dim]")
    for child in book.toc.children:
        _add_entry(tree, child)
    return tree


def _add_entry(tree: Tree, entry: TocEntry) -> None:
    if entry.html_url is None:
        label = f"[italic]{escape(entry.title)}[/italic]"
    else:
        label = f"{escape(entry.title)} [dim]{escape(entry.html_url)}[/dim]"
    branch = tree.add(label)
    for child in entry.children:
        _add_entry(branch, child)
