from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from recombiner.cli.commands import catalog_cmd, harvest_cmd, web_cmd
from recombiner.cli.context import CLIContext
from recombiner.core.config import load_paths
from recombiner.core.errors import RecombinerError
from recombiner.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recombiner",
        description="Harvest and browse tables of contents of Jupyter Book textbooks",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root to use for .recombiner data (default: current working directory)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    harvest_cmd.register(subparsers)
    catalog_cmd.register(subparsers)
    web_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    paths = load_paths(args.project_root)
    ctx = CLIContext(paths=paths, console=console)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except RecombinerError as exc:
        logger.error(str(exc))
        return 1
