"""
pm — narzędzie CLI dla modelu produkcyjnego.

Użycie:
  pm <komenda> [opcje]

Komendy:
  solve   Uruchamia solver krok po kroku na modelu z pliku JSON.
  rules   Listuje reguły i fakty wejściowe modelu.
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.logging import RichHandler

# Windows: terminal może używać cp1252 — wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from pm.commands import rules as cmd_rules
from pm.commands import solve as cmd_solve


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pm",
        description="Model produkcyjny — narzędzie CLI.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="pm 1.1.0"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Loguj przebieg solvera (odpalenia, przebiegi) na stderr.",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_solve.add_parser(subparsers)
    cmd_rules.add_parser(subparsers)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
