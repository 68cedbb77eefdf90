"""Komenda: pm solve — uruchamia solver krok po kroku na modelu z pliku JSON."""

from __future__ import annotations

import argparse
import pathlib

from rich.console import Console
from rich.table   import Table
from rich         import box

from production_model import ProductionError, Solver, load_model
from pm.config import load_options
from pm.driver import ConsoleDriver

console = Console(width=200)


def _announce(name: str, vocabulary: tuple[str, ...]) -> None:
    """Efekt faktu w CLI: każde wykonanie (także powtórzenia z "repeat") to jedna linia."""
    console.print(f"    [magenta]↻ {name}[/magenta]")


# ---------------------------------------------------------------------------
# Wyświetlanie historii
# ---------------------------------------------------------------------------

def _show_history(solver: Solver) -> None:
    """Wyświetla migawki stanu zapisane po każdym odpaleniu reguły."""
    if not solver.history:
        console.print("\n[yellow]Brak migawek — żadna reguła nie została odpalona.[/yellow]")
        return

    console.print("\n[bold]Historia migawek:[/bold]")
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("#",         style="dim", no_wrap=True, justify="right")
    table.add_column("PRZEBIEG",  no_wrap=True, justify="right")
    table.add_column("ODPALONE",  no_wrap=True)
    table.add_column("OCZEKUJĄCE", no_wrap=True)
    table.add_column("PAMIĘĆ",    no_wrap=False)
    for i, snap in enumerate(solver.history, start=1):
        table.add_row(
            str(i),
            str(snap.iteration),
            " ".join(str(r + 1) for r in snap.fired),
            " ".join(str(r + 1) for r in snap.pending) or "—",
            ", ".join(f.name for f in snap.memory),
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Główna logika
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    model_path = pathlib.Path(args.model)
    if not model_path.exists():
        console.print(f"[red]Brak pliku modelu:[/red] {model_path}")
        raise SystemExit(1)

    try:
        model = load_model(model_path, effect=_announce)
    except ProductionError as e:
        console.print(f"[red]Błąd wczytywania modelu:[/red] {e}")
        raise SystemExit(1)

    try:
        options = load_options()
    except ValueError as e:
        console.print(f"[red]Błąd konfiguracji:[/red] {e}")
        raise SystemExit(1)

    if args.speed is not None:
        options.speed = args.speed
    if args.number_facts:
        options.number_facts = True
    if args.no_number_rules:
        options.number_rules = False

    console.print(
        f"Model: [bold]{model.name}[/bold]  "
        f"{len(model.registry)} faktów w słowniku, "
        f"{len(model.inputs)} wejściowych, {len(model.rules)} reguł"
    )

    solver = model.solver()
    driver = ConsoleDriver(solver, options, console)
    driver.render()
    console.print()
    outcome = driver.solve()

    console.print(f"[dim]Przebiegi: {solver.iteration}[/dim]")
    if args.history:
        _show_history(solver)

    if outcome is not None and not outcome:
        raise SystemExit(2)


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "solve",
        help="Uruchamia solver krok po kroku na modelu z pliku JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wczytuje model (słownik faktów, fakty wejściowe, reguły) z pliku JSON
i odpala reguły w kolejności deklaracji, aż wszystkie zostaną wykonane
(sukces) albo cały przebieg nie odpali żadnej (brak rozwiązania, kod 2).

Format pliku modelu JSON:
  {
    "name":   "koncert",
    "inputs": ["iść na koncert"],
    "rules": [
      {"id": "R1", "if": ["iść na koncert"], "then": ["zaprosić przyjaciółkę"]}
    ]
  }

Przykłady:
  pm solve --model models/koncert.json
  pm solve --model models/koncert.json --speed 0.5 --number-facts
  pm -v solve --model models/koncert.json --history
        """,
    )
    p.add_argument(
        "--model", "-m",
        metavar="PLIK",
        required=True,
        help="Plik JSON z modelem produkcyjnym.",
    )
    p.add_argument(
        "--speed", "-s",
        metavar="SEKUNDY",
        type=float,
        default=None,
        help="Przerwa między krokami (domyślnie: PM_SPEED lub 0).",
    )
    p.add_argument(
        "--number-facts",
        action="store_true",
        dest="number_facts",
        help="Numeruj fakty w pamięci roboczej.",
    )
    p.add_argument(
        "--no-number-rules",
        action="store_true",
        dest="no_number_rules",
        help="Nie numeruj reguł.",
    )
    p.add_argument(
        "--history",
        action="store_true",
        help="Po zakończeniu wyświetl migawki stanu po każdym odpaleniu.",
    )
    p.set_defaults(func=run)
