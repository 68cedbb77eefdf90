"""Komenda: pm rules — listowanie reguł i faktów wejściowych modelu."""

from __future__ import annotations

import argparse
import pathlib

from rich.console import Console
from rich.table import Table
from rich import box

from production_model import Model, ProductionError, load_model

console = Console(width=220)


def _fmt_facts(facts, input_names: set[str]) -> str:
    if not facts:
        return "[dim](zawsze)[/dim]"
    return ", ".join(
        f"[bold]{f.name}[/bold]" if f.name in input_names else f.name
        for f in facts
    )


def _unreachable(model: Model) -> list[str]:
    """Warunki, których nie ma na wejściu i których nie konkluduje żadna reguła."""
    known = {f.name for f in model.inputs}
    for rule in model.rules:
        known.update(f.name for f in rule.conclusions)
    missing: list[str] = []
    for rule in model.rules:
        for fact in rule.conditions:
            if fact.name not in known and fact.name not in missing:
                missing.append(fact.name)
    return missing


def run(args: argparse.Namespace) -> None:
    model_path = pathlib.Path(args.model)
    if not model_path.exists():
        console.print(f"[red]Brak pliku modelu:[/red] {model_path}")
        raise SystemExit(1)

    try:
        model = load_model(model_path)
    except ProductionError as e:
        console.print(f"[red]Błąd wczytywania modelu:[/red] {e}")
        raise SystemExit(1)

    inputs = {f.name for f in model.inputs}
    console.print(f"Model: [bold]{model.name}[/bold]")
    console.print(
        "Fakty wejściowe: "
        + (", ".join(f"[cyan]{f.name}[/cyan]" for f in model.inputs) or "[dim](brak)[/dim]")
    )

    if not model.rules:
        console.print("[yellow]Model nie zawiera reguł.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("#",     no_wrap=True, justify="right")
    table.add_column("ID",    no_wrap=True, max_width=24, style="bold")
    table.add_column("JEŚLI", no_wrap=False, max_width=80)
    table.add_column("TO",    no_wrap=False, max_width=60, style="green")

    for i, rule in enumerate(model.rules, start=1):
        table.add_row(
            str(i),
            rule.rule_id or "—",
            _fmt_facts(rule.conditions, inputs),
            ", ".join(f.name for f in rule.conclusions),
        )

    console.print(table)
    console.print(f"[dim]{len(model.rules)} reguł, {len(model.registry)} faktów w słowniku[/dim]")

    missing = _unreachable(model)
    if missing:
        console.print(
            "[yellow]Warunki nieosiągalne (brak na wejściu i w konkluzjach):[/yellow] "
            + ", ".join(missing)
        )


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "rules",
        help="Listuje reguły i fakty wejściowe modelu z pliku JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wyświetla reguły modelu w kolejności deklaracji (ta kolejność decyduje
o kolejności odpalania) oraz warunki, których żadna reguła nie konkluduje.

Przykłady:
  pm rules --model models/koncert.json
        """,
    )
    p.add_argument(
        "--model", "-m",
        metavar="PLIK",
        required=True,
        help="Plik JSON z modelem produkcyjnym.",
    )
    p.set_defaults(func=run)
