"""
Sterownik konsolowy solvera — odpowiednik wizualizacji krokowej w przeglądarce.

Rysuje ponumerowaną listę reguł i pamięć roboczą, a potem wywołuje
Solver.step() z zadaną przerwą, wypisując regułę bieżącą, regułę odpaloną
i nowo dopisane fakty. Po stanie końcowym woła on_success / on_error
dokładnie raz.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console
from rich.table   import Table
from rich         import box

from production_model import Outcome, Solver, Step

Callback = Callable[[Solver], None]


@dataclass(slots=True)
class DriverOptions:
    """
    - speed:        przerwa między krokami w sekundach (0 = bez przerw)
    - number_rules: numeruj reguły (1..n)
    - number_facts: numeruj fakty w pamięci roboczej
    - on_success:   wywoływane raz po sukcesie, z solverem
    - on_error:     wywoływane raz po zakleszczeniu, z solverem
    """
    speed:        float = 0.0
    number_rules: bool  = True
    number_facts: bool  = False
    on_success:   Callback | None = None
    on_error:     Callback | None = None


class ConsoleDriver:

    def __init__(
        self,
        solver:  Solver,
        options: DriverOptions | None = None,
        console: Console | None = None,
    ) -> None:
        self.solver   = solver
        self.options  = options or DriverOptions()
        self.console  = console or Console()
        self._paused  = False
        self._shown   = 0  # ile faktów pamięci już wypisano
        self._outcome: Outcome | None = None

    # ------------------------------------------------------------------
    # Wyświetlanie
    # ------------------------------------------------------------------

    def _rule_label(self, index: int) -> str:
        rule = self.solver.rules[index]
        text = str(rule)
        if self.options.number_rules:
            text = f"{index + 1}. {text}"
        return text

    def _print_fact(self, fact) -> None:
        self._shown += 1
        prefix = f"{self._shown}. " if self.options.number_facts else "• "
        self.console.print(f"  {prefix}[cyan]{fact.name}[/cyan]")

    def render(self) -> None:
        """Wypisuje reguły i początkową zawartość pamięci roboczej."""
        table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold white")
        if self.options.number_rules:
            table.add_column("#", style="dim", no_wrap=True, justify="right")
        table.add_column("REGUŁA", no_wrap=False)
        for i, rule in enumerate(self.solver.rules):
            row = [str(rule)]
            if self.options.number_rules:
                row.insert(0, str(i + 1))
            table.add_row(*row)
        self.console.print("[bold]Reguły:[/bold]")
        self.console.print(table)

        self.console.print("[bold]Pamięć robocza:[/bold]")
        self._shown = 0
        for fact in self.solver.memory:
            self._print_fact(fact)

    def _show_step(self, step: Step) -> None:
        label = self._rule_label(step.rule_index)
        if not step.performing:
            self.console.print(f"[dim]→ {label}[/dim]")
            return
        self.console.print(f"[green]✔ {label}[/green]")
        for fact in step.asserted:
            self._print_fact(fact)

    def report(self, outcome: Outcome) -> None:
        """Końcowy komunikat: rozwiązanie albo reguły, których nie da się wykonać."""
        if outcome:
            names = self.solver.memory.names()
            last  = names[-1] if names else "—"
            self.console.print(f"\n[bold green]Wykonano![/bold green] Rozwiązanie: {last}")
            return
        numbers = " ".join(str(i + 1) for i in outcome.unsatisfied)
        self.console.print(
            f"\n[bold red]Brak rozwiązania![/bold red] Reguły: {numbers} nie mogą być wykonane..."
        )
        memory = self.solver.memory
        for index in outcome.unsatisfied:
            missing = ", ".join(f.name for f in self.solver.rules[index].unmet(memory))
            self.console.print(f"  [red]{index + 1}.[/red] brakuje: {missing}")

    # ------------------------------------------------------------------
    # Sterowanie
    # ------------------------------------------------------------------

    def pause(self) -> None:
        """Zatrzymuje solve() przed następnym krokiem; ponowne solve() wznawia."""
        self._paused = True

    def solve(self) -> Outcome | None:
        """
        Wykonuje kroki aż do stanu końcowego albo pause().

        Returns:
            Outcome po zakończeniu, None gdy przerwano przez pause().
        """
        if self._outcome is not None:
            return self._outcome
        self._paused = False
        while not self._paused:
            result = self.solver.step()
            if isinstance(result, Outcome):
                self._outcome = result
                self.report(result)
                callback = self.options.on_success if result else self.options.on_error
                if callback is not None:
                    callback(self.solver)
                return result
            self._show_step(result)
            if self.options.speed > 0:
                time.sleep(self.options.speed)
        return None
