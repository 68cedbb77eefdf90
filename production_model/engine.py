"""
production_model/engine.py — solver: krokowe wnioskowanie w przód.

Obsługuje:
  - przegląd reguł oczekujących w kolejności deklaracji (kursor `head`)
  - odpalenie reguły spełnionej: efekty konkluzji + dopisanie do pamięci
  - przebiegi (iteration): pełny przegląd listy oczekujących
  - stan końcowy: sukces (wszystkie reguły odpalone) albo zakleszczenie
    (cały przebieg bez żadnego odpalenia)
  - migawki stanu po każdym odpaleniu (historia do podglądu / przewinięcia)

Solver sam niczego nie planuje: step() wywołuje zewnętrzny sterownik
(pętla w teście, timer, ConsoleDriver), który między krokami może rysować.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .errors import ErrorCode, FactTypeError, ReentrantStepError
from .facts import EntityKind, Fact, flatten, kind_of, require_facts
from .memory import WorkingMemory
from .rules import Rule

logger = logging.getLogger(__name__)


class SolverState(StrEnum):
    RUNNING   = "running"
    SUCCEEDED = "succeeded"
    FAILED    = "failed"


# ---------------------------------------------------------------------------
# Wyniki kroku
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Step:
    """
    Opis jednego kroku: która reguła została zbadana i czy została odpalona.

    - rule_index: indeks reguły w Solver.rules (od 0)
    - performing: True gdy reguła została odpalona w tym kroku
    - asserted:   fakty dopisane do pamięci (pusta krotka gdy performing=False)
    """
    rule_index: int
    performing: bool
    asserted:   tuple[Fact, ...] = ()


@dataclass(frozen=True, slots=True)
class Outcome:
    """
    Stan końcowy. bool(outcome) == succeeded.

    - unsatisfied: indeksy reguł, które nigdy nie zostały spełnione
    """
    succeeded:   bool
    unsatisfied: tuple[int, ...] = ()

    def __bool__(self) -> bool:
        return self.succeeded


StepResult = Step | Outcome


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Migawka stanu po odpaleniu reguły.

    Fakty i reguły są współdzielone (niezmienne po budowie) — kopiowane są
    tylko sekwencja pamięci i zbiory indeksów.
    """
    iteration: int
    head:      int
    memory:    tuple[Fact, ...]
    pending:   tuple[int, ...]
    fired:     tuple[int, ...]
    fired_in_pass: int = 0


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------

class Solver:
    """
    Główny silnik modelu produkcyjnego (w oryginale ProductionModel/Solver).

    Użycie::

        solver = Solver(inputs=[a], rules=[perform(b).when(a)])
        outcome = solver.run_to_completion()
        if not outcome:
            print(outcome.unsatisfied)
    """

    def __init__(
        self,
        inputs: Fact | Iterable[Fact] = (),
        rules:  Rule | Iterable[Rule] = (),
    ) -> None:
        self._rules: list[Rule]   = []
        self._pending: list[int]  = []
        self._fired: list[int]    = []
        self._memory              = WorkingMemory(require_facts([inputs], "Fakt wejściowy"))
        self._head                = 0
        self._iteration           = 0
        self._fired_in_pass       = 0
        self._state               = SolverState.RUNNING
        self._outcome: Outcome | None = None
        self._stepping            = False
        self._history: list[Snapshot] = []

        self._ruling(rules)

    def _ruling(self, rules: Rule | Iterable[Rule]) -> None:
        for rule in flatten([rules]):
            if kind_of(rule) is not EntityKind.RULE:
                raise FactTypeError(
                    ErrorCode.NOT_A_RULE,
                    f"Lista reguł może zawierać tylko reguły, nie {type(rule).__name__}: {rule!r}",
                )
            self._pending.append(len(self._rules))
            self._rules.append(rule)

    # ------------------------------------------------------------------

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    @property
    def memory(self) -> WorkingMemory:
        return self._memory

    @property
    def pending(self) -> tuple[int, ...]:
        return tuple(self._pending)

    @property
    def fired(self) -> tuple[int, ...]:
        return tuple(self._fired)

    @property
    def head(self) -> int:
        return self._head

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def outcome(self) -> Outcome | None:
        return self._outcome

    @property
    def history(self) -> tuple[Snapshot, ...]:
        return tuple(self._history)

    @property
    def current_rule(self) -> int | None:
        """Indeks reguły, którą zbada następny step() (None w stanie końcowym)."""
        if self._state is not SolverState.RUNNING or not self._pending:
            return None
        return self._pending[self._head]

    # ------------------------------------------------------------------

    def step(self) -> StepResult:
        """
        Jedno przejście automatu.

        Returns:
            Outcome w stanie końcowym (ponowne wywołania zwracają ten sam),
            w przeciwnym razie Step dla zbadanej reguły.
        """
        if self._outcome is not None:
            return self._outcome
        if self._stepping:
            raise ReentrantStepError(
                ErrorCode.REENTRANT_STEP,
                "step() wywołany z efektu ubocznego odpalanej reguły.",
            )
        if not self._pending:
            return self._finish(Outcome(succeeded=True))

        self._stepping = True
        try:
            return self._examine()
        finally:
            self._stepping = False

    def _examine(self) -> Step:
        index = self._pending[self._head]
        rule  = self._rules[index]

        if not rule.is_satisfied(self._memory):
            self._head += 1
            logger.debug("Reguła %d niespełniona: %s", index + 1, rule)
            if self._head >= len(self._pending):
                self._end_pass()
            return Step(index, False)

        # przejście zatwierdzane przed efektami — reguła odpala co najwyżej raz
        asserted = rule.conclusions
        del self._pending[self._head]
        self._fired.append(index)
        self._fired_in_pass += 1
        self._memory.add(asserted)
        try:
            rule.fire()
        finally:
            if self._head >= len(self._pending):
                self._end_pass()
            self._snapshot()
        logger.debug(
            "Reguła %d odpalona: %s (pamięć: %d faktów)",
            index + 1, rule, len(self._memory),
        )
        return Step(index, True, asserted)

    def _end_pass(self) -> None:
        self._iteration += 1
        logger.debug(
            "Koniec przebiegu %d: odpalono %d, oczekuje %d",
            self._iteration, self._fired_in_pass, len(self._pending),
        )
        if self._fired_in_pass == 0 and self._pending:
            self._finish(Outcome(succeeded=False, unsatisfied=tuple(self._pending)))
            return
        self._head = 0
        self._fired_in_pass = 0

    def _finish(self, outcome: Outcome) -> Outcome:
        self._outcome = outcome
        self._state   = SolverState.SUCCEEDED if outcome.succeeded else SolverState.FAILED
        if outcome.succeeded:
            logger.info("Sukces: wszystkie reguły (%d) odpalone", len(self._rules))
        else:
            logger.info(
                "Brak rozwiązania: reguły %s nie mogą zostać spełnione",
                ", ".join(str(i + 1) for i in outcome.unsatisfied),
            )
        return outcome

    def _snapshot(self) -> None:
        self._history.append(Snapshot(
            iteration=self._iteration,
            head=self._head,
            memory=self._memory.snapshot_view(),
            pending=tuple(self._pending),
            fired=tuple(self._fired),
            fired_in_pass=self._fired_in_pass,
        ))

    # ------------------------------------------------------------------

    def iterate(self) -> list[StepResult]:
        """Kroki aż do końca bieżącego przebiegu (zmiana iteration) lub stanu końcowego."""
        iteration = self._iteration
        results: list[StepResult] = []
        while self._iteration == iteration:
            result = self.step()
            results.append(result)
            if isinstance(result, Outcome):
                break
        return results

    def run_to_completion(self) -> Outcome:
        """Kroki aż do sukcesu albo zakleszczenia."""
        while True:
            result = self.step()
            if isinstance(result, Outcome):
                return result

    def restore(self, snapshot: Snapshot) -> None:
        """
        Przewija stan do migawki z historii i usuwa późniejsze migawki.

        Efekty uboczne już wykonanych konkluzji NIE są cofane.
        """
        if self._stepping:
            raise ReentrantStepError(
                ErrorCode.REENTRANT_STEP,
                "restore() wywołany z efektu ubocznego odpalanej reguły.",
            )
        try:
            position = next(i for i, s in enumerate(self._history) if s is snapshot)
        except StopIteration:
            raise ValueError("Migawka nie pochodzi z historii tego solvera.") from None

        self._memory.replace(snapshot.memory)
        self._pending       = list(snapshot.pending)
        self._fired         = list(snapshot.fired)
        self._head          = snapshot.head
        self._iteration     = snapshot.iteration
        self._fired_in_pass = snapshot.fired_in_pass
        self._state         = SolverState.RUNNING
        self._outcome       = None
        del self._history[position + 1:]
        logger.debug("Przywrócono migawkę %d (przebieg %d)", position, snapshot.iteration)


def production_model(
    inputs: Fact | Iterable[Fact],
    rules:  Rule | Iterable[Rule],
) -> Solver:
    """Wrapper: nowy solver dla faktów wejściowych i reguł."""
    return Solver(inputs, rules)
