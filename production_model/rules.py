"""
production_model/rules.py — reguły produkcyjne: warunki → konkluzje.

Publiczne API:
  perform(*conclusions)       → Rule
  Rule.when(*conditions)      → Rule
  Rule.then(*conclusions)     → Rule
  Rule.is_satisfied(memory)   → bool
  Rule.fire()                 → list[Fact]
"""

from __future__ import annotations

from collections.abc import Iterable

from .facts import EntityKind, Fact, require_facts
from .memory import WorkingMemory

CONJUNCTION = "i"
IF_WORD     = "Jeśli"
THEN_WORD   = "to"


class Rule:
    """
    Implikacja: jeśli wszystkie warunki są w pamięci roboczej, to konkluzje.

    Fakt może być warunkiem w jednych regułach i konkluzją w innych — tak
    powstaje łańcuch wnioskowania. Zbiory są uporządkowane (kolejność ma
    znaczenie tylko przy wyświetlaniu) i bez powtórzeń.
    """

    kind = EntityKind.RULE

    def __init__(self, *conclusions: Fact | Iterable[Fact], rule_id: str | None = None) -> None:
        self.rule_id = rule_id
        self._conditions:  list[Fact] = []
        self._conclusions: list[Fact] = []
        self.then(*conclusions)

    @staticmethod
    def _append(target: list[Fact], facts: list[Fact]) -> None:
        for fact in facts:
            if not any(f is fact for f in target):
                fact.seal()
                target.append(fact)

    def when(self, *conditions: Fact | Iterable[Fact]) -> Rule:
        """Dopisuje warunki (przesłanki) reguły."""
        self._append(self._conditions, require_facts(conditions, "Warunek"))
        return self

    def then(self, *conclusions: Fact | Iterable[Fact]) -> Rule:
        """Dopisuje konkluzje reguły."""
        self._append(self._conclusions, require_facts(conclusions, "Konkluzja"))
        return self

    @property
    def conditions(self) -> tuple[Fact, ...]:
        return tuple(self._conditions)

    @property
    def conclusions(self) -> tuple[Fact, ...]:
        return tuple(self._conclusions)

    def is_satisfied(self, memory: WorkingMemory) -> bool:
        """True gdy każdy warunek jest w pamięci; pusty zbiór warunków jest zawsze spełniony."""
        return all(memory.contains(fact) for fact in self._conditions)

    def unmet(self, memory: WorkingMemory) -> list[Fact]:
        """Warunki, których jeszcze brakuje w pamięci."""
        return [fact for fact in self._conditions if not memory.contains(fact)]

    def fire(self) -> list[Fact]:
        """
        Wykonuje efekty wszystkich konkluzji w zadeklarowanej kolejności.

        Nie sprawdza spełnienia warunków — to obowiązek wywołującego.
        Zwraca konkluzje, by wywołujący dopisał je do pamięci roboczej.
        """
        for fact in self._conclusions:
            fact.perform()
        return list(self._conclusions)

    def __str__(self) -> str:
        conditions  = f" {CONJUNCTION} ".join(f.name for f in self._conditions)
        conclusions = f" {CONJUNCTION} ".join(f.name for f in self._conclusions)
        if not conditions:
            return f"{conclusions[:1].upper()}{conclusions[1:]}."
        return f"{IF_WORD} {conditions}, {THEN_WORD} {conclusions}."

    def __repr__(self) -> str:
        label = f"{self.rule_id!r}, " if self.rule_id else ""
        return (
            f"Rule({label}when={[f.name for f in self._conditions]!r}, "
            f"then={[f.name for f in self._conclusions]!r})"
        )


def perform(*conclusions: Fact | Iterable[Fact], rule_id: str | None = None) -> Rule:
    """Wrapper: nowa reguła z podanymi konkluzjami, np. perform(b).when(a)."""
    return Rule(*conclusions, rule_id=rule_id)
