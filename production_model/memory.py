"""
production_model/memory.py — pamięć robocza (w oryginale "Cache").

Uporządkowana sekwencja faktów, tylko do dopisywania. Kolejność służy do
numeracji przy wyświetlaniu; test spełnienia reguły używa przynależności.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .facts import Fact, require_facts


class WorkingMemory:
    """Fakty wejściowe + konkluzje wszystkich odpalonych reguł, w kolejności asercji."""

    def __init__(self, *facts: Fact | Iterable[Fact]) -> None:
        self._container: list[Fact] = []
        self.add(*facts)

    def add(self, *facts: Fact | Iterable[Fact]) -> list[Fact]:
        """
        Asercja faktów na koniec pamięci. Brak deduplikacji — fakt
        dodany dwa razy występuje dwa razy.

        Returns:
            Lista faktów w kolejności dopisania.
        """
        added = require_facts(facts, "Element pamięci roboczej")
        self._container.extend(added)
        return added

    def contains(self, fact: Fact) -> bool:
        # tożsamość, nie równość
        return any(item is fact for item in self._container)

    def __contains__(self, fact: object) -> bool:
        return self.contains(fact)  # type: ignore[arg-type]

    def snapshot_view(self) -> tuple[Fact, ...]:
        return tuple(self._container)

    def names(self) -> list[str]:
        return [fact.name for fact in self._container]

    def replace(self, facts: Iterable[Fact]) -> None:
        """Podmienia całą zawartość — używane wyłącznie przy Solver.restore()."""
        self._container = list(facts)

    def __len__(self) -> int:
        return len(self._container)

    def __iter__(self) -> Iterator[Fact]:
        return iter(self._container)

    def __repr__(self) -> str:
        return f"WorkingMemory({self.names()!r})"
