"""
production_model/facts.py — fakty i rejestr (słownik) faktów.

Publiczne API:
  register(*names)           → FactRegistry
  FactRegistry.get(name)     → Fact (jedna wspólna instancja na nazwę)
  Fact.with_effect(cb)       → Fact
  Fact.with_repeat(n)        → Fact
  Fact.perform()             → liczba wywołań efektu
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from enum import StrEnum
from typing import Any

from .errors import ErrorCode, FactSealedError, FactTypeError, UnknownFactError

# Efekt uboczny: (nazwa faktu, kopia słownika nazw) -> cokolwiek
Effect = Callable[[str, tuple[str, ...]], Any]


class EntityKind(StrEnum):
    """Zamknięty zbiór rodzajów encji modelu (fakt, reguła) — znacznik sprawdzany przez kind_of()."""

    FACT = "fact"
    RULE = "rule"


def kind_of(item: object) -> EntityKind | None:
    return getattr(item, "kind", None)


def flatten(items: Iterable[Any]) -> Iterator[Any]:
    """Spłaszcza dowolnie zagnieżdżone kolekcje; stringi i encje modelu są liśćmi."""
    for item in items:
        if isinstance(item, Iterable) and not isinstance(item, (str, bytes)) and kind_of(item) is None:
            yield from flatten(item)
        else:
            yield item


def require_facts(items: Iterable[Any], role: str) -> list[Fact]:
    """Zwraca spłaszczoną listę faktów albo zgłasza FactTypeError."""
    facts: list[Fact] = []
    for item in flatten(items):
        if kind_of(item) is not EntityKind.FACT:
            raise FactTypeError(
                ErrorCode.NOT_A_FACT,
                f"{role} nie może być typu {type(item).__name__}: {item!r}",
            )
        facts.append(item)
    return facts


# ---------------------------------------------------------------------------
# Fact
# ---------------------------------------------------------------------------

class Fact:
    """
    Atomowy, nazwany fakt (zdarzenie, czynność) — w oryginale "Action".

    Tożsamość = nazwa w obrębie jednego rejestru; porównanie przez `is`.
    Konfiguracja (efekt, liczba powtórzeń) jest dozwolona tylko zanim fakt
    trafi do jakiejkolwiek reguły.
    """

    kind = EntityKind.FACT

    __slots__ = ("name", "_registry", "_repeat", "_effect", "_sealed")

    def __init__(self, name: str, registry: FactRegistry) -> None:
        self.name      = name
        self._registry = registry
        self._repeat   = 1
        self._effect: Effect | None = None
        self._sealed   = False

    def __repr__(self) -> str:
        return f"Fact({self.name!r})"

    def __str__(self) -> str:
        return self.name

    @property
    def repeat(self) -> int:
        return self._repeat

    @property
    def effect(self) -> Effect | None:
        return self._effect

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Wywoływane przez Rule przy dodaniu faktu — od teraz konfiguracja jest zamrożona."""
        self._sealed = True

    def _check_open(self) -> None:
        if self._sealed:
            raise FactSealedError(
                ErrorCode.FACT_SEALED,
                f"Fakt \"{self.name}\" jest już użyty w regule — skonfiguruj go przed budową reguł.",
            )

    def with_effect(self, callback: Effect | None = None) -> Fact:
        """Ustawia (lub czyści, gdy None) efekt uboczny wykonywany przy asercji."""
        self._check_open()
        if callback is not None and not callable(callback):
            raise FactTypeError(
                ErrorCode.NOT_A_FACT,
                f"Efekt faktu \"{self.name}\" musi być wywoływalny, nie {type(callback).__name__}.",
            )
        self._effect = callback
        return self

    def with_repeat(self, n: int = 1) -> Fact:
        """Ile razy efekt ma się wykonać, gdy fakt jest konkluzją odpalonej reguły."""
        self._check_open()
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise FactTypeError(
                ErrorCode.BAD_REPEAT,
                f"Liczba powtórzeń faktu \"{self.name}\" musi być liczbą całkowitą >= 1, jest {n!r}.",
            )
        self._repeat = n
        return self

    def perform(self) -> int:
        """
        Wykonuje efekt `repeat` razy; każde wywołanie dostaje nazwę faktu
        i świeżą krotkę nazw słownika (kopia, nie referencja).

        Returns:
            Liczba wykonanych wywołań (0 gdy efekt nie jest ustawiony).
        """
        if self._effect is None:
            return 0
        for _ in range(self._repeat):
            self._effect(self.name, self._registry.names)
        return self._repeat


# ---------------------------------------------------------------------------
# FactRegistry
# ---------------------------------------------------------------------------

class FactRegistry:
    """
    Słownik dozwolonych nazw + tablica internowania nazwa → Fact.

    Użycie::

        facts = register("A", "B")
        a = facts.get("A")
        assert facts("A") is a
    """

    def __init__(self, *names: str | Iterable[str]) -> None:
        self._names: list[str]       = []
        self._facts: dict[str, Fact] = {}
        self.register(*names)

    def register(self, *names: str | Iterable[str]) -> FactRegistry:
        """Dodaje nazwy do słownika; powtórzenia są ignorowane."""
        for name in flatten(names):
            if not isinstance(name, str):
                raise FactTypeError(
                    ErrorCode.NOT_A_STRING,
                    f"Nazwy faktów muszą być typu str, nie {type(name).__name__}: {name!r}",
                )
            if name not in self._names:
                self._names.append(name)
        return self

    def get(self, name: str) -> Fact:
        """Zwraca internowany fakt; UnknownFactError dla nazwy spoza słownika."""
        if not isinstance(name, str) or name not in self._names:
            raise UnknownFactError(str(name))
        fact = self._facts.get(name)
        if fact is None:
            fact = self._facts[name] = Fact(name, self)
        return fact

    def __call__(self, name: str) -> Fact:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)


def register(*names: str | Iterable[str]) -> FactRegistry:
    """Wrapper: nowy rejestr faktów z podanym słownikiem."""
    return FactRegistry(*names)
