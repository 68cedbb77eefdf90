"""
production_model/loader.py — wczytywanie modelu produkcyjnego z JSON.

Publiczne API:
  load_model(path, effect)        -> Model
  load_model_dict(raw, effect)    -> Model

Oczekiwany format::

    {
        "name":       "koncert",
        "vocabulary": ["iść na koncert", "kupić bilety"],
        "inputs":     ["iść na koncert"],
        "repeat":     {"kupić bilety": 2},
        "rules": [
            {"id": "R1", "if": ["iść na koncert"], "then": ["kupić bilety"]}
        ]
    }

"vocabulary" jest opcjonalne — domyślnie każda nazwa użyta w inputs/rules.
"repeat" mnoży wywołania efektu faktu; efekt podaje wywołujący (argument
effect), bo plik JSON opisuje tylko strukturę modelu.
"""

from __future__ import annotations

import json
import pathlib
from dataclasses import dataclass
from typing import Any

from .engine import Solver
from .errors import ModelFormatError
from .facts import Effect, Fact, FactRegistry
from .rules import Rule


@dataclass(slots=True)
class Model:
    """Wczytany model: rejestr faktów, fakty wejściowe i reguły w kolejności z pliku."""
    name:     str
    registry: FactRegistry
    inputs:   list[Fact]
    rules:    list[Rule]

    def solver(self) -> Solver:
        return Solver(self.inputs, self.rules)


# ---------------------------------------------------------------------------
# Walidacja struktury
# ---------------------------------------------------------------------------

def _names(raw: Any, path: str) -> list[str]:
    if not isinstance(raw, list):
        raise ModelFormatError(path, f"oczekiwano listy nazw, jest {type(raw).__name__}")
    for i, name in enumerate(raw):
        if not isinstance(name, str):
            raise ModelFormatError(f"{path}/{i}", f"nazwa faktu musi być stringiem, jest {name!r}")
    return raw


def _rule_specs(raw: Any) -> list[tuple[str | None, list[str], list[str]]]:
    if not isinstance(raw, list):
        raise ModelFormatError("/rules", "oczekiwano listy reguł")

    specs: list[tuple[str | None, list[str], list[str]]] = []
    for i, item in enumerate(raw):
        path = f"/rules/{i}"
        if not isinstance(item, dict):
            raise ModelFormatError(path, "reguła musi być obiektem")
        rule_id = item.get("id")
        if rule_id is not None and not isinstance(rule_id, str):
            raise ModelFormatError(f"{path}/id", "id reguły musi być stringiem")
        if "then" not in item:
            raise ModelFormatError(path, "brak pola 'then' (konkluzje)")
        conditions  = _names(item.get("if", []), f"{path}/if")
        conclusions = _names(item["then"], f"{path}/then")
        specs.append((rule_id, conditions, conclusions))
    return specs


# ---------------------------------------------------------------------------
# Budowa modelu
# ---------------------------------------------------------------------------

def load_model_dict(raw: Any, effect: Effect | None = None) -> Model:
    """
    Buduje model ze słownika (zdekodowany JSON).

    Args:
        raw:    zdekodowany JSON modelu
        effect: efekt uboczny podpinany do każdego faktu słownika
                (wykonywany "repeat" razy przy odpaleniu konkluzji)

    Raises:
        ModelFormatError: zła struktura (path wskazuje miejsce)
        UnknownFactError: nazwa spoza jawnie podanego "vocabulary"
    """
    if not isinstance(raw, dict):
        raise ModelFormatError("/", "model musi być obiektem JSON")

    name   = str(raw.get("name", ""))
    inputs = _names(raw.get("inputs", []), "/inputs")
    specs  = _rule_specs(raw.get("rules", []))

    registry = FactRegistry()
    if "vocabulary" in raw:
        registry.register(_names(raw["vocabulary"], "/vocabulary"))
    else:
        registry.register(inputs)
        for _, conditions, conclusions in specs:
            registry.register(conditions, conclusions)

    # efekt i liczba powtórzeń muszą być ustawione przed budową reguł
    if effect is not None:
        for fact_name in registry.names:
            registry.get(fact_name).with_effect(effect)

    repeat = raw.get("repeat", {})
    if not isinstance(repeat, dict):
        raise ModelFormatError("/repeat", "oczekiwano obiektu nazwa -> liczba")
    for fact_name, count in repeat.items():
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ModelFormatError(f"/repeat/{fact_name}", f"liczba powtórzeń musi być >= 1, jest {count!r}")
        registry.get(fact_name).with_repeat(count)

    rules = [
        Rule(*[registry.get(n) for n in conclusions], rule_id=rule_id)
        .when(*[registry.get(n) for n in conditions])
        for rule_id, conditions, conclusions in specs
    ]

    return Model(
        name=name,
        registry=registry,
        inputs=[registry.get(n) for n in inputs],
        rules=rules,
    )


def load_model(path: pathlib.Path, effect: Effect | None = None) -> Model:
    """Wczytuje model z pliku JSON (UTF-8)."""
    try:
        raw = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ModelFormatError("/", f"niepoprawny JSON: {e}") from e
    model = load_model_dict(raw, effect)
    if not model.name:
        model.name = pathlib.Path(path).stem
    return model
