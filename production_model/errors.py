"""
production_model/errors.py — kody błędów i wyjątki modelu produkcyjnego.

Błędy walidacji i wyszukiwania to błędy programisty (źle zbudowane reguły
lub fakty) — zgłaszane natychmiast, nigdy nie są połykane ani ponawiane.
Zakleszczenie solvera NIE jest wyjątkiem: to zwykły stan końcowy (Outcome).
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Stałe kody błędów modelu produkcyjnego."""

    # walidacja typów
    NOT_A_STRING    = "E_NOT_A_STRING"
    NOT_A_FACT      = "E_NOT_A_FACT"
    NOT_A_RULE      = "E_NOT_A_RULE"
    BAD_REPEAT      = "E_BAD_REPEAT"

    # słownik faktów
    UNKNOWN_FACT    = "E_UNKNOWN_FACT"
    FACT_SEALED     = "E_FACT_SEALED"

    # solver
    REENTRANT_STEP  = "E_REENTRANT_STEP"

    # pliki modeli
    MODEL_FORMAT    = "E_MODEL_FORMAT"


class ProductionError(Exception):
    """Bazowy wyjątek: kod błędu + czytelny komunikat."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code    = code
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class FactTypeError(ProductionError, TypeError):
    """Wartość złego typu tam, gdzie wymagany jest fakt, reguła lub nazwa."""


class UnknownFactError(ProductionError, LookupError):
    """Nazwa faktu spoza słownika rejestru."""

    def __init__(self, name: str) -> None:
        super().__init__(
            ErrorCode.UNKNOWN_FACT,
            f"Nie znaleziono \"{name}\" w słowniku faktów. "
            f"Zarejestruj \"{name}\" albo popraw nazwę faktu.",
        )
        self.name = name


class FactSealedError(ProductionError):
    """Próba zmiany konfiguracji faktu, który jest już użyty w regule."""


class ReentrantStepError(ProductionError, RuntimeError):
    """step() wywołany z wnętrza efektu ubocznego odpalanej reguły."""


class ModelFormatError(ProductionError, ValueError):
    """Niepoprawna struktura pliku modelu; path wskazuje miejsce błędu."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(ErrorCode.MODEL_FORMAT, f"{path}: {message}")
        self.path = path
