"""
Konfiguracja sterownika konsolowego — zmienne środowiskowe.

Zmienne środowiskowe:
  PM_SPEED          przerwa między krokami w sekundach (domyślnie 0)
  PM_NUMBER_RULES   numeracja reguł: 1/0 (domyślnie 1)
  PM_NUMBER_FACTS   numeracja faktów w pamięci: 1/0 (domyślnie 0)

Opcjonalnie plik .env w katalogu głównym projektu.
"""

from __future__ import annotations

import os
import pathlib

from dotenv import load_dotenv

from pm.driver import DriverOptions

_ENV_FILE = pathlib.Path(__file__).resolve().parent.parent / ".env"

_TRUE  = {"1", "true", "yes", "tak", "on"}
_FALSE = {"0", "false", "no", "nie", "off"}


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Nieprawidłowa wartość {name}={raw!r} (oczekiwano 1/0).")


def _speed(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Nieprawidłowa wartość {name}={raw!r} (oczekiwano liczby sekund).") from None
    if value < 0:
        raise ValueError(f"{name} nie może być ujemne: {raw!r}")
    return value


def load_options(env_file: pathlib.Path | None = None) -> DriverOptions:
    """
    Buduje DriverOptions ze zmiennych środowiskowych.

    Najpierw wczytuje env_file (domyślnie .env w katalogu głównym projektu);
    zmienne już ustawione w środowisku mają pierwszeństwo.
    """
    env_file = env_file or _ENV_FILE
    if env_file.exists():
        load_dotenv(env_file, override=False)
    return DriverOptions(
        speed        = _speed("PM_SPEED", 0.0),
        number_rules = _flag("PM_NUMBER_RULES", True),
        number_facts = _flag("PM_NUMBER_FACTS", False),
    )
