"""pm — narzędzie CLI dla modelu produkcyjnego."""
