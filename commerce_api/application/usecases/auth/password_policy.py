"""
Password policy for self-service registration.

Every unmet rule is reported, not just the first one, so clients can show
the full checklist in a single round trip.
"""

from __future__ import annotations

import string
from dataclasses import dataclass

_SPECIAL_CHARACTERS = frozenset(string.punctuation)


@dataclass(frozen=True, slots=True)
class PasswordPolicy:
    min_length: int = 8

    def __post_init__(self) -> None:
        if self.min_length <= 0:
            raise ValueError("min_length debe ser > 0")

    def violations(self, password: str) -> list[str]:
        """Lista de reglas incumplidas (vacía si el password es fuerte)."""
        problems: list[str] = []
        if len(password) < self.min_length:
            problems.append(
                f"Debe tener al menos {self.min_length} caracteres."
            )
        if not any(c.islower() for c in password):
            problems.append("Debe contener al menos una letra minúscula.")
        if not any(c.isupper() for c in password):
            problems.append("Debe contener al menos una letra mayúscula.")
        if not any(c.isdigit() for c in password):
            problems.append("Debe contener al menos un número.")
        if not any(c in _SPECIAL_CHARACTERS for c in password):
            problems.append("Debe contener al menos un carácter especial.")
        return problems

    def is_strong(self, password: str) -> bool:
        return not self.violations(password)
