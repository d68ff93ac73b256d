"""
===============================================================================
TARJETA CRC - application/usecases/auth/validation.py
===============================================================================

Módulo:
    Validación de campos de registro / login (tabla de reglas)

Responsabilidades:
    - Normalizar input (trim; email en minúsculas).
    - Evaluar TODAS las reglas y devolver un mapa campo -> motivo.
    - Garantizar un único motivo por campo (la primera regla que falla).

Colaboradores:
    - register_user.py / login_user.py: lanzan ValidationError con el mapa.

Notas:
    - Reglas declarativas `(campo, predicado, mensaje)` evaluadas en orden;
      sin frameworks de validación por reflexión.
===============================================================================
"""

from __future__ import annotations

import re
from typing import Callable, Final, Mapping, Sequence

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

Rule = tuple[str, Callable[[str], bool], str]


def _present(value: str) -> bool:
    return bool(value)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


REGISTER_RULES: Final[Sequence[Rule]] = (
    ("document", _present, "El documento es requerido."),
    ("password", _present, "La contraseña es requerida."),
    ("fullname", _present, "El nombre completo es requerido."),
    ("email", _present, "El email es requerido."),
    ("email", is_valid_email, "El email no es válido."),
)

LOGIN_RULES: Final[Sequence[Rule]] = (
    ("document", _present, "El documento es requerido."),
    ("password", _present, "La contraseña es requerida."),
)


def normalize_document(value: str | None) -> str:
    return (value or "").strip()


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_fullname(value: str | None) -> str:
    return " ".join((value or "").split())


def evaluate_rules(
    values: Mapping[str, str], rules: Sequence[Rule]
) -> dict[str, str]:
    """Evalúa las reglas en orden; un motivo por campo."""
    errors: dict[str, str] = {}
    for field, predicate, message in rules:
        if field in errors:
            continue
        if not predicate(values.get(field, "")):
            errors[field] = message
    return errors


def validate_registration_fields(
    *, document: str, password: str, fullname: str, email: str
) -> dict[str, str]:
    """Valores ya normalizados; password sin tocar."""
    return evaluate_rules(
        {
            "document": document,
            "password": password,
            "fullname": fullname,
            "email": email,
        },
        REGISTER_RULES,
    )


def validate_login_fields(*, document: str, password: str) -> dict[str, str]:
    return evaluate_rules({"document": document, "password": password}, LOGIN_RULES)
