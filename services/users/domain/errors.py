"""Failures raised by the user domain.

Messages are matched on by callers, so the text of each one is stable.
"""

from __future__ import annotations

INVALID_EMAIL = "Email inválido"
INVALID_AGE = "Edad debe estar entre 0 y 120 años"
INVALID_NAME = "El nombre debe tener al menos 2 caracteres"
EMAIL_IN_USE = "El email ya está en uso"
USER_ID_REQUIRED = "ID de usuario requerido"
USER_NOT_FOUND = "Usuario no encontrado"


class UserError(ValueError):
    """Base class for user domain failures."""


class UserValidationError(UserError):
    """Input rejected before any storage mutation."""


class EmailInUseError(UserError):
    def __init__(self, message: str = EMAIL_IN_USE) -> None:
        super().__init__(message)


class UserNotFoundError(UserError):
    def __init__(self, message: str = USER_NOT_FOUND) -> None:
        super().__init__(message)
