from __future__ import annotations

import re

from services.users.domain.errors import (
    INVALID_AGE,
    INVALID_EMAIL,
    INVALID_NAME,
    USER_ID_REQUIRED,
    UserValidationError,
)

# ECMAScript \s: ASCII whitespace, NBSP, BOM and the Unicode space separators
_WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)

# local@domain.tld with no whitespace; deliberately not RFC 5322
_EMAIL_PATTERN = re.compile(
    f"[^{_WHITESPACE}@]+@[^{_WHITESPACE}@]+\\.[^{_WHITESPACE}@]+"
)

MIN_AGE = 0
MAX_AGE = 120
MIN_NAME_LENGTH = 2


def is_valid_email(email: str) -> bool:
    if not isinstance(email, str):
        return False
    return _EMAIL_PATTERN.fullmatch(email) is not None


def validate_email(email: str) -> None:
    if not is_valid_email(email):
        raise UserValidationError(INVALID_EMAIL)


def validate_age(age: int) -> None:
    if isinstance(age, bool) or not isinstance(age, int):
        raise UserValidationError(INVALID_AGE)
    if age < MIN_AGE or age > MAX_AGE:
        raise UserValidationError(INVALID_AGE)


def validate_name(name: str) -> None:
    if not isinstance(name, str) or len(name.strip()) < MIN_NAME_LENGTH:
        raise UserValidationError(INVALID_NAME)


def require_user_id(user_id: str) -> str:
    if not user_id or not str(user_id).strip():
        raise UserValidationError(USER_ID_REQUIRED)
    return user_id
