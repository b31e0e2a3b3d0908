"""User domain model."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class User:
    """User entity."""

    user_id: str
    name: str
    email: str
    age: int
    created_at: datetime
    is_active: bool = True


@dataclass(frozen=True)
class NewUser:
    """Validated fields for a user that storage has not assigned an id to yet."""

    name: str
    email: str
    age: int


@dataclass(frozen=True)
class UserChanges:
    """Partial update. ``None`` means the field was not supplied."""

    name: str | None = None
    email: str | None = None
    age: int | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class UserStats:
    total: int
    active: int
    average_age: float


def merge_user(user: User, changes: UserChanges) -> User:
    """Return ``user`` with every supplied field of ``changes`` applied."""
    name = user.name
    email = user.email
    age = user.age
    is_active = user.is_active
    if changes.name is not None:
        name = changes.name
    if changes.email is not None:
        email = changes.email
    if changes.age is not None:
        age = changes.age
    if changes.is_active is not None:
        is_active = changes.is_active
    return replace(user, name=name, email=email, age=age, is_active=is_active)
