"""Interfaces for user repositories."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from services.users.domain.user import NewUser, User, UserChanges


class UserRepository(Protocol):
    """Repository for user persistence."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> User | None:
        """Get user by ID."""
        ...

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Get user by email."""
        ...

    @abstractmethod
    def create(self, new_user: NewUser) -> User:
        """Store a new user, assigning its id, creation time and active flag."""
        ...

    @abstractmethod
    def update(self, user_id: str, changes: UserChanges) -> User | None:
        """Apply supplied fields to a stored user, or return None if absent."""
        ...

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Remove a user. True if a record existed."""
        ...

    @abstractmethod
    def find_all(self) -> list[User]:
        """List every stored user."""
        ...
