"""User domain service."""

from __future__ import annotations

import logging
import threading

from services.users.application.dto import CreateUserCommand, UpdateUserCommand
from services.users.application.user_interfaces import UserRepository
from services.users.domain.errors import EmailInUseError, UserNotFoundError
from services.users.domain.stats import compute_user_stats
from services.users.domain.user import NewUser, User, UserChanges, UserStats
from services.users.domain.validation import (
    require_user_id,
    validate_age,
    validate_email,
    validate_name,
)

logger = logging.getLogger(__name__)


class UserService:
    """Enforces the user business rules in front of a ``UserRepository``.

    Mutations go through a single lock so that the email uniqueness check and
    the write that follows it cannot interleave with another mutation.
    """

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository
        self._write_lock = threading.Lock()

    def create_user(self, command: CreateUserCommand) -> User:
        """
        Validate and store a new user.

        Args:
            command: name, email and age of the new user

        Returns:
            The persisted user, active and with an assigned id

        Raises:
            UserValidationError: If email, age or name is invalid, checked in
                that order
            EmailInUseError: If another user already holds the email
        """
        validate_email(command.email)
        validate_age(command.age)
        validate_name(command.name)

        with self._write_lock:
            if self._repository.find_by_email(command.email) is not None:
                raise EmailInUseError()
            user = self._repository.create(
                NewUser(name=command.name, email=command.email, age=command.age)
            )

        logger.info("Created user %s", user.user_id)
        return user

    def get_user_by_id(self, user_id: str) -> User | None:
        require_user_id(user_id)
        return self._repository.find_by_id(user_id)

    def update_user(self, user_id: str, command: UpdateUserCommand) -> User | None:
        """
        Apply a partial update. Only supplied fields are validated and changed.

        Returns:
            The merged user, or None if no user exists at ``user_id``

        Raises:
            UserValidationError: If the id is blank or a supplied field is invalid
            EmailInUseError: If the new email belongs to a different user
        """
        require_user_id(user_id)
        if command.email is not None:
            validate_email(command.email)
        if command.age is not None:
            validate_age(command.age)
        if command.name is not None:
            validate_name(command.name)

        changes = UserChanges(
            name=command.name,
            email=command.email,
            age=command.age,
            is_active=command.is_active,
        )

        with self._write_lock:
            if changes.email is not None:
                holder = self._repository.find_by_email(changes.email)
                if holder is not None and holder.user_id != user_id:
                    raise EmailInUseError()
            user = self._repository.update(user_id, changes)

        if user is not None:
            logger.info("Updated user %s", user.user_id)
        return user

    def delete_user(self, user_id: str) -> bool:
        """
        Remove a user.

        Unlike lookups, a missing user is a failure here.

        Raises:
            UserValidationError: If the id is blank
            UserNotFoundError: If no user exists at ``user_id``
        """
        require_user_id(user_id)
        with self._write_lock:
            if self._repository.find_by_id(user_id) is None:
                raise UserNotFoundError()
            deleted = self._repository.delete(user_id)

        logger.info("Deleted user %s", user_id)
        return deleted

    def get_active_users(self) -> list[User]:
        return [user for user in self._repository.find_all() if user.is_active]

    def get_user_stats(self) -> UserStats:
        return compute_user_stats(self._repository.find_all())
