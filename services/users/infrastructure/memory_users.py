"""In-memory user repository.

Default backend for development and tests. Records live in a dict guarded by
a lock, so readers always see a consistent snapshot.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

from services.users.application.user_interfaces import UserRepository
from services.users.domain.user import NewUser, User, UserChanges, merge_user

logger = logging.getLogger(__name__)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def find_by_id(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user
        return None

    def create(self, new_user: NewUser) -> User:
        with self._lock:
            user_id = str(self._next_id)
            self._next_id += 1
            user = User(
                user_id=user_id,
                name=new_user.name,
                email=new_user.email,
                age=new_user.age,
                created_at=datetime.now(timezone.utc),
                is_active=True,
            )
            self._users[user_id] = user
        logger.debug("Stored user %s in memory", user_id)
        return user

    def update(self, user_id: str, changes: UserChanges) -> User | None:
        with self._lock:
            existing = self._users.get(user_id)
            if existing is None:
                return None
            updated = merge_user(existing, changes)
            self._users[user_id] = updated
            return updated

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def find_all(self) -> list[User]:
        with self._lock:
            return list(self._users.values())

    def clear(self) -> None:
        """Drop every record and restart ids at 1."""
        with self._lock:
            self._users.clear()
            self._next_id = 1

    def size(self) -> int:
        with self._lock:
            return len(self._users)
