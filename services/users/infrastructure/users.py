"""User repository implementation using SQLAlchemy."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.exc import IntegrityError

from services.users.application.user_interfaces import UserRepository
from services.users.domain.errors import EmailInUseError
from services.users.domain.user import NewUser, User, UserChanges
from services.users.infrastructure.db import Base

logger = logging.getLogger(__name__)


class UserRecord(Base):
    __tablename__ = "users"
    # keep SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    age = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


def _to_domain(record: UserRecord) -> User:
    created_at = record.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return User(
        user_id=str(record.id),
        name=record.name,
        email=record.email,
        age=record.age,
        created_at=created_at,
        is_active=record.is_active,
    )


_MAX_RECORD_KEY = 2**63 - 1


def _record_key(user_id: str) -> int | None:
    """Integer key for a canonical id such as "12"; None for anything else."""
    if not isinstance(user_id, str) or not (user_id.isascii() and user_id.isdigit()):
        return None
    key = int(user_id)
    if str(key) != user_id or key > _MAX_RECORD_KEY:
        return None
    return key


class SqlUserRepository(UserRepository):
    """SQL implementation of UserRepository."""

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    def find_by_id(self, user_id: str) -> User | None:
        key = _record_key(user_id)
        if key is None:
            return None
        with self._session_factory() as db:
            record = db.get(UserRecord, key)
            if record is None:
                return None
            return _to_domain(record)

    def find_by_email(self, email: str) -> User | None:
        with self._session_factory() as db:
            record = (
                db.query(UserRecord).filter(UserRecord.email == email).one_or_none()
            )
            if record is None:
                return None
            return _to_domain(record)

    def create(self, new_user: NewUser) -> User:
        record = UserRecord(
            name=new_user.name,
            email=new_user.email,
            age=new_user.age,
            created_at=datetime.now(timezone.utc),
            is_active=True,
        )
        with self._session_factory() as db:
            db.add(record)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise EmailInUseError() from exc
            db.refresh(record)
            logger.debug("Inserted user row %s", record.id)
            return _to_domain(record)

    def update(self, user_id: str, changes: UserChanges) -> User | None:
        key = _record_key(user_id)
        if key is None:
            return None
        with self._session_factory() as db:
            record = db.get(UserRecord, key)
            if record is None:
                return None
            if changes.name is not None:
                record.name = changes.name
            if changes.email is not None:
                record.email = changes.email
            if changes.age is not None:
                record.age = changes.age
            if changes.is_active is not None:
                record.is_active = changes.is_active
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise EmailInUseError() from exc
            db.refresh(record)
            return _to_domain(record)

    def delete(self, user_id: str) -> bool:
        key = _record_key(user_id)
        if key is None:
            return False
        with self._session_factory() as db:
            record = db.get(UserRecord, key)
            if record is None:
                return False
            db.delete(record)
            db.commit()
            return True

    def find_all(self) -> list[User]:
        with self._session_factory() as db:
            records = db.query(UserRecord).order_by(UserRecord.id).all()
            return [_to_domain(record) for record in records]
