from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from services.users.application.dto import CreateUserCommand, UpdateUserCommand
from services.users.application.user_service import UserService
from services.users.domain.errors import (
    EmailInUseError,
    UserNotFoundError,
    UserValidationError,
)
from services.users.domain.user import NewUser, User, UserChanges


def _stored_user(**overrides) -> User:
    fields = dict(
        user_id="1",
        name="Juan Pérez",
        email="juan@example.com",
        age=25,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        is_active=True,
    )
    fields.update(overrides)
    return User(**fields)


@pytest.fixture
def mock_repository():
    return MagicMock()


def test_create_user_delegates_validated_fields_to_storage(mock_repository):
    mock_repository.find_by_email.return_value = None
    mock_repository.create.return_value = _stored_user()
    service = UserService(repository=mock_repository)

    result = service.create_user(
        CreateUserCommand(name="Juan Pérez", email="juan@example.com", age=25)
    )

    assert result == _stored_user()
    mock_repository.find_by_email.assert_called_once_with("juan@example.com")
    mock_repository.create.assert_called_once_with(
        NewUser(name="Juan Pérez", email="juan@example.com", age=25)
    )


@pytest.mark.parametrize(
    "command, message",
    [
        (
            CreateUserCommand(name="Juan", email="email-invalido", age=25),
            "Email inválido",
        ),
        (
            CreateUserCommand(name="Juan", email="juan@example.com", age=-1),
            "Edad debe estar entre 0 y 120 años",
        ),
        (
            CreateUserCommand(name="Juan", email="juan@example.com", age=121),
            "Edad debe estar entre 0 y 120 años",
        ),
        (
            CreateUserCommand(name="A", email="juan@example.com", age=25),
            "El nombre debe tener al menos 2 caracteres",
        ),
    ],
)
def test_invalid_create_never_touches_storage(mock_repository, command, message):
    service = UserService(repository=mock_repository)

    with pytest.raises(UserValidationError) as exc_info:
        service.create_user(command)

    assert str(exc_info.value) == message
    mock_repository.find_by_email.assert_not_called()
    mock_repository.create.assert_not_called()


def test_create_reports_first_failing_rule_in_order(mock_repository):
    service = UserService(repository=mock_repository)

    with pytest.raises(UserValidationError, match="Email inválido"):
        service.create_user(CreateUserCommand(name="A", email="bad", age=500))
    with pytest.raises(UserValidationError, match="Edad"):
        service.create_user(CreateUserCommand(name="A", email="a@b.co", age=500))


def test_create_rejects_email_already_in_use(mock_repository):
    mock_repository.find_by_email.return_value = _stored_user(name="Usuario Existente")
    service = UserService(repository=mock_repository)

    with pytest.raises(EmailInUseError) as exc_info:
        service.create_user(
            CreateUserCommand(name="Juan Pérez", email="juan@example.com", age=30)
        )

    assert str(exc_info.value) == "El email ya está en uso"
    mock_repository.create.assert_not_called()


def test_create_assigns_id_and_defaults(service, repository, juan):
    user = service.create_user(juan)

    assert user.user_id
    assert user.is_active is True
    assert user.created_at.tzinfo is not None
    assert service.get_user_by_id(user.user_id) == user


def test_duplicate_create_leaves_store_unchanged(service, repository, juan):
    service.create_user(juan)

    with pytest.raises(EmailInUseError, match="El email ya está en uso"):
        service.create_user(
            CreateUserCommand(name="Otro Juan", email=juan.email, age=40)
        )

    assert repository.size() == 1


def test_age_boundaries_are_inclusive(service):
    service.create_user(
        CreateUserCommand(name="Baby User", email="baby@example.com", age=0)
    )
    service.create_user(
        CreateUserCommand(name="Old User", email="old@example.com", age=120)
    )

    with pytest.raises(UserValidationError, match="Edad debe estar entre 0 y 120"):
        service.create_user(
            CreateUserCommand(name="Too Old User", email="tooold@example.com", age=121)
        )


def test_get_user_by_id_returns_none_when_absent(service):
    assert service.get_user_by_id("999") is None


@pytest.mark.parametrize("user_id", ["", "   "])
def test_get_user_by_id_requires_an_id(mock_repository, user_id):
    service = UserService(repository=mock_repository)

    with pytest.raises(UserValidationError, match="ID de usuario requerido"):
        service.get_user_by_id(user_id)

    mock_repository.find_by_id.assert_not_called()


def test_update_changes_only_supplied_fields(service, juan):
    created = service.create_user(juan)

    updated = service.update_user(
        created.user_id, UpdateUserCommand(name="Updated Name", age=31)
    )

    assert updated.name == "Updated Name"
    assert updated.age == 31
    assert updated.email == created.email
    assert updated.is_active is True
    assert updated.created_at == created.created_at
    assert updated.user_id == created.user_id


def test_update_to_own_email_is_not_a_conflict(service, juan):
    created = service.create_user(juan)

    updated = service.update_user(created.user_id, UpdateUserCommand(email=juan.email))

    assert updated.email == juan.email


def test_update_to_another_users_email_conflicts(service, repository, juan):
    first = service.create_user(juan)
    second = service.create_user(
        CreateUserCommand(name="Maria", email="maria@example.com", age=30)
    )

    with pytest.raises(EmailInUseError, match="El email ya está en uso"):
        service.update_user(second.user_id, UpdateUserCommand(email=first.email))

    assert repository.find_by_id(second.user_id).email == "maria@example.com"


def test_update_validates_only_supplied_fields(mock_repository):
    mock_repository.update.return_value = _stored_user(is_active=False)
    service = UserService(repository=mock_repository)

    result = service.update_user("1", UpdateUserCommand(is_active=False))

    assert result.is_active is False
    mock_repository.find_by_email.assert_not_called()
    mock_repository.update.assert_called_once_with("1", UserChanges(is_active=False))


@pytest.mark.parametrize(
    "command, message",
    [
        (UpdateUserCommand(email="no-es-email"), "Email inválido"),
        (UpdateUserCommand(age=200), "Edad debe estar entre 0 y 120 años"),
        (UpdateUserCommand(name=" x "), "El nombre debe tener al menos 2 caracteres"),
    ],
)
def test_invalid_update_never_touches_storage(mock_repository, command, message):
    service = UserService(repository=mock_repository)

    with pytest.raises(UserValidationError) as exc_info:
        service.update_user("1", command)

    assert str(exc_info.value) == message
    mock_repository.update.assert_not_called()


def test_update_requires_an_id(service):
    with pytest.raises(UserValidationError, match="ID de usuario requerido"):
        service.update_user(" ", UpdateUserCommand(name="Valid"))


def test_update_returns_none_for_missing_user(service):
    assert service.update_user("999", UpdateUserCommand(name="Nadie")) is None


def test_delete_then_lookup_returns_none(service, juan):
    created = service.create_user(juan)

    assert service.delete_user(created.user_id) is True
    assert service.get_user_by_id(created.user_id) is None


def test_delete_missing_user_raises(service):
    with pytest.raises(UserNotFoundError) as exc_info:
        service.delete_user("999")
    assert str(exc_info.value) == "Usuario no encontrado"


def test_delete_requires_an_id(mock_repository):
    service = UserService(repository=mock_repository)

    with pytest.raises(UserValidationError, match="ID de usuario requerido"):
        service.delete_user("")

    mock_repository.delete.assert_not_called()


def test_deleted_ids_are_not_reused(service, juan):
    created = service.create_user(juan)
    service.delete_user(created.user_id)

    again = service.create_user(juan)

    assert again.user_id != created.user_id


def test_active_users_excludes_inactive(service):
    active = service.create_user(
        CreateUserCommand(name="Active User 1", email="active1@example.com", age=25)
    )
    inactive = service.create_user(
        CreateUserCommand(name="Active User 2", email="active2@example.com", age=30)
    )
    service.update_user(inactive.user_id, UpdateUserCommand(is_active=False))

    users = service.get_active_users()

    assert [user.user_id for user in users] == [active.user_id]
    assert all(user.is_active for user in users)


def test_stats_on_empty_store(service):
    stats = service.get_user_stats()
    assert (stats.total, stats.active, stats.average_age) == (0, 0, 0)


def test_stats_include_inactive_users(service):
    for index, age in enumerate([20, 30, 40]):
        user = service.create_user(
            CreateUserCommand(
                name=f"User {index}", email=f"u{index}@example.com", age=age
            )
        )
    service.update_user(user.user_id, UpdateUserCommand(is_active=False))

    stats = service.get_user_stats()

    assert stats.total == 3
    assert stats.active == 2
    assert stats.average_age == 30
