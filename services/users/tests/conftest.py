import pytest

from services.users.application.dto import CreateUserCommand
from services.users.application.user_service import UserService
from services.users.infrastructure.memory_users import InMemoryUserRepository


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def service(repository):
    return UserService(repository=repository)


@pytest.fixture
def juan():
    return CreateUserCommand(name="Juan Pérez", email="juan.perez@example.com", age=25)
