from dataclasses import dataclass


@dataclass(frozen=True)
class CreateUserCommand:
    name: str
    email: str
    age: int


@dataclass(frozen=True)
class UpdateUserCommand:
    name: str | None = None
    email: str | None = None
    age: int | None = None
    is_active: bool | None = None
