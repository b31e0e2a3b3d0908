from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from services.users.application.dto import CreateUserCommand, UpdateUserCommand
from services.users.application.user_service import UserService
from services.users.domain.errors import USER_NOT_FOUND, UserError, UserNotFoundError
from services.users.domain.user import User, UserStats


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    age: int
    createdAt: str
    isActive: bool

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.user_id,
            name=user.name,
            email=user.email,
            age=user.age,
            createdAt=user.created_at.isoformat().replace("+00:00", "Z"),
            isActive=user.is_active,
        )


class UserStatsResponse(BaseModel):
    total: int
    active: int
    averageAge: float

    @classmethod
    def from_domain(cls, stats: UserStats) -> "UserStatsResponse":
        return cls(
            total=stats.total,
            active=stats.active,
            averageAge=stats.average_age,
        )


class CreateUserRequest(BaseModel):
    name: str
    email: str
    age: int


class UpdateUserRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    age: int | None = None
    isActive: bool | None = None


def success_response(
    data: Any, message: str, status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": data, "message": message},
    )


def error_response(error: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


def _user_error_status(exc: UserError) -> int:
    if isinstance(exc, UserNotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


def create_router(user_service: UserService) -> APIRouter:
    router = APIRouter()
    users_router = APIRouter(prefix="/users", tags=["users"])

    @router.get("/health")
    def health():
        return {
            "success": True,
            "message": "API funcionando correctamente",
            "timestamp": _utc_timestamp(),
        }

    @users_router.post("", status_code=201)
    def create_user_endpoint(payload: CreateUserRequest):
        command = CreateUserCommand(
            name=payload.name, email=payload.email, age=payload.age
        )
        try:
            user = user_service.create_user(command)
        except UserError as exc:
            return error_response(
                str(exc), "Error al crear usuario", _user_error_status(exc)
            )
        return success_response(
            UserResponse.from_domain(user).model_dump(),
            "Usuario creado exitosamente",
            status.HTTP_201_CREATED,
        )

    # registered before /{user_id} so "stats" is not taken for an id
    @users_router.get("/stats")
    def user_stats_endpoint():
        stats = user_service.get_user_stats()
        return success_response(
            UserStatsResponse.from_domain(stats).model_dump(),
            "Estadísticas obtenidas exitosamente",
        )

    @users_router.get("")
    def active_users_endpoint():
        users = user_service.get_active_users()
        return success_response(
            [UserResponse.from_domain(user).model_dump() for user in users],
            "Usuarios activos obtenidos exitosamente",
        )

    @users_router.get("/{user_id}")
    def get_user_endpoint(user_id: str):
        try:
            user = user_service.get_user_by_id(user_id)
        except UserError as exc:
            return error_response(
                str(exc), "Error al obtener usuario", _user_error_status(exc)
            )
        if user is None:
            return error_response(
                USER_NOT_FOUND,
                "No se encontró el usuario solicitado",
                status.HTTP_404_NOT_FOUND,
            )
        return success_response(
            UserResponse.from_domain(user).model_dump(),
            "Usuario obtenido exitosamente",
        )

    @users_router.put("/{user_id}")
    def update_user_endpoint(user_id: str, payload: UpdateUserRequest):
        command = UpdateUserCommand(
            name=payload.name,
            email=payload.email,
            age=payload.age,
            is_active=payload.isActive,
        )
        try:
            user = user_service.update_user(user_id, command)
        except UserError as exc:
            return error_response(
                str(exc), "Error al actualizar usuario", _user_error_status(exc)
            )
        if user is None:
            return error_response(
                USER_NOT_FOUND,
                "No se encontró el usuario para actualizar",
                status.HTTP_404_NOT_FOUND,
            )
        return success_response(
            UserResponse.from_domain(user).model_dump(),
            "Usuario actualizado exitosamente",
        )

    @users_router.delete("/{user_id}")
    def delete_user_endpoint(user_id: str):
        try:
            user_service.delete_user(user_id)
        except UserError as exc:
            return error_response(
                str(exc), "Error al eliminar usuario", _user_error_status(exc)
            )
        return success_response({"id": user_id}, "Usuario eliminado exitosamente")

    router.include_router(users_router)

    return router


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
