from __future__ import annotations

import logging

from fastapi import FastAPI

from services.users.api.error_handlers import register_error_handlers
from services.users.api.routes import create_router
from services.users.application.user_interfaces import UserRepository
from services.users.application.user_service import UserService
from services.users.config import UsersConfig, load_config
from services.users.infrastructure.db import create_session_factory
from services.users.infrastructure.memory_users import InMemoryUserRepository
from services.users.infrastructure.users import SqlUserRepository

logger = logging.getLogger(__name__)


def build_repository(cfg: UsersConfig) -> UserRepository:
    if cfg.storage_backend == "sql":
        session_factory = create_session_factory(cfg.database_url)
        return SqlUserRepository(session_factory=session_factory)
    return InMemoryUserRepository()


def build_app(
    config: UsersConfig | None = None,
    repository: UserRepository | None = None,
) -> FastAPI:
    cfg = config or load_config()
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = FastAPI(title=cfg.api_title)

    user_repository = repository if repository is not None else build_repository(cfg)
    user_service = UserService(repository=user_repository)
    logger.info("User service using %s storage", cfg.storage_backend)

    app.include_router(create_router(user_service))
    register_error_handlers(app)

    return app


app = build_app()
