"""
Service wiring.

Builds every service once from Settings and hands them to the app.
Route handlers reach them through get_container.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from taskhub.auth.jwt import JwtService
from taskhub.auth.middleware import JwtAuthGate
from taskhub.auth.passwords import BCryptPasswordEncoder
from taskhub.auth.repository import SqlAlchemyUserRepository, UserRepository
from taskhub.auth.service import AuthenticationService
from taskhub.auth.users import UserService
from taskhub.base_microservice import create_session_factory
from taskhub.config import Settings
from taskhub.tasks.repository import SqlAlchemyTaskRepository, TaskRepository
from taskhub.tasks.service import TaskService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    jwt_service: JwtService
    password_encoder: BCryptPasswordEncoder
    user_repository: UserRepository
    task_repository: TaskRepository
    auth_service: AuthenticationService
    user_service: UserService
    task_service: TaskService
    auth_gate: JwtAuthGate
    engine: Optional[AsyncEngine] = None

    @classmethod
    def from_repositories(
        cls,
        settings: Settings,
        user_repository: UserRepository,
        task_repository: TaskRepository,
        engine: Optional[AsyncEngine] = None,
        jwt_service: Optional[JwtService] = None,
    ) -> "ServiceContainer":
        """Wire services around the given repositories."""
        jwt_service = jwt_service or JwtService(settings.jwt_secret, settings.jwt_expire_minutes)
        password_encoder = BCryptPasswordEncoder(settings.bcrypt_rounds)
        return cls(
            settings=settings,
            jwt_service=jwt_service,
            password_encoder=password_encoder,
            user_repository=user_repository,
            task_repository=task_repository,
            auth_service=AuthenticationService(user_repository, jwt_service, password_encoder),
            user_service=UserService(user_repository, password_encoder),
            task_service=TaskService(task_repository, user_repository),
            auth_gate=JwtAuthGate(jwt_service, user_repository),
            engine=engine,
        )


def build_container(settings: Settings) -> ServiceContainer:
    """Create the database engine and the PostgreSQL-backed services."""
    engine, session_factory = create_session_factory(settings.database_url)
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return ServiceContainer.from_repositories(
        settings,
        SqlAlchemyUserRepository(session_factory),
        SqlAlchemyTaskRepository(session_factory),
        engine=engine,
    )


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency returning the app's service container."""
    return request.app.state.container
