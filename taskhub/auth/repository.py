"""
User directory.

UserRepository is the interface the services depend on;
SqlAlchemyUserRepository is the PostgreSQL-backed implementation.
Each call opens its own session and performs a single read or write.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from taskhub.auth.models import User
from taskhub.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)


class UserRepository(ABC):
    """Data access for users. Lookups return None when nothing matches."""

    @abstractmethod
    async def create(self, email: str, password_hash: str) -> User:
        ...

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def update(self, user: User) -> User:
        ...

    @abstractmethod
    async def delete(self, user_id: int) -> None:
        ...


class SqlAlchemyUserRepository(UserRepository):

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def create(self, email: str, password_hash: str) -> User:
        user = User(email=email, password_hash=password_hash)
        async with self._session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as e:
                # Unique index on email is the real guard against concurrent registrations
                await session.rollback()
                logger.warning("Duplicate email on insert")
                raise AppError(ErrorKind.EMAIL_ALREADY_EXISTS) from e
            await session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        async with self._session_factory() as session:
            return await session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def update(self, user: User) -> User:
        async with self._session_factory() as session:
            merged = await session.merge(user)
            await session.commit()
            await session.refresh(merged)
            return merged

    async def delete(self, user_id: int) -> None:
        async with self._session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise AppError(ErrorKind.USER_NOT_FOUND)
            await session.delete(user)
            await session.commit()
