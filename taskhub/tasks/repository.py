"""
Task store.

TaskRepository is the interface used by TaskService;
SqlAlchemyTaskRepository is the PostgreSQL-backed implementation.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from taskhub.errors import AppError, ErrorKind
from taskhub.tasks.models import Task

logger = logging.getLogger(__name__)


class TaskRepository(ABC):
    """Data access for tasks. Lookups return None when nothing matches."""

    @abstractmethod
    async def find_by_id(self, task_id: int) -> Optional[Task]:
        ...

    @abstractmethod
    async def find_by_user_and_name(self, user_id: int, name: str) -> Optional[Task]:
        ...

    @abstractmethod
    async def find_by_user_and_id(self, user_id: int, task_id: int) -> Optional[Task]:
        ...

    @abstractmethod
    async def find_all_by_user(self, user_id: int) -> List[Task]:
        ...

    @abstractmethod
    async def create(self, user_id: int, name: str, description: str) -> Task:
        ...

    @abstractmethod
    async def update(self, task: Task) -> Task:
        ...

    @abstractmethod
    async def delete(self, task: Task) -> None:
        ...


def _duplicate_name(name: str) -> AppError:
    return AppError(ErrorKind.TASK_ALREADY_EXISTS, f"Task already exists for user: {name}")


class SqlAlchemyTaskRepository(TaskRepository):

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def find_by_id(self, task_id: int) -> Optional[Task]:
        if task_id <= 0:
            return None
        async with self._session_factory() as session:
            return await session.get(Task, task_id)

    async def find_by_user_and_name(self, user_id: int, name: str) -> Optional[Task]:
        if not name or not name.strip():
            return None
        async with self._session_factory() as session:
            result = await session.execute(
                select(Task).where(Task.user_id == user_id, Task.name == name)
            )
            return result.scalar_one_or_none()

    async def find_by_user_and_id(self, user_id: int, task_id: int) -> Optional[Task]:
        if task_id <= 0:
            return None
        async with self._session_factory() as session:
            result = await session.execute(
                select(Task).where(Task.user_id == user_id, Task.task_id == task_id)
            )
            return result.scalar_one_or_none()

    async def find_all_by_user(self, user_id: int) -> List[Task]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Task).where(Task.user_id == user_id).order_by(Task.task_id)
            )
            return list(result.scalars().all())

    async def create(self, user_id: int, name: str, description: str) -> Task:
        task = Task(user_id=user_id, name=name, description=description)
        async with self._session_factory() as session:
            session.add(task)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise _duplicate_name(name) from e
            await session.refresh(task)
        return task

    async def update(self, task: Task) -> Task:
        async with self._session_factory() as session:
            merged = await session.merge(task)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise _duplicate_name(task.name) from e
            await session.refresh(merged)
            return merged

    async def delete(self, task: Task) -> None:
        async with self._session_factory() as session:
            existing = await session.get(Task, task.task_id)
            if existing is None:
                raise AppError(ErrorKind.TASK_NOT_FOUND)
            await session.delete(existing)
            await session.commit()
