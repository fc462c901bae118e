"""
Task service.

Tasks are created, changed and removed only by their owner. Names are
unique per owner.
"""
from typing import List, Optional

from taskhub.auth.repository import UserRepository
from taskhub.base_microservice import ApiModel, BaseMicroservice
from taskhub.errors import AppError, ErrorKind
from taskhub.tasks.models import Task
from taskhub.tasks.repository import TaskRepository
from taskhub.validation import validate_task_payload


class TaskCreate(ApiModel):
    name: str = ""
    description: str = ""


class TaskUpdate(ApiModel):
    name: str = ""
    description: str = ""


class TaskOut(ApiModel):
    task_id: int
    name: str
    description: str
    user_id: int


class TaskService(BaseMicroservice):

    def __init__(self, task_repository: TaskRepository, user_repository: UserRepository):
        super().__init__("tasks")
        self.task_repository = task_repository
        self.user_repository = user_repository

    @staticmethod
    def to_out(task: Task) -> TaskOut:
        return TaskOut(
            task_id=task.task_id,
            name=task.name,
            description=task.description,
            user_id=task.user_id,
        )

    async def create_task(self, user_id: int, task_data: Optional[TaskCreate]) -> TaskOut:
        validate_task_payload(task_data)
        await self._ensure_user(user_id)
        await self._ensure_unique_name(user_id, task_data.name)

        task = await self.task_repository.create(user_id, task_data.name, task_data.description)
        self.log_event("task.created", {"user_id": user_id, "task_id": task.task_id})
        return self.to_out(task)

    async def get_task(self, user_id: int, task_id: int) -> TaskOut:
        await self._ensure_user(user_id)
        task = await self.task_repository.find_by_user_and_id(user_id, task_id)
        if task is None:
            raise AppError(ErrorKind.TASK_NOT_FOUND, f"Task {task_id} not found")
        return self.to_out(task)

    async def list_tasks(self, user_id: int) -> List[TaskOut]:
        await self._ensure_user(user_id)
        tasks = await self.task_repository.find_all_by_user(user_id)
        return [self.to_out(task) for task in tasks]

    async def update_task(self, user_id: int, task_id: int, task_data: Optional[TaskUpdate]) -> TaskOut:
        """Rename and/or re-describe a task. A new name must stay unique for the owner."""
        validate_task_payload(task_data)
        task = await self._task_for_user(user_id, task_id)

        if task_data.name != task.name:
            await self._ensure_unique_name(user_id, task_data.name)

        task.name = task_data.name
        task.description = task_data.description
        updated = await self.task_repository.update(task)
        self.log_event("task.updated", {"user_id": user_id, "task_id": task_id})
        return self.to_out(updated)

    async def delete_task(self, user_id: int, task_id: int) -> None:
        task = await self._task_for_user(user_id, task_id)
        await self.task_repository.delete(task)
        self.log_event("task.deleted", {"user_id": user_id, "task_id": task_id})

    async def _ensure_user(self, user_id: int) -> None:
        if await self.user_repository.get_by_id(user_id) is None:
            raise AppError(ErrorKind.USER_NOT_FOUND, f"User {user_id} not found")

    async def _ensure_unique_name(self, user_id: int, name: str) -> None:
        # Absence is the expected outcome here, not an error
        if await self.task_repository.find_by_user_and_name(user_id, name) is not None:
            raise AppError(ErrorKind.TASK_ALREADY_EXISTS, f"Task already exists for user: {name}")

    async def _task_for_user(self, user_id: int, task_id: int) -> Task:
        task = await self.task_repository.find_by_id(task_id)
        if task is None:
            raise AppError(ErrorKind.TASK_NOT_FOUND, f"Task {task_id} not found")
        if task.user_id != user_id:
            raise AppError(ErrorKind.ACCESS_DENIED, "Task does not belong to the user")
        return task
