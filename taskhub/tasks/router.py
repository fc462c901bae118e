"""
Task router, mounted under /api/v1/users/{user_id}/tasks.

Every route checks that the token's user owns the path's user id.
"""
from fastapi import APIRouter, Depends, Response, status

from taskhub.auth.middleware import AuthenticatedRoute, AuthenticatedUser, get_current_user
from taskhub.base_microservice import ApiResponse
from taskhub.container import ServiceContainer, get_container
from taskhub.tasks.service import TaskCreate, TaskUpdate
from taskhub.validation import ensure_same_user

router = APIRouter(tags=["tasks"], route_class=AuthenticatedRoute)


@router.post("")
async def create_task(
    user_id: int,
    task_data: TaskCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    task = await container.task_service.create_task(user_id, task_data)
    return ApiResponse(data=task.to_json(), status_code=status.HTTP_201_CREATED)


@router.get("")
async def list_tasks(
    user_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    tasks = await container.task_service.list_tasks(user_id)
    return ApiResponse(data=[task.to_json() for task in tasks])


@router.get("/{task_id}")
async def get_task(
    user_id: int,
    task_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    task = await container.task_service.get_task(user_id, task_id)
    return ApiResponse(data=task.to_json())


@router.put("/{task_id}")
async def update_task(
    user_id: int,
    task_id: int,
    task_data: TaskUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    task = await container.task_service.update_task(user_id, task_id, task_data)
    return ApiResponse(data=task.to_json())


@router.delete("/{task_id}")
async def delete_task(
    user_id: int,
    task_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    ensure_same_user(current_user.user_id, user_id)
    await container.task_service.delete_task(user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
