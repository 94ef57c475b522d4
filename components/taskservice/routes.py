from __future__ import annotations
from typing import Callable, List, TypeVar
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from components.authservice.deps import authenticate
from .adapters_inmemory import InMemoryTaskStore
from .contracts import (
    Authorized, Decision, Task, TaskList,
    CreateListRequest, UpdateListRequest, CreateTaskRequest, UpdateTaskRequest,
)
from .service import TaskService

log = logging.getLogger("taskservice.routes")

T = TypeVar("T")


def _default_service() -> TaskService:
    return TaskService(InMemoryTaskStore())


def _unwrap(decision: Decision[T]) -> T:
    if isinstance(decision, Authorized):
        return decision.resource
    raise HTTPException(status_code=404, detail=decision.reason)


def get_router(service_factory: Callable[[], TaskService] = _default_service) -> APIRouter:
    r = APIRouter(prefix="/lists", tags=["lists"])
    service = service_factory()

    @r.get("", response_model=List[TaskList])
    def list_lists(user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return svc.list_lists(user_id)

    @r.post("", response_model=TaskList, status_code=status.HTTP_201_CREATED)
    def create_list(payload: CreateListRequest, user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return svc.create_list(user_id, payload)

    @r.patch("/{list_id}", response_model=TaskList)
    def update_list(list_id: str, payload: UpdateListRequest, user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return _unwrap(svc.update_list(user_id, list_id, payload))

    @r.delete("/{list_id}", response_model=TaskList)
    def delete_list(list_id: str, user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return _unwrap(svc.delete_list(user_id, list_id))

    @r.get("/{list_id}/tasks", response_model=List[Task])
    def list_tasks(list_id: str, user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return _unwrap(svc.list_tasks(user_id, list_id))

    @r.post("/{list_id}/tasks", response_model=Task, status_code=status.HTTP_201_CREATED)
    def create_task(list_id: str, payload: CreateTaskRequest, user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return _unwrap(svc.create_task(user_id, list_id, payload))

    @r.patch("/{list_id}/tasks/{task_id}", response_model=Task)
    def update_task(list_id: str, task_id: str, payload: UpdateTaskRequest, user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return _unwrap(svc.update_task(user_id, list_id, task_id, payload))

    @r.delete("/{list_id}/tasks/{task_id}", response_model=Task)
    def delete_task(list_id: str, task_id: str, user_id: str = Depends(authenticate), svc: TaskService = Depends(lambda: service)):
        return _unwrap(svc.delete_task(user_id, list_id, task_id))

    return r
