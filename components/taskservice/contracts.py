from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, List, Optional, Protocol, TypeVar, Union
from pydantic import BaseModel, Field, field_validator


class TaskList(BaseModel):
    id: str
    title: str
    user_id: str


class Task(BaseModel):
    id: str
    list_id: str
    title: str
    completed: bool = False


def _clean_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("title must not be blank")
    return v


class CreateListRequest(BaseModel):
    title: str = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v)


class UpdateListRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v)


class CreateTaskRequest(CreateListRequest):
    pass


class UpdateTaskRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v)


# ---------- Authorize-then-act results ----------
R = TypeVar("R")


@dataclass(frozen=True)
class Authorized(Generic[R]):
    resource: R


@dataclass(frozen=True)
class Forbidden:
    reason: str


Decision = Union[Authorized[R], Forbidden]


# ---------- Ports ----------
class TaskStorePort(Protocol):
    def add_list(self, item: TaskList) -> None: ...
    def get_list(self, list_id: str) -> Optional[TaskList]: ...
    def lists_for_user(self, user_id: str) -> List[TaskList]: ...
    def save_list(self, item: TaskList) -> None: ...
    def remove_list(self, list_id: str) -> Optional[TaskList]: ...
    def add_task(self, task: Task) -> None: ...
    def get_task(self, list_id: str, task_id: str) -> Optional[Task]: ...
    def tasks_for_list(self, list_id: str) -> List[Task]: ...
    def save_task(self, task: Task) -> None: ...
    def remove_task(self, list_id: str, task_id: str) -> Optional[Task]: ...
    def remove_tasks_for_list(self, list_id: str) -> int: ...
