from __future__ import annotations
import logging
import uuid
from typing import List, Optional

from .contracts import (
    Authorized, Forbidden, Decision, Task, TaskList, TaskStorePort,
    CreateListRequest, UpdateListRequest, CreateTaskRequest, UpdateTaskRequest,
)

log = logging.getLogger("taskservice.service")


class TaskService:
    """
    Lists are owned by users, tasks by lists. Every task operation first
    resolves the list for the caller (`authorize_list`) and only then acts.
    """

    def __init__(self, store: TaskStorePort):
        self.store = store

    # ------------------------
    # Lists
    # ------------------------
    def list_lists(self, user_id: str) -> List[TaskList]:
        return self.store.lists_for_user(user_id)

    def create_list(self, user_id: str, req: CreateListRequest) -> TaskList:
        item = TaskList(id=uuid.uuid4().hex, title=req.title, user_id=user_id)
        self.store.add_list(item)
        log.info("list_created list_id=%s user_id=%s", item.id, user_id)
        return item

    def authorize_list(self, user_id: str, list_id: str) -> Decision[TaskList]:
        item = self.store.get_list(list_id)
        if item is None:
            return Forbidden(reason="list not found")
        if item.user_id != user_id:
            # Indistinguishable from a missing list for the caller.
            return Forbidden(reason="list not found")
        return Authorized(item)

    def update_list(self, user_id: str, list_id: str, req: UpdateListRequest) -> Decision[TaskList]:
        decision = self.authorize_list(user_id, list_id)
        if isinstance(decision, Forbidden):
            return decision
        item = decision.resource
        if req.title is not None:
            item.title = req.title
        self.store.save_list(item)
        return Authorized(item)

    def delete_list(self, user_id: str, list_id: str) -> Decision[TaskList]:
        decision = self.authorize_list(user_id, list_id)
        if isinstance(decision, Forbidden):
            return decision
        removed = self.store.remove_list(list_id)
        tasks_removed = self.store.remove_tasks_for_list(list_id)
        log.info("list_deleted list_id=%s tasks_removed=%d", list_id, tasks_removed)
        return Authorized(removed or decision.resource)

    # ------------------------
    # Tasks
    # ------------------------
    def list_tasks(self, user_id: str, list_id: str) -> Decision[List[Task]]:
        decision = self.authorize_list(user_id, list_id)
        if isinstance(decision, Forbidden):
            return decision
        return Authorized(self.store.tasks_for_list(list_id))

    def create_task(self, user_id: str, list_id: str, req: CreateTaskRequest) -> Decision[Task]:
        decision = self.authorize_list(user_id, list_id)
        if isinstance(decision, Forbidden):
            return decision
        task = Task(id=uuid.uuid4().hex, list_id=list_id, title=req.title)
        self.store.add_task(task)
        return Authorized(task)

    def update_task(self, user_id: str, list_id: str, task_id: str, req: UpdateTaskRequest) -> Decision[Task]:
        decision = self.authorize_list(user_id, list_id)
        if isinstance(decision, Forbidden):
            return decision
        task = self.store.get_task(list_id, task_id)
        if task is None:
            return Forbidden(reason="task not found")
        if req.title is not None:
            task.title = req.title
        if req.completed is not None:
            task.completed = req.completed
        self.store.save_task(task)
        return Authorized(task)

    def delete_task(self, user_id: str, list_id: str, task_id: str) -> Decision[Task]:
        decision = self.authorize_list(user_id, list_id)
        if isinstance(decision, Forbidden):
            return decision
        removed: Optional[Task] = self.store.remove_task(list_id, task_id)
        if removed is None:
            return Forbidden(reason="task not found")
        return Authorized(removed)
