from __future__ import annotations
import threading
from typing import Dict, List, Optional

from .contracts import Task, TaskList, TaskStorePort


class InMemoryTaskStore(TaskStorePort):
    def __init__(self) -> None:
        self._lists: Dict[str, TaskList] = {}
        # list_id -> task_id -> Task
        self._tasks: Dict[str, Dict[str, Task]] = {}
        self._lock = threading.RLock()

    def add_list(self, item: TaskList) -> None:
        with self._lock:
            self._lists[item.id] = item.model_copy()
            self._tasks.setdefault(item.id, {})

    def get_list(self, list_id: str) -> Optional[TaskList]:
        with self._lock:
            item = self._lists.get(list_id)
            return item.model_copy() if item else None

    def lists_for_user(self, user_id: str) -> List[TaskList]:
        with self._lock:
            return [l.model_copy() for l in self._lists.values() if l.user_id == user_id]

    def save_list(self, item: TaskList) -> None:
        with self._lock:
            self._lists[item.id] = item.model_copy()

    def remove_list(self, list_id: str) -> Optional[TaskList]:
        with self._lock:
            return self._lists.pop(list_id, None)

    def add_task(self, task: Task) -> None:
        with self._lock:
            self._tasks.setdefault(task.list_id, {})[task.id] = task.model_copy()

    def get_task(self, list_id: str, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(list_id, {}).get(task_id)
            return task.model_copy() if task else None

    def tasks_for_list(self, list_id: str) -> List[Task]:
        with self._lock:
            return [t.model_copy() for t in self._tasks.get(list_id, {}).values()]

    def save_task(self, task: Task) -> None:
        with self._lock:
            self._tasks.setdefault(task.list_id, {})[task.id] = task.model_copy()

    def remove_task(self, list_id: str, task_id: str) -> Optional[Task]:
        with self._lock:
            return self._tasks.get(list_id, {}).pop(task_id, None)

    def remove_tasks_for_list(self, list_id: str) -> int:
        with self._lock:
            return len(self._tasks.pop(list_id, {}))
