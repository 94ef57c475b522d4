from .contracts import Authorized, Forbidden, Task, TaskList
from .service import TaskService
from .adapters_inmemory import InMemoryTaskStore
from .routes import get_router

__all__ = [
    "Authorized",
    "Forbidden",
    "Task",
    "TaskList",
    "TaskService",
    "InMemoryTaskStore",
    "get_router",
]
