"""In-memory repository adapters for local runs and tests."""

from app.models.task import Task
from app.models.user import User
from app.repositories.base import TaskRepository, UserRepository


class InMemoryTaskRepository(TaskRepository):
    """Task store backed by a dict.

    Stores copies so callers cannot mutate persisted state without
    going through ``save``/``update``.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def save(self, task: Task) -> Task:
        self._tasks[task.id] = task.model_copy()
        return task

    def find_by_id(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        return task.model_copy() if task is not None else None

    def find_all(self) -> list[Task]:
        return [task.model_copy() for task in self._tasks.values()]

    def update(self, task: Task) -> Task:
        self._tasks[task.id] = task.model_copy()
        return task

    def delete(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None


class InMemoryUserRepository(UserRepository):
    """User store backed by a dict."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def save_user(self, user: User) -> User:
        self._users[user.user_id] = user.model_copy()
        return user

    def get_user_by_id(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy() if user is not None else None
