"""Persistence ports for tasks and users."""

from abc import ABC, abstractmethod

from app.models.task import Task
from app.models.user import User


class TaskRepository(ABC):
    """Port for task persistence.

    Adapters own the stored state; callers only hold transient copies.
    Infrastructure errors propagate to the caller.
    """

    @abstractmethod
    def save(self, task: Task) -> Task:
        pass

    @abstractmethod
    def find_by_id(self, task_id: str) -> Task | None:
        pass

    @abstractmethod
    def find_all(self) -> list[Task]:
        """Return every stored task, in no particular order."""
        pass

    @abstractmethod
    def update(self, task: Task) -> Task:
        pass

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task.

        Returns:
            bool: True if a task was removed, False if none existed
        """
        pass


class UserRepository(ABC):
    """Port for user profile persistence."""

    @abstractmethod
    def save_user(self, user: User) -> User:
        pass

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> User | None:
        pass
