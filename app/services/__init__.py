"""Application services.

Services:
- tasks.py: Task lifecycle with best-effort event emission
- users.py: Confirmed user registration and preferences
"""

from app.services.tasks import TaskService
from app.services.users import UserAlreadyExistsError, UserNotFoundError, UserService

__all__ = [
    "TaskService",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserService",
]
