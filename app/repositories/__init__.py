"""Repository ports and their adapters.

Adapters:
- memory.py: dict-backed stores for local runs and tests
- sql.py: SQLModel store (PostgreSQL in production, SQLite locally)
- dynamodb.py: DynamoDB tables via boto3
"""

from app.repositories.base import TaskRepository, UserRepository
from app.repositories.memory import InMemoryTaskRepository, InMemoryUserRepository

__all__ = [
    "TaskRepository",
    "UserRepository",
    "InMemoryTaskRepository",
    "InMemoryUserRepository",
]
