"""DynamoDB repository adapters."""

import logging
from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from app.models.task import Task
from app.models.user import User
from app.repositories.base import TaskRepository, UserRepository

logger = logging.getLogger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def to_attribute_map(item: dict[str, Any]) -> dict[str, Any]:
    """Serialize a plain dict into DynamoDB attribute values."""
    return {key: _serializer.serialize(value) for key, value in item.items()}


def from_attribute_map(item: dict[str, Any]) -> dict[str, Any]:
    """Deserialize DynamoDB attribute values into a plain dict."""
    return {key: _deserializer.deserialize(value) for key, value in item.items()}


class _DynamoDBTable:
    """Shared client handling for single-table adapters."""

    def __init__(self, table_name: str, region: str = "us-east-1", client: Any = None) -> None:
        self.table_name = table_name
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        """Lazy-initialize the DynamoDB client."""
        if self._client is None:
            self._client = boto3.client("dynamodb", region_name=self.region)
        return self._client


class DynamoDBTaskRepository(_DynamoDBTable, TaskRepository):
    """Task repository over a DynamoDB table keyed by ``id``."""

    def save(self, task: Task) -> Task:
        self.client.put_item(TableName=self.table_name, Item=to_attribute_map(task.to_item()))
        return task

    def find_by_id(self, task_id: str) -> Task | None:
        response = self.client.get_item(
            TableName=self.table_name,
            Key={"id": {"S": task_id}},
        )
        item = response.get("Item")
        if not item:
            return None
        return Task.from_item(from_attribute_map(item))

    def find_all(self) -> list[Task]:
        tasks: list[Task] = []
        kwargs: dict[str, Any] = {"TableName": self.table_name}

        while True:
            response = self.client.scan(**kwargs)
            tasks.extend(Task.from_item(from_attribute_map(item)) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key

        return tasks

    def update(self, task: Task) -> Task:
        self.client.put_item(TableName=self.table_name, Item=to_attribute_map(task.to_item()))
        return task

    def delete(self, task_id: str) -> bool:
        response = self.client.delete_item(
            TableName=self.table_name,
            Key={"id": {"S": task_id}},
            ReturnValues="ALL_OLD",
        )
        return bool(response.get("Attributes"))


class DynamoDBUserRepository(_DynamoDBTable, UserRepository):
    """User repository over a DynamoDB table keyed by ``userId``."""

    def save_user(self, user: User) -> User:
        self.client.put_item(TableName=self.table_name, Item=to_attribute_map(user.to_item()))
        logger.debug("User saved", extra={"user_id": user.user_id, "table": self.table_name})
        return user

    def get_user_by_id(self, user_id: str) -> User | None:
        response = self.client.get_item(
            TableName=self.table_name,
            Key={"userId": {"S": user_id}},
        )
        item = response.get("Item")
        if not item:
            return None
        return User.from_item(from_attribute_map(item))
