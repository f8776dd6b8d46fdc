"""SQL task repository built on SQLModel."""

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from app.models.task import Task, TaskRecord
from app.repositories.base import TaskRepository


class SqlTaskRepository(TaskRepository):
    """Task repository over any SQLAlchemy engine (PostgreSQL, SQLite)."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def save(self, task: Task) -> Task:
        with Session(self.engine) as session:
            session.add(TaskRecord.from_task(task))
            session.commit()
        return task

    def find_by_id(self, task_id: str) -> Task | None:
        with Session(self.engine) as session:
            record = session.get(TaskRecord, task_id)
            return record.to_task() if record is not None else None

    def find_all(self) -> list[Task]:
        with Session(self.engine) as session:
            records = session.exec(select(TaskRecord)).all()
            return [record.to_task() for record in records]

    def update(self, task: Task) -> Task:
        with Session(self.engine) as session:
            session.merge(TaskRecord.from_task(task))
            session.commit()
        return task

    def delete(self, task_id: str) -> bool:
        with Session(self.engine) as session:
            record = session.get(TaskRecord, task_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()
        return True
