from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import DateTime, Integer, String, Text, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from task_prioritizer.domain.dates import utc_now
from task_prioritizer.domain.errors import PersistenceError, TaskNotFound
from task_prioritizer.domain.task_models import PriorityUpdate, Task, TaskCreate, TaskQuery

logger = logging.getLogger("tasks.db")


class Base(DeclarativeBase):
    pass


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we write is UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TaskRow(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # canonical timestamp text, fixed width so string order is time order
    due_date: Mapped[str] = mapped_column(String(24), nullable=False, index=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            priority=self.priority,
            created_at=_aware(self.created_at),
            updated_at=_aware(self.updated_at),
        )


def _db_error(op: str, exc: Exception) -> PersistenceError:
    logger.exception(
        "db.error",
        extra={"category": "db", "event": "db.error", "op": op},
        exc_info=exc,
    )
    return PersistenceError(f"Failed to {op}")


class SQLiteTaskRepo:
    def __init__(self, sessionmaker):
        self.sessionmaker = sessionmaker

    async def create(self, data: TaskCreate) -> Task:
        now = utc_now()
        row = TaskRow(
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            created_at=now,
            updated_at=now,
        )
        async with self.sessionmaker() as session:
            session.add(row)
            try:
                await session.commit()
            except SQLAlchemyError as exc:
                raise _db_error("create task", exc) from exc
            return row.to_domain()

    async def get(self, task_id: int) -> Optional[Task]:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task_id)
            return row.to_domain() if row else None

    async def update(self, task_id: int, changes: Dict[str, Any]) -> Task:
        async with self.sessionmaker() as session:
            row = await session.get(TaskRow, task_id)
            if row is None:
                raise TaskNotFound(task_id)
            for name, value in changes.items():
                setattr(row, name, value)
            row.updated_at = utc_now()
            try:
                await session.commit()
            except SQLAlchemyError as exc:
                raise _db_error("update task", exc) from exc
            return row.to_domain()

    async def delete(self, task_id: int) -> None:
        async with self.sessionmaker() as session:
            try:
                res = await session.execute(delete(TaskRow).where(TaskRow.id == task_id))
                if res.rowcount == 0:
                    raise TaskNotFound(task_id)
                await session.commit()
            except SQLAlchemyError as exc:
                raise _db_error("delete task", exc) from exc

    async def find(self, query: TaskQuery) -> List[Task]:
        stmt = select(TaskRow)
        if query.priority is not None:
            stmt = stmt.where(TaskRow.priority == query.priority)
        if query.due_range is not None:
            start, end = query.due_range
            stmt = stmt.where(TaskRow.due_date >= start, TaskRow.due_date <= end)
        stmt = stmt.order_by(TaskRow.priority.desc())

        async with self.sessionmaker() as session:
            try:
                res = await session.execute(stmt)
            except SQLAlchemyError as exc:
                raise _db_error("list tasks", exc) from exc
            return [r.to_domain() for r in res.scalars().all()]

    async def list_overdue(self, now: str) -> List[Task]:
        async with self.sessionmaker() as session:
            try:
                res = await session.execute(select(TaskRow).where(TaskRow.due_date < now))
            except SQLAlchemyError as exc:
                raise _db_error("list overdue tasks", exc) from exc
            return [r.to_domain() for r in res.scalars().all()]

    async def batch_update_priority(self, updates: Sequence[PriorityUpdate]) -> None:
        """
        Apply every update in one transaction. A missing id raises
        TaskNotFound and rolls the whole batch back.
        """
        now = utc_now()
        async with self.sessionmaker() as session:
            try:
                async with session.begin():
                    for u in updates:
                        res = await session.execute(
                            update(TaskRow)
                            .where(TaskRow.id == u.id)
                            .values(priority=u.priority, updated_at=now)
                        )
                        if res.rowcount == 0:
                            raise TaskNotFound(u.id)
            except SQLAlchemyError as exc:
                raise _db_error("reorder tasks", exc) from exc
