import logging
from datetime import datetime

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from taskmaster.errors import InternalError, NotFound, ValidationError
from taskmaster.models.tasks import Task, TaskPriority, TaskStatus
from taskmaster.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

NEWEST_FIRST = (Task.created_at.desc(), Task.id.desc())


def _owned_by(owner_id: int):
    return select(Task).filter(Task.user_id == owner_id)


def _value(v):
    # Enum members reach the store as their plain string value
    return v.value if isinstance(v, (TaskStatus, TaskPriority)) else v


async def create_task(db: AsyncSession, owner_id: int, task_data: TaskCreate) -> Task:
    if not task_data.title or not task_data.priority:
        raise ValidationError("Title and priority are required")

    new_task = Task(
        user_id=owner_id,
        title=task_data.title,
        description=task_data.description,
        status=_value(task_data.status),
        priority=_value(task_data.priority),
        deadline=task_data.deadline,
    )
    db.add(new_task)
    try:
        await db.commit()
        await db.refresh(new_task)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to create task for user id=%s", owner_id)
        raise InternalError("Failed to create task")

    logger.info("User id=%s created task id=%s", owner_id, new_task.id)
    return new_task


async def list_tasks(db: AsyncSession, owner_id: int) -> list[Task]:
    result = await db.execute(_owned_by(owner_id).order_by(*NEWEST_FIRST))
    return list(result.scalars().all())


async def update_task(db: AsyncSession, owner_id: int, task_id: int, update_data: TaskUpdate) -> Task:
    changes = {field: _value(v) for field, v in update_data.changes().items()}
    if not changes:
        raise ValidationError("At least one field must be provided to update")

    # A single conditional statement: an absent task and a foreign task both
    # match zero rows.
    stmt = (
        update(Task)
        .where(Task.id == task_id, Task.user_id == owner_id)
        .values(**changes)
        .returning(Task)
    )
    result = await db.execute(stmt)
    task = result.scalars().first()
    if task is None:
        await db.rollback()
        raise NotFound("Task not found or not authorized to update")

    await db.commit()
    logger.info("User id=%s updated task id=%s (%s)", owner_id, task_id, ", ".join(sorted(changes)))
    return task


async def delete_task(db: AsyncSession, owner_id: int, task_id: int) -> None:
    result = await db.execute(
        delete(Task)
        .where(Task.id == task_id, Task.user_id == owner_id)
        .returning(Task.id)
    )
    if result.first() is None:
        await db.rollback()
        raise NotFound("Task not found or not authorized to delete")

    await db.commit()
    logger.info("User id=%s deleted task id=%s", owner_id, task_id)


async def filter_tasks(
    db: AsyncSession,
    owner_id: int,
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    due_before: datetime | None = None,
) -> list[Task]:
    """
    Narrow the owner's tasks by any combination of status, priority and a
    deadline ceiling. Criteria left as ``None`` match every row, so calling
    this with no criteria is equivalent to ``list_tasks``.
    """
    query = _owned_by(owner_id)
    if status is not None:
        query = query.filter(Task.status == _value(status))
    if priority is not None:
        query = query.filter(Task.priority == _value(priority))
    if due_before is not None:
        query = query.filter(Task.deadline <= due_before)

    result = await db.execute(query.order_by(*NEWEST_FIRST))
    return list(result.scalars().all())


async def search_tasks(db: AsyncSession, owner_id: int, keyword: str | None) -> list[Task]:
    """
    Case-insensitive substring match on title or description.

    Results are ordered by deadline, latest first, with undated tasks ahead
    of dated ones.
    """
    if not keyword:
        raise ValidationError("Keyword is required for searching")

    query = _owned_by(owner_id).filter(
        Task.title.icontains(keyword, autoescape=True)
        | Task.description.icontains(keyword, autoescape=True)
    )
    result = await db.execute(
        query.order_by(Task.deadline.desc().nulls_first(), Task.id.desc())
    )
    return list(result.scalars().all())
