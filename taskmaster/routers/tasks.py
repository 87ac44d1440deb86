from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmaster.dependencies import get_db, get_current_user
from taskmaster.models.tasks import TaskPriority, TaskStatus
from taskmaster.schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate, as_utc
from taskmaster.schemas.user import Message, TokenData
from taskmaster.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.post("", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    return await task_service.create_task(db, current_user.id, task_data)

@router.get("", response_model=list[TaskSchema])
async def list_tasks(
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    return await task_service.list_tasks(db, current_user.id)

@router.get("/filter", response_model=list[TaskSchema])
async def filter_tasks(
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    due_date: datetime | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    return await task_service.filter_tasks(
        db, current_user.id, status=status, priority=priority, due_before=as_utc(due_date)
    )

@router.get("/search", response_model=list[TaskSchema])
async def search_tasks(
    keyword: str | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    return await task_service.search_tasks(db, current_user.id, keyword)

@router.put("/{task_id}", response_model=TaskSchema)
async def update_task(
    task_id: int,
    update_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    return await task_service.update_task(db, current_user.id, task_id, update_data)

@router.delete("/{task_id}", response_model=Message)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    await task_service.delete_task(db, current_user.id, task_id)
    return {"message": "Task deleted successfully"}
