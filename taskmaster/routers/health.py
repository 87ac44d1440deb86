import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from taskmaster.database import Database, get_database
from taskmaster.errors import InternalError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

@router.get("/")
def root():
    return {"message": "Welcome to the Task Manager API!"}

@router.get("/health")
async def health(database: Database = Depends(get_database)):
    try:
        current_time = await database.current_time()
    except (SQLAlchemyError, OSError):
        logger.exception("Database health check failed")
        raise InternalError("Database connection failed")
    return {"status": "ok", "current_time": current_time}
