from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmaster.config import Settings
from taskmaster.dependencies import get_db, get_app_settings
from taskmaster.schemas.user import LoginRequest, LoginResponse, UserCreate, UserCreated
from taskmaster.services import auth as auth_service

router = APIRouter(tags=["auth"])

@router.post("/register", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
async def register(
    user: UserCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    user_id = await auth_service.register_user(
        db, user.username, user.email, user.password, rounds=settings.BCRYPT_ROUNDS
    )
    return {"message": f"User registered with ID: {user_id}", "id": user_id}

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    token = await auth_service.login(db, credentials.email_or_username, credentials.password, settings)
    return {"message": "Login successful", "token": token}
