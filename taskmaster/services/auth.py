import logging
from datetime import timedelta

from sqlalchemy import case, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from starlette.concurrency import run_in_threadpool

from taskmaster.config import Settings
from taskmaster.errors import Conflict, NotFound, Unauthorized, ValidationError
from taskmaster.models.user import User
from taskmaster.utils.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


async def register_user(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
    rounds: int = 10,
) -> int:
    """Hash the password, persist a new user and return its id."""
    if not username or not email or not password or not isinstance(password, str):
        raise ValidationError("Invalid input. Ensure all fields are filled correctly.")

    try:
        hashed_password = await run_in_threadpool(get_password_hash, password, rounds)
    except ValueError as exc:
        # bcrypt refuses some strings, e.g. ones containing NUL bytes
        logger.info("Registration rejected, unusable password: %s", exc)
        raise ValidationError("Invalid password")

    new_user = User(username=username, email=email, password=hashed_password)
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Registration rejected, email already in use: %s", email)
        raise Conflict("Email already exists")

    logger.info("Registered user %s (id=%s)", username, new_user.id)
    return new_user.id


async def find_user(db: AsyncSession, identifier: str) -> User | None:
    # Email matches win over username matches; usernames may repeat, so the
    # oldest account with that username is used.
    result = await db.execute(
        select(User)
        .filter(or_(User.email == identifier, User.username == identifier))
        .order_by(case((User.email == identifier, 0), else_=1), User.id)
        .limit(1)
    )
    return result.scalars().first()


async def login(db: AsyncSession, identifier: str, password: str, settings: Settings) -> str:
    if not identifier or not password:
        raise ValidationError("Email/Username and password are required")

    user = await find_user(db, identifier)
    if user is None:
        raise NotFound("User not found")

    if not await run_in_threadpool(verify_password, password, user.password):
        logger.info("Failed login for user id=%s", user.id)
        raise Unauthorized("Invalid password")

    token = create_access_token(
        {"id": user.id, "username": user.username},
        settings.SECRET_KEY,
        settings.ALGORITHM,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    logger.info("User id=%s logged in", user.id)
    return token
