import logging

from fastapi import Depends, Header, Request
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from taskmaster.config import Settings
from taskmaster.database import get_db as db_session
from taskmaster.errors import Forbidden, Unauthorized
from taskmaster.schemas.user import TokenData
from taskmaster.utils.security import decode_access_token

logger = logging.getLogger(__name__)


def get_db(db: AsyncSession = Depends(db_session)):
    return db


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_app_settings),
) -> TokenData:
    # "<scheme> <token>": a missing token segment is 401, while any token
    # that is present but fails verification is 403
    _, token = get_authorization_scheme_param(authorization)
    if not token:
        raise Unauthorized("Access token required")

    try:
        return decode_access_token(token, settings.SECRET_KEY, settings.ALGORITHM)
    except JWTError as exc:
        logger.warning("Token verification failed: %s", exc)
        raise Forbidden("Invalid token")
