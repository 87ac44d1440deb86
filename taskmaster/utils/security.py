from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext

from taskmaster.schemas.user import TokenData


@lru_cache
def get_pwd_context(rounds: int = 10) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(password: str, rounds: int = 10) -> str:
    return get_pwd_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # The work factor is read back from the hash itself
    try:
        return get_pwd_context().verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable bcrypt hash
        return False


def create_access_token(
    data: dict,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = "HS256") -> TokenData:
    """
    Verify signature and expiry and return the embedded identity.

    Raises ``JWTError`` when the token is malformed, tampered with, expired or
    lacks the identity claims.
    """
    payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    user_id = payload.get("id")
    if not isinstance(user_id, int):
        raise JWTError("Token carries no user id")
    return TokenData(id=user_id, username=payload.get("username"))
