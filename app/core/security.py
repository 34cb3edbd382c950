import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

# Missing/malformed headers are reported with our own messages below
bearer_scheme = HTTPBearer(auto_error=False)


class ServerMisconfigured(Exception):
    """JWT_SECRET is not set."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def _secret() -> str:
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not configured")
        raise ServerMisconfigured()
    return settings.JWT_SECRET


def create_access_token(account_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signed token carrying the account id and email."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.JWT_EXPIRE_HOURS))
    to_encode = {"id": account_id, "email": email, "exp": expire}
    return jwt.encode(to_encode, _secret(), algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify a token; jose errors propagate to the caller."""
    return jwt.decode(token, _secret(), algorithms=[settings.JWT_ALGORITHM])


def _deny(status_code: int, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail=message)


def get_current_account_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """Authenticated account id from the ``Authorization: Bearer`` header."""
    header = request.headers.get("Authorization")
    if not header:
        raise _deny(status.HTTP_401_UNAUTHORIZED, "Access denied. No token provided.")
    if credentials is None:
        raise _deny(status.HTTP_401_UNAUTHORIZED, "Invalid token format. Use 'Bearer <token>'")
    if not credentials.credentials:
        raise _deny(status.HTTP_401_UNAUTHORIZED, "Access denied. No token provided.")

    try:
        payload = decode_token(credentials.credentials)
    except ServerMisconfigured:
        raise _deny(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server configuration error")
    except ExpiredSignatureError:
        raise _deny(status.HTTP_401_UNAUTHORIZED, "Token expired. Please login again.")
    except JWTError as e:
        logger.warning("Token verification failed: %s", e)
        raise _deny(status.HTTP_403_FORBIDDEN, "Invalid token.")

    account_id = payload.get("id")
    if account_id is None:
        raise _deny(status.HTTP_403_FORBIDDEN, "Invalid token payload.")
    return int(account_id)
