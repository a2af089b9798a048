import uuid
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .exceptions import Unauthenticated
from .settings import settings

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: uuid.UUID | str, expires_delta: timedelta | None = None
) -> str:
    expires = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return jwt.encode(
        {"sub": str(user_id), "type": "access", "exp": expires},
        settings.JWT_SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_http_access_token(token: str) -> uuid.UUID:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthenticated("Invalid token")

    if payload.get("type", "access") != "access":
        raise Unauthenticated("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated("Token missing user ID")

    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        raise Unauthenticated("Invalid user ID format in token")


async def jwt_protect(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> uuid.UUID:
    token = credentials.credentials if credentials else None
    if not token:
        token = request.cookies.get("access_token")
    if not token:
        raise Unauthenticated()

    return decode_http_access_token(token)
