from fastapi import Depends, HTTPException, status, Request, Query
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging
import redis

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import (
    security, verify_token, AuthenticationError,
    AuthorizationError, TokenPayload
)
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

async def get_current_user_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    if credentials is None:
        # A header that is not "Bearer <token>" is a bad credential, not a missing one
        if request.headers.get("Authorization"):
            raise AuthorizationError()
        raise AuthenticationError()

    # Verify token
    token_payload = verify_token(credentials.credentials)
    if not token_payload or not token_payload.email:
        raise AuthorizationError()

    return token_payload

async def get_identity_matched_token(
    email: Optional[str] = Query(None),
    token_payload: TokenPayload = Depends(get_current_user_token)
) -> TokenPayload:
    """Require the ``email`` query parameter to name the token's owner."""
    if email != token_payload.email:
        raise AuthenticationError()

    return token_payload

async def get_admin_token(
    token_payload: TokenPayload = Depends(get_current_user_token),
    db: Session = Depends(get_db)
) -> TokenPayload:
    """Require the token's owner to hold the admin role."""
    if not UserService(db).is_admin(token_payload.email):
        raise AuthorizationError("You are not admin")

    return token_payload

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limiting per client IP."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{client_ip}"

    try:
        current_requests = redis_client.get(key)
        if current_requests is None:
            redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
            return
        if int(current_requests) < settings.RATE_LIMIT_REQUESTS:
            redis_client.incr(key)
            return
    except redis.RedisError as e:
        # Limiter unavailable; let the request through
        logger.warning(f"Rate limit check skipped for {client_ip}: {e}")
        return

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests. Please try again later."
    )
