"""
SentinelSight authentication & authorization.

JWT session tokens with role-based access control. A token is accepted from
an ``Authorization: Bearer`` header or from the session cookie set by the
dashboard. Roles: ``admin`` > ``operator`` > ``viewer``/``user``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from . import queries
from .config import Settings, settings
from .db import get_db
from .models.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

OPERATOR_ROLES = ("admin", "operator")


def create_access_token(
    open_id: str,
    role: str,
    expires_minutes: Optional[int] = None,
    cfg: Optional[Settings] = None,
) -> str:
    """Create JWT access token, signed with the key from ``cfg`` (default: app settings)"""
    cfg = cfg or settings
    minutes = expires_minutes if expires_minutes is not None else cfg.access_token_expire_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)

    payload = {
        "sub": open_id,
        "role": role,
        "exp": expire,
    }

    return jwt.encode(payload, cfg.signing_key, algorithm=cfg.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify JWT token"""
    try:
        return jwt.decode(token, settings.signing_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def _token_from_request(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the signed-in user, or ``None`` for anonymous requests."""
    token = _token_from_request(request, credentials)
    if not token:
        return None

    payload = decode_token(token)
    open_id = payload.get("sub")
    if not open_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )

    user = queries.get_user_by_open_id(db, open_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Get current authenticated user"""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != "admin":
        logger.info("Denied admin action to user id=%s role=%s", user.id, user.role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def require_operator_or_admin(user: User = Depends(get_current_user)) -> User:
    if user.role not in OPERATOR_ROLES:
        logger.info("Denied operator action to user id=%s role=%s", user.id, user.role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Operator or Admin access required",
        )
    return user
