# backend/app/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The bearer token's ``sub`` names a user in the user namespace. Missing or
invalid tokens, unknown users and deactivated users all resolve to 401.
The optional variant returns None instead of raising for anonymous calls.
"""

import asyncio
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jwt import PyJWTError
from sqlalchemy.orm import Session

from ...auth import bearer_scheme, decode_access_token
from ...principal import Caller
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _load_caller(db: Session, token: str) -> Caller:
    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.info(f"Rejected bearer token: {str(e)}")
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid or expired token")

    user = RepositoryFactory.create_user_repository(db).get_by_id(str(user_id))
    if user is None:
        raise _unauthorized("User not found")
    if not user.get("isActive", True):
        raise _unauthorized("User account is deactivated")
    return Caller.from_user(user)


async def get_current_caller_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[Caller]:
    """Resolve the caller when a token is present; anonymous requests get None."""
    if credentials is None or not credentials.credentials:
        return None
    return await asyncio.to_thread(_load_caller, db, credentials.credentials)


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Caller:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Authentication required")
    return await asyncio.to_thread(_load_caller, db, credentials.credentials)


async def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return caller
