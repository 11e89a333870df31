"""
Shared request dependencies
"""
from fastapi import Header
from typing import Optional
from uuid import UUID

from app.exceptions import AuthenticationError


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> UUID:
    """Identity of the caller, forwarded by the upstream gateway as X-User-Id"""
    if not x_user_id:
        raise AuthenticationError("Missing X-User-Id header")

    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise AuthenticationError("Invalid X-User-Id header")

    return user_id
