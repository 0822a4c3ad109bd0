"""Access control for the super-admin configuration panel."""

from enum import Enum
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from restopos.core.security import decode_access_token


class UserRole(str, Enum):
    """Roles carried in access tokens."""

    SUPER_ADMIN = "super_admin"


class TokenData:
    """Decoded token data."""

    def __init__(self, username: str, role: UserRole):
        self.username = username
        self.role = role


async def get_current_user(request: Request) -> TokenData:
    """Get the current authenticated user from the Bearer token."""
    payload = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]
        if token:
            payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    username = payload.get("sub")
    role = payload.get("role")
    if username is None or role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        user_role = UserRole(role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid role in token",
        )
    return TokenData(username=username, role=user_role)


async def require_super_admin(
    current_user: Annotated[TokenData, Depends(get_current_user)],
) -> TokenData:
    if current_user.role != UserRole.SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super-admin access required",
        )
    return current_user


RequireSuperAdmin = Annotated[TokenData, Depends(require_super_admin)]
