"""Authentication routes."""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from restopos.core.config import settings
from restopos.core.rate_limit import limiter
from restopos.core.rbac import UserRole
from restopos.core.security import create_access_token, verify_password
from restopos.schemas.auth import LoginRequest, Token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/super-admin/login", response_model=Token)
@limiter.limit("5/minute")
def super_admin_login(request: Request, credentials: LoginRequest):
    """Exchange the super-admin credentials for a bearer token."""
    if (
        credentials.username != settings.super_admin_username
        or not verify_password(credentials.password, settings.super_admin_password_hash)
    ):
        logger.warning(f"Failed super-admin login for {credentials.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token({"sub": credentials.username, "role": UserRole.SUPER_ADMIN.value})
    logger.info(f"Super-admin {credentials.username} logged in")
    return Token(access_token=token)
