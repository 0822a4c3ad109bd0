"""Application configuration routes (super-admin panel)."""

import logging

from fastapi import APIRouter, Request

from restopos.api.deps import AppConfigDep
from restopos.core.rate_limit import limiter
from restopos.core.rbac import RequireSuperAdmin
from restopos.db.session import DbSession
from restopos.schemas.config import AppConfig, AppConfigUpdate
from restopos.services import config_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=AppConfig)
@limiter.limit("60/minute")
def get_config(request: Request, config: AppConfigDep):
    """Current configuration, defaults filled in."""
    return config


@router.put("/", response_model=AppConfig)
@limiter.limit("30/minute")
def update_config(
    request: Request,
    data: AppConfigUpdate,
    db: DbSession,
    current_user: RequireSuperAdmin,
):
    """Update configuration. Fields left out keep their current value."""
    config = config_service.update_app_config(db, data)
    logger.info(f"App config updated by {current_user.username}")
    return config
