"""Shared route dependencies."""

from typing import Annotated

from fastapi import Depends

from restopos.db.session import DbSession
from restopos.schemas.config import AppConfig
from restopos.services import config_service
from restopos.services.repositories import DataRepository, build_repository


def get_app_config(db: DbSession) -> AppConfig:
    return config_service.get_app_config(db)


AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]


def get_repository(db: DbSession, config: AppConfigDep) -> DataRepository:
    """Repository for the data source selected in the app config."""
    return build_repository(db, config)


Repo = Annotated[DataRepository, Depends(get_repository)]
