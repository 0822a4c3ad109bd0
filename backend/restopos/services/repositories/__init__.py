"""Storage backends behind the DataRepository interface."""

import logging

from sqlalchemy.orm import Session

from restopos.core.config import settings
from restopos.schemas.config import AppConfig
from restopos.services.repositories.base import DataRepository
from restopos.services.repositories.csv_repository import CsvRepository
from restopos.services.repositories.memory_repository import (
    InMemoryRepository,
    get_memory_repository,
)
from restopos.services.repositories.sql_repository import SqlRepository

logger = logging.getLogger(__name__)


def build_repository(db: Session, config: AppConfig) -> DataRepository:
    """Pick the backend named by the app config's ``data_source``."""
    if config.data_source == "csv":
        return CsvRepository(settings.csv_data_dir, config.archive_file_limit)
    if config.data_source == "memory":
        return get_memory_repository()
    return SqlRepository(db)


__all__ = [
    "DataRepository",
    "SqlRepository",
    "CsvRepository",
    "InMemoryRepository",
    "build_repository",
]
