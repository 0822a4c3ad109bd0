"""Config service: the AppConfig document stored in the settings table.

The stored value may be partial or come from an older release. It is merged
field by field over the defaults; keys that are no longer known are dropped.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from restopos.core.config import settings
from restopos.models.settings import AppSetting
from restopos.schemas.config import AppConfig, AppConfigUpdate

logger = logging.getLogger(__name__)

CONFIG_CATEGORY = "app"
CONFIG_KEY = "config"
CLEARABLE_FIELDS = ("logo", "gst_number")


def default_app_config() -> AppConfig:
    return AppConfig(data_source=settings.data_source)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if key not in base:
            continue
        if isinstance(base[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(base[key], value)
        else:
            merged[key] = value
    return merged


def merge_config(stored: Optional[Dict[str, Any]]) -> AppConfig:
    """Overlay a stored (possibly partial) document on the defaults."""
    defaults = default_app_config()
    if not stored or not isinstance(stored, dict):
        return defaults

    merged = _deep_merge(defaults.model_dump(mode="json"), stored)
    try:
        return AppConfig.model_validate(merged)
    except PydanticValidationError as e:
        # Keep whichever fields validate on their own
        logger.warning(f"Stored app config is invalid, falling back per field: {e.error_count()} errors")
        good = {}
        for key, value in merged.items():
            try:
                AppConfig.model_validate({key: value})
                good[key] = value
            except PydanticValidationError:
                logger.warning(f"Ignoring invalid app config field {key!r}")
        return AppConfig.model_validate(good)


def _get_setting_value(db: Session, category: str, key: str) -> Any:
    """Return the JSON value for a category+key, or None if not found."""
    row = (
        db.query(AppSetting)
        .filter(AppSetting.category == category, AppSetting.key == key)
        .first()
    )
    return row.value if row else None


def _upsert_setting(db: Session, category: str, key: str, value: Any) -> AppSetting:
    """Insert or update a setting row and commit."""
    row = (
        db.query(AppSetting)
        .filter(AppSetting.category == category, AppSetting.key == key)
        .first()
    )
    if row:
        row.value = value
    else:
        row = AppSetting(category=category, key=key, value=value)
        db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_app_config(db: Session) -> AppConfig:
    return merge_config(_get_setting_value(db, CONFIG_CATEGORY, CONFIG_KEY))


def save_app_config(db: Session, config: AppConfig) -> AppConfig:
    _upsert_setting(db, CONFIG_CATEGORY, CONFIG_KEY, config.model_dump(mode="json"))
    logger.info("App config saved")
    return config


def _drop_nulls(changes: Dict[str, Any], keep=()) -> Dict[str, Any]:
    """Remove explicit nulls, except for the top-level keys in ``keep``."""
    cleaned = {}
    for key, value in changes.items():
        if isinstance(value, dict):
            cleaned[key] = _drop_nulls(value)
        elif value is not None or key in keep:
            cleaned[key] = value
    return cleaned


def update_app_config(db: Session, update: AppConfigUpdate) -> AppConfig:
    """Apply a partial update on top of the current config and save it.

    An explicit null clears an optional field such as ``gst_number``; on
    any other field it is ignored.
    """
    current = get_app_config(db).model_dump(mode="json")
    changes = _drop_nulls(update.model_dump(mode="json", exclude_unset=True), keep=CLEARABLE_FIELDS)
    return save_app_config(db, AppConfig.model_validate(_deep_merge(current, changes)))
