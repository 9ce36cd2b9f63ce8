"""
Store settings - one key/value row read on demand
"""
from sqlalchemy.orm import Session
import logging

from storefront.models.setting import StoreSetting
from storefront.schemas.settings import StoreSettings

logger = logging.getLogger(__name__)

STORE_SETTINGS_KEY = "store_settings"


class SettingsService:

    @staticmethod
    def get_store_settings(db: Session) -> StoreSettings:
        """Stored settings merged over the defaults"""
        row = db.query(StoreSetting).filter(StoreSetting.key == STORE_SETTINGS_KEY).first()
        stored = row.value if row and isinstance(row.value, dict) else {}
        merged = {**StoreSettings().model_dump(), **stored}
        return StoreSettings.model_validate(merged)

    @staticmethod
    def save_store_settings(db: Session, new_settings: StoreSettings) -> StoreSettings:
        """Upsert the settings row"""
        db.merge(StoreSetting(key=STORE_SETTINGS_KEY, value=new_settings.model_dump()))
        db.commit()
        logger.info("Store settings updated")
        return new_settings

    @staticmethod
    def get_commission_rate(db: Session) -> float:
        return SettingsService.get_store_settings(db).affiliate_commission_rate
