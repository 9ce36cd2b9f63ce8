"""
Store settings API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import require_admin
from storefront.models.user import Profile
from storefront.schemas.settings import StoreSettings
from storefront.services.settings_service import SettingsService

router = APIRouter()


@router.get("/settings", response_model=dict)
async def get_store_settings(db: Session = Depends(get_db)):
    """Public store settings: contact, payment details, commission rate"""
    return {
        "ok": True,
        "data": SettingsService.get_store_settings(db).model_dump()
    }


@router.put("/admin/settings", response_model=dict)
async def update_store_settings(
    new_settings: StoreSettings,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Replace the store settings"""
    saved = SettingsService.save_store_settings(db, new_settings)
    return {
        "ok": True,
        "message": "Settings saved",
        "data": saved.model_dump()
    }
