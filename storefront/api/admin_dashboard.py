"""
Admin dashboard API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import require_admin
from storefront.models.user import Profile
from storefront.services.order_service import OrderService

router = APIRouter()


@router.get("/admin/dashboard", response_model=dict)
async def get_dashboard_stats(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Store overview

    - Total users and products
    - Completed orders and their revenue
    - Completed sales per weekday
    """
    return {
        "ok": True,
        "data": OrderService.dashboard_stats(db)
    }
