"""
Commission API endpoints
Commission history of the current affiliate
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import get_current_user
from storefront.models.commission import CommissionLog
from storefront.models.user import Profile
from storefront.schemas.commission import CommissionLogResponse
from storefront.services.affiliate_service import AffiliateService
from storefront.utils.pagination import paginate, get_pagination_params
from storefront.utils.responses import paginated_response

router = APIRouter()


@router.get("/users/me/commissions", response_model=dict)
async def list_my_commissions(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Commission log rows credited to me, newest first

    - **page**: Page number
    - **per_page**: Items per page
    """
    query = (
        db.query(CommissionLog)
        .filter(CommissionLog.affiliate_id == current_user.id)
        .order_by(CommissionLog.created_at.desc(), CommissionLog.id.desc())
    )

    # Total over all rows, not just this page
    total_commission = AffiliateService.total_commission(db, current_user)

    page, per_page = get_pagination_params(page, per_page)
    items, total = paginate(query, page, per_page)

    data = [CommissionLogResponse.model_validate(log).model_dump() for log in items]

    response = paginated_response(data, page, per_page, total)
    response["total_commission"] = total_commission
    return response
