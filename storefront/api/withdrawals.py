"""
Withdrawal API endpoints
Affiliates ask the store to pay out their balance over WhatsApp
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import get_current_user
from storefront.models.user import Profile
from storefront.services.affiliate_service import AffiliateService, WithdrawalNotAllowedError

router = APIRouter()


@router.post("/users/me/withdrawal-request", response_model=dict)
async def request_withdrawal(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Build the withdrawal request for the store admin

    The balance must reach the minimum withdrawal and bank details must be
    complete. The payout itself is done by an admin.
    """
    try:
        request_data = AffiliateService.build_withdrawal_request(db, current_user)
    except WithdrawalNotAllowedError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "data": request_data
    }
