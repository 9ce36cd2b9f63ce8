"""
Cart and checkout API endpoints
Works for signed-in buyers and guests
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from typing import Optional

from storefront.core.database import get_db
from storefront.core.dependencies import get_optional_user
from storefront.models.user import Profile
from storefront.schemas.order import CartQuoteRequest, CartQuoteResponse, CheckoutRequest, OrderResponse
from storefront.services.checkout_service import CheckoutService, CheckoutError
from storefront.services.referral_service import get_pending_referral
from storefront.services.settings_service import SettingsService

router = APIRouter()


@router.post("/cart/quote", response_model=dict)
async def quote_cart(
    quote_data: CartQuoteRequest,
    db: Session = Depends(get_db)
):
    """
    Subtotal, voucher discount and total for a cart

    An unknown or inactive voucher code is reported as voucher_valid=false.
    """
    try:
        quote = CheckoutService.quote(db, quote_data.items, quote_data.voucher_code)
    except CheckoutError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "data": CartQuoteResponse(**quote).model_dump()
    }


@router.post("/checkout", response_model=dict, status_code=status.HTTP_201_CREATED)
async def checkout(
    checkout_data: CheckoutRequest,
    request: Request,
    current_user: Optional[Profile] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Place an order

    - **items**: [{product_id, quantity}]
    - **voucher_code**: Optional, must be active when given
    - **payment_method**: TRANSFER, EWALLET or QRIS
    - **guest_info**: {name, phone, email?}, required when not signed in

    Returns the order, where to pay, and the WhatsApp link that confirms
    the order with the store.
    """
    try:
        order = CheckoutService.place_order(
            db,
            checkout_data,
            buyer=current_user,
            referral_code=get_pending_referral(request)
        )
    except CheckoutError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    store = SettingsService.get_store_settings(db)

    return {
        "ok": True,
        "message": "Order placed successfully",
        "data": {
            "order": OrderResponse.model_validate(order).model_dump(),
            "payment": CheckoutService.payment_instructions(store, order.payment_method),
            "whatsapp_url": CheckoutService.confirmation_link(store, order)
        }
    }
