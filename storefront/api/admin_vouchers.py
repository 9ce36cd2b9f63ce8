"""
Admin voucher management API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import require_admin
from storefront.models.user import Profile
from storefront.models.voucher import Voucher
from storefront.schemas.voucher import VoucherCreate, VoucherResponse
from storefront.services.voucher_service import VoucherService, DuplicateVoucherError

router = APIRouter()


def _get_voucher_or_404(db: Session, voucher_id: int) -> Voucher:
    voucher = db.query(Voucher).filter(Voucher.id == voucher_id).first()
    if not voucher:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Voucher not found"
        )
    return voucher


@router.get("/admin/vouchers", response_model=dict)
async def list_vouchers(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    vouchers = VoucherService.list_vouchers(db)
    return {
        "ok": True,
        "data": [VoucherResponse.model_validate(voucher).model_dump() for voucher in vouchers]
    }


@router.post("/admin/vouchers", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_voucher(
    voucher_data: VoucherCreate,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Create a voucher

    - **code**: Stored uppercase, whitespace removed
    - **discount_type**: percentage or fixed
    - **discount_value**: 1-100 for percentage, > 0 Rupiah for fixed
    """
    try:
        voucher = VoucherService.create_voucher(db, voucher_data)
    except DuplicateVoucherError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Voucher code {voucher_data.code} already exists"
        )

    return {
        "ok": True,
        "message": "Voucher created",
        "data": VoucherResponse.model_validate(voucher).model_dump()
    }


@router.patch("/admin/vouchers/{voucher_id}/toggle", response_model=dict)
async def toggle_voucher(
    voucher_id: int,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Activate or deactivate a voucher"""
    voucher = VoucherService.toggle_voucher(db, _get_voucher_or_404(db, voucher_id))
    return {
        "ok": True,
        "data": VoucherResponse.model_validate(voucher).model_dump()
    }


@router.delete("/admin/vouchers/{voucher_id}", response_model=dict)
async def delete_voucher(
    voucher_id: int,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    VoucherService.delete_voucher(db, _get_voucher_or_404(db, voucher_id))
    return {
        "ok": True,
        "message": "Voucher deleted"
    }
