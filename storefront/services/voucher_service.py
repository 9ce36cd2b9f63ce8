"""
Voucher Service
Lookup by user-supplied code and admin management
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
import logging

from storefront.models.voucher import Voucher
from storefront.schemas.voucher import VoucherCreate
from storefront.utils.helpers import normalize_code

logger = logging.getLogger(__name__)


class DuplicateVoucherError(ValueError):
    pass


class VoucherService:
    """Service for voucher operations"""

    @staticmethod
    def find_active_voucher(db: Session, code: Optional[str]) -> Optional[Voucher]:
        """
        Resolve a code typed by the customer to an active voucher

        The input is trimmed and uppercased before an exact comparison with
        the stored (uppercase) code.

        Returns:
            The voucher, or None when the code is blank, unknown or inactive
        """
        normalized = normalize_code(code)
        if not normalized:
            return None

        voucher = db.query(Voucher).filter(Voucher.code == normalized).first()
        if voucher is None or not voucher.is_active:
            return None
        return voucher

    @staticmethod
    def list_vouchers(db: Session) -> List[Voucher]:
        return db.query(Voucher).order_by(Voucher.created_at.desc(), Voucher.id.desc()).all()

    @staticmethod
    def create_voucher(db: Session, data: VoucherCreate) -> Voucher:
        """Create an active voucher, codes are unique"""
        if db.query(Voucher).filter(Voucher.code == data.code).first():
            raise DuplicateVoucherError(f"Voucher {data.code} already exists")

        voucher = Voucher(
            code=data.code,
            discount_type=data.discount_type,
            discount_value=data.discount_value,
            is_active=True
        )
        db.add(voucher)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DuplicateVoucherError(f"Voucher {data.code} already exists") from e
        db.refresh(voucher)
        logger.info(f"Voucher {voucher.code} created ({voucher.discount_type} {voucher.discount_value})")
        return voucher

    @staticmethod
    def toggle_voucher(db: Session, voucher: Voucher) -> Voucher:
        voucher.is_active = not voucher.is_active
        db.commit()
        db.refresh(voucher)
        return voucher

    @staticmethod
    def delete_voucher(db: Session, voucher: Voucher) -> None:
        db.delete(voucher)
        db.commit()
