"""
Affiliate Service
Program activation, payouts and withdrawal requests
"""
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List
import logging

from storefront.core.config import settings
from storefront.core.exceptions import StoreError
from storefront.models.commission import CommissionLog
from storefront.models.payout import Payout
from storefront.models.user import Profile
from storefront.services.settings_service import SettingsService
from storefront.utils.helpers import format_rupiah, generate_affiliate_code, generate_whatsapp_link
from storefront.utils.persistence import compare_and_set

logger = logging.getLogger(__name__)


class AffiliateAlreadyActiveError(StoreError):
    pass


class EmptyBalanceError(StoreError):
    pass


class BalanceChangedError(StoreError):
    """Balance moved between the admin reading it and resetting it"""


class WithdrawalNotAllowedError(StoreError):
    pass


class AffiliateService:
    """Service for affiliate operations"""

    @staticmethod
    def activate_affiliate(db: Session, profile: Profile) -> Profile:
        """
        Give a profile its own affiliate code

        Raises:
            AffiliateAlreadyActiveError: the profile already has a code
        """
        if profile.affiliate_code:
            raise AffiliateAlreadyActiveError("Affiliate program already active")

        while True:
            code = generate_affiliate_code(settings.AFFILIATE_CODE_LENGTH)
            existing = db.query(Profile.id).filter(Profile.affiliate_code == code).first()
            if not existing:
                break

        profile.affiliate_code = code
        db.commit()
        db.refresh(profile)
        logger.info(f"Profile {profile.id} joined the affiliate program as {code}")
        return profile

    @staticmethod
    def list_affiliates(db: Session) -> List[Profile]:
        return (
            db.query(Profile)
            .filter(Profile.affiliate_code.isnot(None))
            .order_by(Profile.balance.desc(), Profile.id)
            .all()
        )

    @staticmethod
    def total_commission(db: Session, affiliate: Profile) -> int:
        total = (
            db.query(func.coalesce(func.sum(CommissionLog.amount), 0))
            .filter(CommissionLog.affiliate_id == affiliate.id)
            .scalar()
        )
        return int(total or 0)

    @staticmethod
    def reset_balance(db: Session, affiliate: Profile) -> Payout:
        """
        Record a manual payout of the whole balance and zero it

        The reset only applies if the balance is still the one read here,
        so a commission credited in between is never wiped out.

        Raises:
            EmptyBalanceError: nothing to pay out
            BalanceChangedError: balance changed concurrently, re-read and retry
        """
        amount = affiliate.balance or 0
        if amount <= 0:
            raise EmptyBalanceError("Affiliate has no balance to pay out")

        if not compare_and_set(db, Profile, affiliate.id, "balance", amount, 0):
            db.rollback()
            db.refresh(affiliate)
            raise BalanceChangedError("Balance changed, reload and try again")

        payout = Payout(affiliate_id=affiliate.id, amount=amount, status="paid")
        db.add(payout)
        db.commit()
        db.refresh(payout)
        db.refresh(affiliate)

        logger.info(f"Paid out {amount} to affiliate {affiliate.id}")
        return payout

    @staticmethod
    def build_withdrawal_request(db: Session, profile: Profile) -> dict:
        """
        WhatsApp message asking the store to pay out the balance

        Raises:
            WithdrawalNotAllowedError: balance below minimum, missing bank
                details, or no store WhatsApp number configured
        """
        balance = profile.balance or 0
        if balance < settings.MIN_WITHDRAWAL_AMOUNT:
            raise WithdrawalNotAllowedError(
                f"Minimum withdrawal is {format_rupiah(settings.MIN_WITHDRAWAL_AMOUNT)}"
            )
        if not profile.has_bank_details:
            raise WithdrawalNotAllowedError("Complete your bank details first")

        store = SettingsService.get_store_settings(db)
        if not store.whatsapp_number:
            raise WithdrawalNotAllowedError("Store WhatsApp number is not configured")

        message = (
            f"Halo Admin, saya ingin mencairkan komisi affiliate.\n\n"
            f"Nama: {profile.full_name or profile.email}\n"
            f"Kode Affiliate: {profile.affiliate_code}\n"
            f"Saldo: {format_rupiah(balance)}\n\n"
            f"Bank: {profile.bank_name}\n"
            f"No. Rekening: {profile.bank_number}\n"
            f"Atas Nama: {profile.bank_holder}"
        )
        return {
            "amount": balance,
            "message": message,
            "whatsapp_url": generate_whatsapp_link(store.whatsapp_number, message),
        }
