"""
Checkout Service
Turns a submitted cart into a pending order and its WhatsApp handoff
"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Iterable, Optional, Tuple
import uuid
import logging

from storefront.core.exceptions import StoreError
from storefront.models.order import Order, OrderStatus
from storefront.models.user import Profile
from storefront.models.voucher import Voucher
from storefront.schemas.order import CartItemIn, CheckoutRequest, PAYMENT_METHODS
from storefront.schemas.settings import StoreSettings
from storefront.services.pricing import Cart
from storefront.services.product_service import ProductService
from storefront.services.referral_service import ReferralService
from storefront.services.voucher_service import VoucherService
from storefront.utils.helpers import format_rupiah, generate_whatsapp_link

logger = logging.getLogger(__name__)

ORDER_CODE_PREFIX = "INV-"


class CheckoutError(StoreError):
    """Checkout input rejected, nothing was written"""


def generate_order_code() -> str:
    return ORDER_CODE_PREFIX + uuid.uuid4().hex[:8].upper()


class CheckoutService:
    """Service for cart pricing and order placement"""

    @staticmethod
    def build_cart(db: Session, items: Iterable[CartItemIn]) -> Cart:
        """
        Load the requested products into a cart

        Raises:
            CheckoutError: unknown or inactive product, or quantity below 1
        """
        items = list(items)
        products = ProductService.get_products_by_ids(db, [item.product_id for item in items])

        cart = Cart()
        for item in items:
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                raise CheckoutError(f"Product {item.product_id} is not available")
            try:
                cart.add(product, item.quantity)
            except ValueError as e:
                raise CheckoutError(str(e)) from e
        return cart

    @staticmethod
    def quote(db: Session, items: Iterable[CartItemIn], voucher_code: Optional[str] = None) -> dict:
        """Totals for a cart, an unusable voucher code is reported, not raised"""
        cart = CheckoutService.build_cart(db, items)
        voucher = VoucherService.find_active_voucher(db, voucher_code)
        cart.apply_voucher(voucher)
        totals = cart.totals()
        return {
            "subtotal": totals.subtotal,
            "discount_amount": totals.discount_amount,
            "total": totals.total,
            "voucher_code": voucher.code if voucher else None,
            "voucher_valid": voucher is not None,
        }

    @staticmethod
    def _validate(db: Session, data: CheckoutRequest, buyer: Optional[Profile]) -> Tuple[Cart, Optional[Voucher]]:
        if not data.items:
            raise CheckoutError("Cart is empty")

        if data.payment_method not in PAYMENT_METHODS:
            raise CheckoutError(f"Payment method must be one of {', '.join(PAYMENT_METHODS)}")

        if buyer is None and data.guest_info is None:
            raise CheckoutError("Name and phone number are required for guest checkout")

        cart = CheckoutService.build_cart(db, data.items)

        voucher = None
        if data.voucher_code and data.voucher_code.strip():
            voucher = VoucherService.find_active_voucher(db, data.voucher_code)
            if voucher is None:
                raise CheckoutError("Voucher code is invalid or inactive")
        cart.apply_voucher(voucher)
        return cart, voucher

    @staticmethod
    def place_order(
        db: Session,
        data: CheckoutRequest,
        buyer: Optional[Profile] = None,
        referral_code: Optional[str] = None
    ) -> Order:
        """
        Persist a pending order for the cart

        All validation happens before the first write. A signed-in buyer
        without a referrer gets the pending referral code attached.

        Raises:
            CheckoutError: invalid input
        """
        cart, voucher = CheckoutService._validate(db, data, buyer)
        totals = cart.totals()

        order = Order(
            order_code=generate_order_code(),
            user_id=buyer.id if buyer else None,
            guest_info=data.guest_info.model_dump() if buyer is None else None,
            items=cart.snapshot(),
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            voucher_code=voucher.code if voucher else None,
            total_amount=totals.total,
            status=OrderStatus.PENDING,
            commission_paid=False,
            payment_method=data.payment_method,
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        logger.info(f"Order {order.order_code} placed, total {totals.total}")

        if buyer is not None and referral_code:
            # The order is already committed, a failed attach must not lose it
            try:
                ReferralService.attach_referrer(db, buyer, referral_code)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Order {order.order_code}: referral {referral_code} not attached: {e}")

        return order

    @staticmethod
    def payment_instructions(store: StoreSettings, method: str) -> dict:
        """Where to pay for the chosen method"""
        instructions = {
            "method": method,
            "note": store.payment_instructions,
        }
        if method == "TRANSFER":
            instructions["bank_accounts"] = [account.model_dump() for account in store.bank_accounts]
        elif method == "EWALLET":
            instructions["e_wallets"] = [wallet.model_dump() for wallet in store.e_wallets]
        elif method == "QRIS":
            instructions["qris_url"] = store.qris_url or None
        return instructions

    @staticmethod
    def confirmation_message(order: Order) -> str:
        return (
            f"Halo Admin, saya sudah melakukan pesanan dengan ID: {order.order_code}. Mohon diproses.\n"
            f"Total: {format_rupiah(order.total_amount)}\n"
            f"Metode: {order.payment_method}"
        )

    @staticmethod
    def confirmation_link(store: StoreSettings, order: Order) -> Optional[str]:
        """WhatsApp link to the store, None when no number is configured"""
        if not store.whatsapp_number:
            return None
        return generate_whatsapp_link(store.whatsapp_number, CheckoutService.confirmation_message(order))
