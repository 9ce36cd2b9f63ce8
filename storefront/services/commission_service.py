"""
Commission Service
Profit-based affiliate commission on completed orders
"""
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_FLOOR
from typing import Callable, Iterable, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.exceptions import CommissionError
from storefront.models.commission import CommissionLog
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.user import Profile
from storefront.services.settings_service import SettingsService
from storefront.utils.helpers import format_product_name
from storefront.utils.persistence import atomic_increment, compare_and_set

logger = logging.getLogger(__name__)


class CommissionStatus:
    PAID = "paid"          # balance credited, log written, flag set
    ZERO = "zero"          # nothing payable, flag set
    SKIPPED = "skipped"    # nothing written


@dataclass
class CommissionResult:
    status: str
    amount: int = 0
    reason: Optional[str] = None
    affiliate_id: Optional[int] = None
    net_profit: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def _skip(reason: str) -> CommissionResult:
    return CommissionResult(status=CommissionStatus.SKIPPED, reason=reason)


def calculate_net_profit(
    items: Iterable[dict],
    discount_amount: int,
    current_cost: Callable[[int], int]
) -> int:
    """
    Net profit of an order: sell - cost - voucher discount, floored at 0

    Args:
        items: Order item snapshots {product_id, quantity, price, cost_price}
        discount_amount: Voucher discount on the order
        current_cost: Lookup of a product's current cost price, used when the
            snapshot has no cost (orders placed before costs were recorded)
    """
    total_sell = 0
    total_cost = 0
    for item in items:
        quantity = int(item.get("quantity") or 0)
        unit_price = int(item.get("price") or 0)
        unit_cost = int(item.get("cost_price") or 0)
        if unit_cost == 0 and item.get("product_id") is not None:
            unit_cost = int(current_cost(item["product_id"]) or 0)

        total_sell += unit_price * quantity
        total_cost += unit_cost * quantity

    gross_profit = total_sell - total_cost
    return max(0, gross_profit - int(discount_amount or 0))


def calculate_commission(net_profit: int, rate) -> int:
    """floor(net_profit * rate / 100)"""
    if net_profit <= 0 or rate is None:
        return 0
    value = Decimal(net_profit) * Decimal(str(rate)) / Decimal(100)
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def describe_items(items: Iterable[dict]) -> str:
    return ", ".join(
        f"{format_product_name(item.get('product_name'))} x{item.get('quantity') or 1}" for item in items
    )


class CommissionService:
    """Service for affiliate commission operations"""

    @staticmethod
    def current_cost_lookup(db: Session) -> Callable[[int], int]:
        """Cost price of a product as it is now, 0 if it no longer exists"""
        def lookup(product_id: int) -> int:
            product = db.query(Product).filter(Product.id == product_id).first()
            if product is None:
                return 0
            logger.info(f"Using current cost price of product {product_id} for a legacy order item")
            return product.cost_price or 0
        return lookup

    @staticmethod
    def process_order_commission(db: Session, order: Order) -> CommissionResult:
        """
        Credit the buyer's referrer for a completed order, at most once

        The order is claimed with a conditional update on commission_paid in
        the same transaction as the balance increment and the log row, so a
        failure leaves the order unclaimed and retryable, and a concurrent
        run for the same order credits nothing.

        Raises:
            CommissionError: reading the inputs or persisting the payout
                failed (rolled back)
        """
        if order.commission_paid:
            return _skip("already_paid")

        order_id = order.id
        try:
            buyer = order.user
            if buyer is None:
                return _skip("no_buyer")

            if not buyer.referred_by:
                return _skip("no_referrer")

            referrer = db.query(Profile).filter(Profile.affiliate_code == buyer.referred_by).first()
            if referrer is None:
                logger.info(f"Order {order_id}: referral code {buyer.referred_by} matches no affiliate")
                return _skip("referrer_not_found")

            rate = SettingsService.get_commission_rate(db)
            if not rate or rate <= 0:
                return _skip("rate_disabled")

            net_profit = calculate_net_profit(
                order.items or [],
                order.discount_amount,
                CommissionService.current_cost_lookup(db)
            )
            commission = calculate_commission(net_profit, rate)

            claimed = compare_and_set(db, Order, order_id, "commission_paid", False, True)
            if not claimed:
                db.rollback()
                logger.info(f"Order {order_id}: commission already claimed")
                return _skip("already_paid")

            if commission > 0:
                if not atomic_increment(db, Profile, referrer.id, "balance", commission):
                    raise CommissionError(order_id, f"affiliate {referrer.id} not found")
                db.add(CommissionLog(
                    affiliate_id=referrer.id,
                    order_id=order_id,
                    amount=commission,
                    source_buyer=buyer.full_name or buyer.email,
                    products=describe_items(order.items or []),
                ))

            db.commit()
        except CommissionError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Order {order_id}: commission failed: {e}")
            raise CommissionError(order_id, str(e)) from e

        db.refresh(order)

        if commission > 0:
            logger.info(f"Order {order_id}: credited {commission} to affiliate {referrer.id} (net profit {net_profit}, rate {rate}%)")
            return CommissionResult(
                status=CommissionStatus.PAID,
                amount=commission,
                affiliate_id=referrer.id,
                net_profit=net_profit,
            )

        logger.info(f"Order {order_id}: no commission payable (net profit {net_profit})")
        return CommissionResult(
            status=CommissionStatus.ZERO,
            affiliate_id=referrer.id,
            net_profit=net_profit,
        )
