"""
Order Service
Admin order handling and the dashboard figures
"""
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from typing import Optional
import logging

from storefront.core.exceptions import CommissionError
from storefront.models.order import Order, OrderStatus
from storefront.models.product import Product
from storefront.models.user import Profile
from storefront.services.commission_service import CommissionService

logger = logging.getLogger(__name__)

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class OrderService:

    @staticmethod
    def orders_query(db: Session, status_filter: Optional[str] = None):
        query = db.query(Order).options(joinedload(Order.user))
        if status_filter:
            query = query.filter(Order.status == status_filter)
        return query.order_by(Order.created_at.desc(), Order.id.desc())

    @staticmethod
    def buyer_orders_query(db: Session, buyer: Profile):
        return (
            db.query(Order)
            .filter(Order.user_id == buyer.id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )

    @staticmethod
    def update_status(db: Session, order: Order, new_status: str) -> dict:
        """
        Set an order's status, then pay commission if it was completed

        The status is committed on its own. A commission failure is
        returned alongside it and leaves the order retryable.

        Returns:
            {"status": ..., "commission": result dict, error dict or None}
        """
        if new_status not in OrderStatus.ALL:
            raise ValueError(f"Unknown order status: {new_status}")

        order.status = new_status
        db.commit()
        db.refresh(order)
        logger.info(f"Order {order.id} status set to {new_status}")

        commission = None
        if new_status == OrderStatus.COMPLETED:
            try:
                commission = CommissionService.process_order_commission(db, order).as_dict()
            except CommissionError as e:
                logger.error(f"Commission for order {order.id} not applied: {e.reason}")
                db.refresh(order)
                commission = {"status": "failed", "error": str(e)}

        return {"status": order.status, "commission": commission}

    @staticmethod
    def dashboard_stats(db: Session) -> dict:
        """Totals plus completed sales per weekday (Mon..Sun)"""
        completed = db.query(Order).filter(Order.status == OrderStatus.COMPLETED)

        revenue = (
            db.query(func.coalesce(func.sum(Order.total_amount), 0))
            .filter(Order.status == OrderStatus.COMPLETED)
            .scalar()
        )

        sales_by_day = {day: 0 for day in WEEKDAYS}
        for (created_at,) in completed.with_entities(Order.created_at).all():
            if created_at is not None:
                sales_by_day[WEEKDAYS[created_at.weekday()]] += 1

        return {
            "total_users": db.query(func.count(Profile.id)).scalar() or 0,
            "total_products": db.query(func.count(Product.id)).scalar() or 0,
            "completed_orders": completed.count(),
            "revenue": int(revenue or 0),
            "sales_by_day": [{"day": day, "sales": count} for day, count in sales_by_day.items()],
        }
