"""
Admin order management API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from storefront.core.database import get_db
from storefront.core.dependencies import require_admin
from storefront.models.order import Order, OrderStatus
from storefront.models.user import Profile
from storefront.schemas.order import OrderResponse, OrderStatusUpdate
from storefront.services.order_service import OrderService
from storefront.utils.pagination import paginate, get_pagination_params
from storefront.utils.responses import paginated_response

router = APIRouter()


@router.get("/admin/orders", response_model=dict)
async def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    All orders, newest first

    - **status**: Only orders with this status
    """
    if status_filter and status_filter not in OrderStatus.ALL:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Status must be one of {', '.join(OrderStatus.ALL)}"
        )

    page, per_page = get_pagination_params(page, per_page)
    items, total = paginate(OrderService.orders_query(db, status_filter), page, per_page)

    data = []
    for order in items:
        order_dict = OrderResponse.model_validate(order).model_dump()
        order_dict["buyer"] = {
            "full_name": order.user.full_name,
            "email": order.user.email,
        } if order.user else None
        data.append(order_dict)

    return paginated_response(data, page, per_page, total)


@router.patch("/admin/orders/{order_id}/status", response_model=dict)
async def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Change an order's status

    Completing an order credits the referring affiliate. A commission
    failure is returned under commission.error, the status change stands.
    """
    if status_data.status not in OrderStatus.ALL:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Status must be one of {', '.join(OrderStatus.ALL)}"
        )

    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found"
        )

    result = OrderService.update_status(db, order, status_data.status)

    return {
        "ok": True,
        "message": "Order status updated",
        "data": {
            "order": OrderResponse.model_validate(order).model_dump(),
            "commission": result["commission"]
        }
    }
