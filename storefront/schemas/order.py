"""
Cart, checkout and order Pydantic schemas
"""
from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List
from datetime import datetime
from storefront.schemas.common import ORMConfig


PAYMENT_METHODS = ("TRANSFER", "EWALLET", "QRIS")


# ============ Request Schemas ============

class CartItemIn(BaseModel):
    product_id: int
    quantity: int = Field(1, description="Units, usually 1 for digital products")


class CartQuoteRequest(BaseModel):
    items: List[CartItemIn] = Field(default_factory=list)
    voucher_code: Optional[str] = None


class GuestInfo(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=6, max_length=20)
    email: Optional[EmailStr] = None


class CheckoutRequest(BaseModel):
    items: List[CartItemIn] = Field(default_factory=list)
    voucher_code: Optional[str] = None
    payment_method: str = Field("TRANSFER", description="TRANSFER, EWALLET or QRIS")
    guest_info: Optional[GuestInfo] = None


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., description="pending, processing, completed or cancelled")


# ============ Response Schemas ============

class OrderItemSnapshot(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price: int
    cost_price: int = 0


class CartQuoteResponse(BaseModel):
    subtotal: int
    discount_amount: int
    total: int
    voucher_code: Optional[str] = None
    voucher_valid: bool = False


class OrderResponse(BaseModel):
    id: int
    order_code: str
    user_id: Optional[int] = None
    guest_info: Optional[dict] = None
    items: List[OrderItemSnapshot]
    subtotal: int
    discount_amount: int
    voucher_code: Optional[str] = None
    total_amount: int
    status: str
    commission_paid: bool
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ORMConfig
