"""
Commission and payout Pydantic schemas
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from storefront.schemas.common import ORMConfig


class CommissionLogResponse(BaseModel):
    id: int
    affiliate_id: int
    order_id: int
    amount: int
    source_buyer: Optional[str] = None
    products: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ORMConfig


class PayoutResponse(BaseModel):
    id: int
    affiliate_id: int
    amount: int
    status: str
    created_at: Optional[datetime] = None

    model_config = ORMConfig
