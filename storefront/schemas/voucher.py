"""
Voucher Pydantic schemas
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from storefront.models.voucher import DiscountType
from storefront.schemas.common import ORMConfig


class VoucherCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    discount_type: str = Field(..., description="percentage or fixed")
    discount_value: int

    @field_validator('code')
    @classmethod
    def normalize_code(cls, v):
        # Stored uppercase without whitespace
        code = ''.join(v.split()).upper()
        if not code:
            raise ValueError('Voucher code must not be blank')
        return code

    @field_validator('discount_type')
    @classmethod
    def validate_type(cls, v):
        if v not in DiscountType.ALL:
            raise ValueError(f"discount_type must be one of {', '.join(DiscountType.ALL)}")
        return v

    @model_validator(mode='after')
    def validate_value(self):
        if self.discount_value <= 0:
            raise ValueError('discount_value must be greater than 0')
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError('percentage discount_value must not exceed 100')
        return self


class VoucherResponse(BaseModel):
    id: int
    code: str
    discount_type: str
    discount_value: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ORMConfig
