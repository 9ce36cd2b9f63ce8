"""
Product Pydantic schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from storefront.schemas.common import ORMConfig


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    price: int = Field(..., ge=0)
    discount_price: Optional[int] = Field(None, ge=0)
    cost_price: int = Field(0, ge=0)
    image_url: Optional[str] = None
    file_url: Optional[str] = None
    is_active: bool = True

    @field_validator('discount_price')
    @classmethod
    def zero_discount_is_none(cls, v):
        # 0 means "no discount price"
        return v or None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    discount_price: Optional[int] = Field(None, ge=0)
    cost_price: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    file_url: Optional[str] = None
    is_active: Optional[bool] = None


class ProductResponse(BaseModel):
    """Product as shown in the storefront"""
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: int
    discount_price: Optional[int] = None
    effective_price: int
    image_url: Optional[str] = None
    file_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ORMConfig


class AdminProductResponse(ProductResponse):
    """Product with cost price, admin only"""
    cost_price: int = 0
