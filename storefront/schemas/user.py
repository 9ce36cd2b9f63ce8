"""
Profile Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from storefront.schemas.common import ORMConfig


# ============ Request Schemas ============

class UserRegister(BaseModel):
    """Schema for account registration"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(None, max_length=100)
    referral_code: Optional[str] = None  # Code of person who referred them


class UserLogin(BaseModel):
    """Schema for login"""
    email: EmailStr
    password: str = Field(..., min_length=6)


class UpdateProfile(BaseModel):
    """Schema for updating profile and bank details"""
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    bank_name: Optional[str] = Field(None, max_length=100)
    bank_number: Optional[str] = Field(None, max_length=50)
    bank_holder: Optional[str] = Field(None, max_length=100)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        # Remove non-numeric characters
        cleaned = ''.join(filter(str.isdigit, v))
        if not cleaned:
            raise ValueError('Phone number must contain digits')
        return cleaned


# ============ Response Schemas ============

class ProfileResponse(BaseModel):
    """Profile as returned to its owner"""
    id: int
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    affiliate_code: Optional[str] = None
    referred_by: Optional[str] = None
    balance: int = 0
    bank_name: Optional[str] = None
    bank_number: Optional[str] = None
    bank_holder: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ORMConfig


class ReferredProfile(BaseModel):
    """Public view of a referred buyer"""
    id: int
    full_name: Optional[str] = None
    email: str
    created_at: Optional[datetime] = None

    model_config = ORMConfig
