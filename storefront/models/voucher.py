"""
Voucher model - SQLAlchemy ORM
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, BigInteger
from sqlalchemy.sql import func
from storefront.core.database import Base


class DiscountType:
    PERCENTAGE = "percentage"
    FIXED = "fixed"

    ALL = (PERCENTAGE, FIXED)


class Voucher(Base):
    """Discount code, applied at most once per order"""

    __tablename__ = "vouchers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    code = Column(String, unique=True, nullable=False, index=True)  # Stored uppercase
    discount_type = Column(String, nullable=False)  # percentage, fixed
    discount_value = Column(BigInteger, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Voucher(code={self.code}, type={self.discount_type}, value={self.discount_value})>"
