"""
Profile model - SQLAlchemy ORM
A profile is both a customer and, once it has an affiliate code, an affiliate
"""
from sqlalchemy import Column, Integer, String, BigInteger, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.core.database import Base


class UserRole:
    ADMIN = "admin"
    USER = "user"


class Profile(Base):
    """Profile model for authentication, affiliate balance and payout details"""

    __tablename__ = "profiles"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Basic Info
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    role = Column(String, default=UserRole.USER, nullable=False)

    # Referral System
    affiliate_code = Column(String, unique=True, nullable=True, index=True)
    referred_by = Column(String, nullable=True, index=True)  # Code of referrer

    # Accrued commission
    balance = Column(BigInteger, default=0, nullable=False)

    # Bank details for payouts
    bank_name = Column(String, nullable=True)
    bank_number = Column(String, nullable=True)
    bank_holder = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="user")
    commissions = relationship("CommissionLog", back_populates="affiliate", foreign_keys="CommissionLog.affiliate_id")
    payouts = relationship("Payout", back_populates="affiliate")

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_affiliate(self) -> bool:
        return bool(self.affiliate_code)

    @property
    def has_bank_details(self) -> bool:
        return bool(self.bank_name and self.bank_number and self.bank_holder)
