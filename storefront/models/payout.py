"""
Payout model - SQLAlchemy ORM
"""
from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.core.database import Base


class Payout(Base):
    """Manual affiliate payout recorded when an admin resets a balance"""

    __tablename__ = "payouts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    affiliate_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)

    amount = Column(BigInteger, nullable=False)
    status = Column(String(255), nullable=False, default="paid")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    affiliate = relationship("Profile", back_populates="payouts")

    def __repr__(self):
        return f"<Payout(id={self.id}, affiliate_id={self.affiliate_id}, amount={self.amount}, status={self.status})>"
