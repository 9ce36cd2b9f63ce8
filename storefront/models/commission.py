"""
Commission log model - SQLAlchemy ORM
"""
from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.core.database import Base


class CommissionLog(Base):
    """Append-only audit row, one per commissioned order"""

    __tablename__ = "commission_logs"
    __table_args__ = (
        UniqueConstraint("order_id", name="uq_commission_logs_order"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    affiliate_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)

    amount = Column(BigInteger, nullable=False)
    source_buyer = Column(String, nullable=True)
    products = Column(Text, nullable=True)  # Display string

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    affiliate = relationship("Profile", back_populates="commissions", foreign_keys=[affiliate_id])

    def __repr__(self):
        return f"<CommissionLog(id={self.id}, affiliate_id={self.affiliate_id}, order_id={self.order_id}, amount={self.amount})>"
