"""
Order model - SQLAlchemy ORM
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, BigInteger, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storefront.core.database import Base


class OrderStatus:
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PENDING, PROCESSING, COMPLETED, CANCELLED)


class Order(Base):
    """Checkout order with an immutable snapshot of its items"""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_code = Column(String, unique=True, nullable=False, index=True)

    # Buyer, null for guest checkout
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    guest_info = Column(JSON, nullable=True)

    # [{product_id, product_name, quantity, price, cost_price}]
    items = Column(JSON, nullable=False, default=list)

    subtotal = Column(BigInteger, nullable=False, default=0)
    discount_amount = Column(BigInteger, nullable=False, default=0)
    voucher_code = Column(String, nullable=True)
    total_amount = Column(BigInteger, nullable=False)

    status = Column(String, nullable=False, default=OrderStatus.PENDING, index=True)
    commission_paid = Column(Boolean, nullable=False, default=False)
    payment_method = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("Profile", back_populates="orders")

    def __repr__(self):
        return f"<Order(id={self.id}, code={self.order_code}, status={self.status}, total={self.total_amount})>"
