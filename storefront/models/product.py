"""
Product model - SQLAlchemy ORM
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, BigInteger, Text
from sqlalchemy.sql import func
from storefront.core.database import Base


class Product(Base):
    """Digital product (software, e-book, template)"""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True, index=True)

    # Prices in Rupiah
    price = Column(BigInteger, nullable=False)
    discount_price = Column(BigInteger, nullable=True)  # If set, this is the active price
    cost_price = Column(BigInteger, default=0, nullable=False)

    image_url = Column(Text, nullable=True)
    file_url = Column(Text, nullable=True)  # Link to download or access
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, price={self.price})>"

    @property
    def effective_price(self) -> int:
        """Price the buyer pays per unit"""
        return self.discount_price if self.discount_price is not None else self.price
