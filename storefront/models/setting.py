"""
Store settings model - single key/value record
"""
from sqlalchemy import Column, String, JSON
from storefront.core.database import Base


class StoreSetting(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<StoreSetting(key={self.key})>"
