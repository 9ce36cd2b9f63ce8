"""
Models package - Import all models here for easy access
"""
from storefront.models.user import Profile, UserRole
from storefront.models.product import Product
from storefront.models.voucher import Voucher, DiscountType
from storefront.models.order import Order, OrderStatus
from storefront.models.commission import CommissionLog
from storefront.models.payout import Payout
from storefront.models.setting import StoreSetting

__all__ = [
    # Profile / Affiliate
    "Profile",
    "UserRole",

    # Catalog
    "Product",
    "Voucher",
    "DiscountType",

    # Orders
    "Order",
    "OrderStatus",

    # Affiliate program
    "CommissionLog",
    "Payout",

    # Settings
    "StoreSetting",
]
