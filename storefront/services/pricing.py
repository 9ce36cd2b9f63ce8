"""
Checkout totals and the in-memory cart

calculate_totals is pure: no database access, no side effects. Voucher
values are validated where vouchers are created, not here.
"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, Optional, List, Protocol, Dict

from storefront.models.voucher import DiscountType


class VoucherTerms(Protocol):
    """Anything with a discount type and value (Voucher rows included)"""
    discount_type: str
    discount_value: int


@dataclass
class LineItem:
    unit_price: int
    quantity: int = 1
    discount_unit_price: Optional[int] = None

    @property
    def effective_unit_price(self) -> int:
        if self.discount_unit_price is not None:
            return self.discount_unit_price
        return self.unit_price

    @property
    def line_total(self) -> int:
        return self.effective_unit_price * self.quantity


@dataclass(frozen=True)
class Totals:
    subtotal: int
    discount_amount: int
    total: int


def nominal_discount(subtotal: int, voucher: Optional[VoucherTerms]) -> int:
    """Discount a voucher asks for, before clamping to the subtotal"""
    if voucher is None:
        return 0
    if voucher.discount_type == DiscountType.PERCENTAGE:
        return int((subtotal * voucher.discount_value) // 100)
    if voucher.discount_type == DiscountType.FIXED:
        return int(voucher.discount_value)
    return 0


def calculate_totals(items: Iterable[LineItem], voucher: Optional[VoucherTerms] = None) -> Totals:
    """
    Subtotal, discount and total for a cart with at most one voucher

    The discount never exceeds the subtotal, so the total is never negative.
    """
    subtotal = sum(item.line_total for item in items)
    discount = min(nominal_discount(subtotal, voucher), subtotal)
    return Totals(subtotal=subtotal, discount_amount=discount, total=subtotal - discount)


@dataclass
class CartLine(LineItem):
    product_id: int = 0
    product_name: str = ""
    cost_price: int = 0

    def snapshot(self) -> dict:
        """Item as stored on the order"""
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "price": self.effective_unit_price,
            "cost_price": self.cost_price,
        }


class Cart:
    """Cart held for the duration of one checkout, one voucher slot"""

    def __init__(self):
        self._lines: Dict[int, CartLine] = OrderedDict()
        self.voucher: Optional[VoucherTerms] = None

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: int) -> bool:
        return product_id in self._lines

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def add(self, product, quantity: int = 1) -> bool:
        """
        Add a product. Digital goods are bought once, so re-adding a product
        that is already in the cart leaves the cart unchanged.

        Returns:
            True if the product was added
        """
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        if product.id in self._lines:
            return False
        self._lines[product.id] = CartLine(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            discount_unit_price=product.discount_price,
            cost_price=product.cost_price or 0,
            quantity=quantity,
        )
        return True

    def remove(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()
        self.voucher = None

    def apply_voucher(self, voucher: Optional[VoucherTerms]) -> None:
        """Replace the current voucher, vouchers never stack"""
        self.voucher = voucher

    def totals(self) -> Totals:
        return calculate_totals(self.lines, self.voucher)

    def snapshot(self) -> List[dict]:
        return [line.snapshot() for line in self.lines]
