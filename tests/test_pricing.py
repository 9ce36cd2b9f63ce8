from types import SimpleNamespace

import pytest

from storefront.models.voucher import DiscountType
from storefront.services.pricing import Cart, LineItem, calculate_totals, nominal_discount


def voucher(discount_type, value):
    return SimpleNamespace(discount_type=discount_type, discount_value=value)


def product(product_id, price, discount_price=None, cost_price=0, name=None):
    return SimpleNamespace(
        id=product_id,
        name=name or f"Produk {product_id}",
        price=price,
        discount_price=discount_price,
        cost_price=cost_price,
    )


@pytest.mark.parametrize("subtotal", [0, 1, 199, 30000, 150000])
@pytest.mark.parametrize("terms", [
    voucher(DiscountType.PERCENTAGE, 10),
    voucher(DiscountType.PERCENTAGE, 100),
    voucher(DiscountType.FIXED, 5000),
    voucher(DiscountType.FIXED, 1000000),
])
def test_discount_is_clamped_to_subtotal(subtotal, terms):
    totals = calculate_totals([LineItem(unit_price=subtotal)], terms)

    assert totals.subtotal == subtotal
    assert totals.discount_amount == min(nominal_discount(subtotal, terms), subtotal)
    assert totals.total == subtotal - totals.discount_amount
    assert totals.total >= 0


def test_percentage_discount_rounds_down():
    totals = calculate_totals([LineItem(unit_price=199)], voucher(DiscountType.PERCENTAGE, 10))

    assert totals.discount_amount == 19
    assert totals.total == 180


def test_fixed_discount_larger_than_subtotal():
    totals = calculate_totals([LineItem(unit_price=30000)], voucher(DiscountType.FIXED, 50000))

    assert totals.discount_amount == 30000
    assert totals.total == 0


def test_no_voucher_means_no_discount():
    items = [
        LineItem(unit_price=50000, quantity=2),
        LineItem(unit_price=80000, discount_unit_price=60000),
    ]
    totals = calculate_totals(items)

    assert totals.subtotal == 160000
    assert totals.discount_amount == 0
    assert totals.total == 160000


def test_empty_cart_totals_zero():
    totals = calculate_totals([], voucher(DiscountType.FIXED, 10000))

    assert (totals.subtotal, totals.discount_amount, totals.total) == (0, 0, 0)


def test_discounted_unit_price_is_used():
    line = LineItem(unit_price=100000, discount_unit_price=75000, quantity=3)

    assert line.effective_unit_price == 75000
    assert line.line_total == 225000


def test_cart_ignores_product_already_added():
    cart = Cart()

    assert cart.add(product(1, 50000)) is True
    assert cart.add(product(1, 50000), quantity=3) is False
    assert len(cart) == 1
    assert cart.lines[0].quantity == 1


def test_cart_rejects_non_positive_quantity():
    cart = Cart()

    with pytest.raises(ValueError):
        cart.add(product(1, 50000), quantity=0)
    assert len(cart) == 0


def test_applying_voucher_replaces_previous_one():
    cart = Cart()
    cart.add(product(1, 100000))

    cart.apply_voucher(voucher(DiscountType.FIXED, 30000))
    cart.apply_voucher(voucher(DiscountType.PERCENTAGE, 10))

    assert cart.totals().discount_amount == 10000


def test_cart_remove_and_clear():
    cart = Cart()
    cart.add(product(1, 100000))
    cart.add(product(2, 20000))
    cart.apply_voucher(voucher(DiscountType.FIXED, 5000))

    cart.remove(1)
    assert 1 not in cart
    assert cart.totals().subtotal == 20000

    cart.clear()
    assert len(cart) == 0
    assert cart.voucher is None


def test_cart_snapshot_records_effective_price_and_cost():
    cart = Cart()
    cart.add(product(7, 100000, discount_price=80000, cost_price=30000, name="E-book Python"), quantity=2)

    assert cart.snapshot() == [{
        "product_id": 7,
        "product_name": "E-book Python",
        "quantity": 2,
        "price": 80000,
        "cost_price": 30000,
    }]
