import pytest
from sqlalchemy.exc import OperationalError

from conftest import item
from storefront.core.database import get_session_local
from storefront.core.exceptions import CommissionError
from storefront.models.commission import CommissionLog
from storefront.models.order import Order, OrderStatus
from storefront.services import commission_service
from storefront.services.commission_service import (
    CommissionService,
    CommissionStatus,
    calculate_commission,
    calculate_net_profit,
)
from storefront.services.order_service import OrderService
from storefront.services.settings_service import SettingsService


@pytest.fixture
def affiliate(make_profile):
    return make_profile("affiliate@digistore.id", affiliate_code="AFF001")


@pytest.fixture
def buyer(make_profile, affiliate):
    return make_profile("buyer@digistore.id", referred_by=affiliate.affiliate_code)


def log_count(db):
    return db.query(CommissionLog).count()


def test_profit_based_commission(db, affiliate, buyer, make_product, make_order, commission_rate):
    commission_rate(20)
    product = make_product(price=100000, cost_price=40000)
    order = make_order(buyer, [item(product)])

    result = CommissionService.process_order_commission(db, order)

    assert result.status == CommissionStatus.PAID
    assert result.amount == 12000
    assert result.net_profit == 60000
    db.refresh(affiliate)
    db.refresh(order)
    assert affiliate.balance == 12000
    assert order.commission_paid is True

    log = db.query(CommissionLog).one()
    assert log.affiliate_id == affiliate.id
    assert log.order_id == order.id
    assert log.amount == 12000
    assert log.source_buyer == buyer.full_name
    assert log.products == "Template CV x1"


def test_legacy_item_falls_back_to_current_cost(db, affiliate, buyer, make_product, make_order, commission_rate):
    commission_rate(10)
    product = make_product(price=100000, cost_price=25000)
    order = make_order(buyer, [item(product, cost_price=0)])

    result = CommissionService.process_order_commission(db, order)

    assert result.net_profit == 75000
    assert result.amount == 7500


def test_voucher_discount_reduces_commissionable_profit(db, affiliate, buyer, make_product, make_order, commission_rate):
    commission_rate(20)
    product = make_product(price=100000, cost_price=40000)
    order = make_order(buyer, [item(product)], discount_amount=10000)

    result = CommissionService.process_order_commission(db, order)

    assert result.net_profit == 50000
    assert result.amount == 10000


def test_second_run_pays_nothing(db, affiliate, buyer, make_product, make_order, commission_rate):
    commission_rate(20)
    order = make_order(buyer, [item(make_product())])

    CommissionService.process_order_commission(db, order)
    again = CommissionService.process_order_commission(db, order)

    assert again.status == CommissionStatus.SKIPPED
    assert again.reason == "already_paid"
    db.refresh(affiliate)
    assert affiliate.balance == 12000
    assert log_count(db) == 1


def test_stale_order_copy_cannot_pay_twice(db, affiliate, buyer, make_product, make_order, commission_rate):
    commission_rate(20)
    order = make_order(buyer, [item(make_product())])

    other_session = get_session_local()()
    try:
        stale = other_session.get(Order, order.id)
        assert stale.commission_paid is False

        CommissionService.process_order_commission(db, order)
        result = CommissionService.process_order_commission(other_session, stale)
    finally:
        other_session.close()

    assert result.status == CommissionStatus.SKIPPED
    db.refresh(affiliate)
    assert affiliate.balance == 12000
    assert log_count(db) == 1


def test_zero_commission_still_marks_order(db, affiliate, buyer, make_product, make_order, commission_rate):
    commission_rate(20)
    product = make_product(price=50000, cost_price=50000)
    order = make_order(buyer, [item(product)])

    result = CommissionService.process_order_commission(db, order)

    assert result.status == CommissionStatus.ZERO
    db.refresh(order)
    db.refresh(affiliate)
    assert order.commission_paid is True
    assert affiliate.balance == 0
    assert log_count(db) == 0


@pytest.mark.parametrize("case", ["guest", "no_referrer", "unknown_code", "rate_zero"])
def test_skip_conditions_change_nothing(case, db, affiliate, make_profile, make_product, make_order, commission_rate):
    commission_rate(0 if case == "rate_zero" else 20)
    referred_by = {"no_referrer": None, "unknown_code": "NOPE99"}.get(case, affiliate.affiliate_code)
    buyer = None if case == "guest" else make_profile("buyer@digistore.id", referred_by=referred_by)
    order = make_order(buyer, [item(make_product())])

    result = CommissionService.process_order_commission(db, order)

    assert result.status == CommissionStatus.SKIPPED
    db.refresh(order)
    db.refresh(affiliate)
    assert order.commission_paid is False
    assert affiliate.balance == 0
    assert log_count(db) == 0


def test_failed_write_leaves_order_retryable(db, affiliate, buyer, make_product, make_order, commission_rate, monkeypatch):
    commission_rate(20)
    order = make_order(buyer, [item(make_product())])

    def broken_increment(*args, **kwargs):
        raise OperationalError("UPDATE profiles", {}, Exception("database is locked"))

    monkeypatch.setattr(commission_service, "atomic_increment", broken_increment)

    with pytest.raises(CommissionError) as exc_info:
        CommissionService.process_order_commission(db, order)
    assert exc_info.value.order_id == order.id

    db.refresh(order)
    db.refresh(affiliate)
    assert order.commission_paid is False
    assert affiliate.balance == 0
    assert log_count(db) == 0

    monkeypatch.undo()
    result = CommissionService.process_order_commission(db, order)
    assert result.amount == 12000


def test_unreadable_settings_fail_commission_not_status(db, affiliate, buyer, make_product, make_order, commission_rate, monkeypatch):
    commission_rate(20)
    order = make_order(buyer, [item(make_product())], status=OrderStatus.PROCESSING)

    def missing_settings(*args, **kwargs):
        raise OperationalError("SELECT settings", {}, Exception("no such table: settings"))

    monkeypatch.setattr(SettingsService, "get_commission_rate", missing_settings)

    result = OrderService.update_status(db, order, OrderStatus.COMPLETED)

    assert result["status"] == OrderStatus.COMPLETED
    assert result["commission"]["status"] == "failed"
    assert "no such table" in result["commission"]["error"]

    db.refresh(order)
    db.refresh(affiliate)
    assert order.status == OrderStatus.COMPLETED
    assert order.commission_paid is False
    assert affiliate.balance == 0

    monkeypatch.undo()
    retried = CommissionService.process_order_commission(db, order)
    assert retried.amount == 12000


def test_net_profit_never_negative():
    items = [{"product_id": 1, "quantity": 1, "price": 10000, "cost_price": 8000}]

    assert calculate_net_profit(items, 5000, lambda product_id: 0) == 0


def test_commission_rounds_down():
    assert calculate_commission(33333, 10) == 3333
    assert calculate_commission(10001, 12.5) == 1250
    assert calculate_commission(0, 50) == 0
