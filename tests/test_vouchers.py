import pytest
from pydantic import ValidationError

from storefront.models.voucher import DiscountType, Voucher
from storefront.schemas.voucher import VoucherCreate
from storefront.services.voucher_service import VoucherService, DuplicateVoucherError


def add_voucher(db, code, discount_type=DiscountType.PERCENTAGE, value=10, is_active=True):
    voucher = Voucher(code=code, discount_type=discount_type, discount_value=value, is_active=is_active)
    db.add(voucher)
    db.commit()
    return voucher


def test_lookup_normalizes_input(db):
    add_voucher(db, "HEMAT10")

    voucher = VoucherService.find_active_voucher(db, "  hemat10 ")

    assert voucher is not None
    assert voucher.code == "HEMAT10"


def test_lookup_rejects_inactive_unknown_and_blank(db):
    add_voucher(db, "LAMA", is_active=False)

    assert VoucherService.find_active_voucher(db, "LAMA") is None
    assert VoucherService.find_active_voucher(db, "TIDAKADA") is None
    assert VoucherService.find_active_voucher(db, "   ") is None
    assert VoucherService.find_active_voucher(db, None) is None


def test_create_strips_whitespace_and_uppercases():
    data = VoucherCreate(code=" pro mo 5 ", discount_type="fixed", discount_value=5000)

    assert data.code == "PROMO5"


@pytest.mark.parametrize("discount_type,value", [
    ("percentage", 0),
    ("percentage", 101),
    ("fixed", 0),
    ("fixed", -1000),
    ("bogus", 10),
])
def test_create_rejects_invalid_values(discount_type, value):
    with pytest.raises(ValidationError):
        VoucherCreate(code="X", discount_type=discount_type, discount_value=value)


def test_duplicate_code_is_rejected(db):
    VoucherService.create_voucher(db, VoucherCreate(code="HEMAT", discount_type="fixed", discount_value=1000))

    with pytest.raises(DuplicateVoucherError):
        VoucherService.create_voucher(db, VoucherCreate(code="hemat", discount_type="percentage", discount_value=5))


def test_toggle_flips_active_flag(db):
    voucher = add_voucher(db, "FLIP")

    VoucherService.toggle_voucher(db, voucher)
    assert VoucherService.find_active_voucher(db, "FLIP") is None

    VoucherService.toggle_voucher(db, voucher)
    assert VoucherService.find_active_voucher(db, "FLIP") is not None
