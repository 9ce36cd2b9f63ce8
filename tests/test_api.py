import pytest

from conftest import auth_headers
from storefront.core.exceptions import CommissionError
from storefront.models.user import Profile
from storefront.services.commission_service import CommissionService


@pytest.fixture
def admin_headers(client):
    return auth_headers(client, "admin@digistore.id", full_name="Admin Toko")


@pytest.fixture
def store(client, admin_headers):
    """Settings, one product and one voucher created through the admin API"""
    client.put("/api/v1/admin/settings", headers=admin_headers, json={
        "store_name": "DigiStore",
        "whatsapp_number": "0812-3456-7890",
        "affiliate_commission_rate": 10,
        "bank_accounts": [{"bank": "BCA", "number": "1234567890", "name": "DigiStore"}],
    })
    product = client.post("/api/v1/admin/products", headers=admin_headers, json={
        "name": "Template Undangan Digital",
        "category": "Template",
        "price": 100000,
        "cost_price": 40000,
        "discount_price": 0,
    }).json()["data"]
    client.post("/api/v1/admin/vouchers", headers=admin_headers, json={
        "code": "hemat10",
        "discount_type": "percentage",
        "discount_value": 10,
    })
    return {"product": product}


def test_first_account_is_admin(client):
    first = client.post("/api/v1/auth/register", json={"email": "owner@digistore.id", "password": "rahasia123"})
    second = client.post("/api/v1/auth/register", json={"email": "customer@digistore.id", "password": "rahasia123"})

    assert first.json()["data"]["user"]["role"] == "admin"
    assert second.json()["data"]["user"]["role"] == "user"


def test_duplicate_email_and_bad_login(client):
    client.post("/api/v1/auth/register", json={"email": "owner@digistore.id", "password": "rahasia123"})

    duplicate = client.post("/api/v1/auth/register", json={"email": "owner@digistore.id", "password": "lainnya123"})
    bad_login = client.post("/api/v1/auth/login", json={"email": "owner@digistore.id", "password": "salah12345"})

    assert duplicate.status_code == 400
    assert bad_login.status_code == 401


def test_refresh_token(client):
    tokens = client.post(
        "/api/v1/auth/register", json={"email": "owner@digistore.id", "password": "rahasia123"}
    ).json()["data"]["tokens"]

    refreshed = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    rejected = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})

    assert refreshed.status_code == 200
    assert refreshed.json()["data"]["access_token"]
    assert rejected.status_code == 401


def test_admin_routes_need_admin(client, admin_headers):
    user_headers = auth_headers(client, "customer@digistore.id")

    assert client.get("/api/v1/admin/vouchers", headers=user_headers).status_code == 403
    assert client.get("/api/v1/admin/vouchers").status_code in (401, 403)


def test_catalog(client, admin_headers, store):
    client.post("/api/v1/admin/products", headers=admin_headers, json={
        "name": "E-book Python", "category": "E-book", "price": 50000, "discount_price": 35000,
    })
    client.post("/api/v1/admin/products", headers=admin_headers, json={
        "name": "Produk Lama", "category": "Arsip", "price": 10000, "is_active": False,
    })

    listed = client.get("/api/v1/products").json()["data"]
    assert [p["name"] for p in listed] == ["E-book Python", "Template Undangan Digital"]
    assert listed[0]["effective_price"] == 35000
    assert "cost_price" not in listed[0]

    assert [p["name"] for p in client.get("/api/v1/products", params={"search": "PYTHON"}).json()["data"]] == ["E-book Python"]
    assert len(client.get("/api/v1/products", params={"category": "Template"}).json()["data"]) == 1
    assert len(client.get("/api/v1/products", params={"category": "All"}).json()["data"]) == 2
    assert client.get("/api/v1/products/categories").json()["data"] == ["All", "E-book", "Template"]

    product = store["product"]
    assert product["discount_price"] is None
    assert client.get(f"/api/v1/products/{product['id']}").status_code == 200
    assert client.get("/api/v1/products/9999").status_code == 404


def test_duplicate_voucher_conflicts(client, admin_headers, store):
    response = client.post("/api/v1/admin/vouchers", headers=admin_headers, json={
        "code": " HEMAT 10 ", "discount_type": "fixed", "discount_value": 5000,
    })

    assert response.status_code == 409


def test_cart_quote(client, store):
    product_id = store["product"]["id"]

    quote = client.post("/api/v1/cart/quote", json={
        "items": [{"product_id": product_id, "quantity": 1}],
        "voucher_code": "hemat10",
    }).json()["data"]
    assert quote == {
        "subtotal": 100000,
        "discount_amount": 10000,
        "total": 90000,
        "voucher_code": "HEMAT10",
        "voucher_valid": True,
    }

    unknown = client.post("/api/v1/cart/quote", json={
        "items": [{"product_id": product_id}],
        "voucher_code": "NGAWUR",
    }).json()["data"]
    assert unknown["voucher_valid"] is False
    assert unknown["total"] == 100000


@pytest.mark.parametrize("payload", [
    {"items": []},
    {"items": [{"product_id": 9999}]},
    {"items": [{"product_id": "PRODUCT", "quantity": 0}]},
    {"items": [{"product_id": "PRODUCT"}], "voucher_code": "NGAWUR"},
    {"items": [{"product_id": "PRODUCT"}], "payment_method": "COD"},
])
def test_invalid_checkout_writes_nothing(client, admin_headers, store, payload):
    payload = dict(payload)
    payload["items"] = [
        {**line, "product_id": store["product"]["id"]} if line["product_id"] == "PRODUCT" else line
        for line in payload["items"]
    ]
    payload["guest_info"] = {"name": "Tamu", "phone": "08123456789"}

    response = client.post("/api/v1/checkout", json=payload)

    assert response.status_code == 400
    orders = client.get("/api/v1/admin/orders", headers=admin_headers).json()
    assert orders["meta"]["total"] == 0


def test_guest_checkout_requires_contact(client, store):
    response = client.post("/api/v1/checkout", json={"items": [{"product_id": store["product"]["id"]}]})

    assert response.status_code == 400


def test_guest_checkout(client, store):
    response = client.post("/api/v1/checkout", json={
        "items": [{"product_id": store["product"]["id"]}],
        "payment_method": "TRANSFER",
        "guest_info": {"name": "Tamu", "phone": "08123456789"},
    })

    assert response.status_code == 201
    data = response.json()["data"]
    order = data["order"]
    assert order["order_code"].startswith("INV-")
    assert len(order["order_code"]) == 12
    assert order["user_id"] is None
    assert order["guest_info"]["name"] == "Tamu"
    assert order["status"] == "pending"
    assert order["commission_paid"] is False
    assert order["items"] == [{
        "product_id": store["product"]["id"],
        "product_name": "Template Undangan Digital",
        "quantity": 1,
        "price": 100000,
        "cost_price": 40000,
    }]
    assert data["payment"]["bank_accounts"][0]["bank"] == "BCA"
    assert data["whatsapp_url"].startswith("https://wa.me/6281234567890?text=")
    assert order["order_code"] in data["whatsapp_url"]


def test_affiliate_flow(client, admin_headers, store):
    affiliate_headers = auth_headers(client, "affiliate@digistore.id", full_name="Rina")
    activated = client.post("/api/v1/users/me/affiliate", headers=affiliate_headers)
    assert activated.status_code == 200
    code = activated.json()["data"]["affiliate_code"]
    assert len(code) == 6
    assert client.post("/api/v1/users/me/affiliate", headers=affiliate_headers).status_code == 409

    buyer_headers = auth_headers(client, "buyer@digistore.id", full_name="Budi", referral_code=code)
    checkout = client.post("/api/v1/checkout", headers=buyer_headers, json={
        "items": [{"product_id": store["product"]["id"]}],
        "voucher_code": "HEMAT10",
        "payment_method": "EWALLET",
    })
    assert checkout.status_code == 201
    order = checkout.json()["data"]["order"]
    assert order["total_amount"] == 90000
    assert order["voucher_code"] == "HEMAT10"

    my_orders = client.get("/api/v1/orders/me", headers=buyer_headers).json()
    assert my_orders["meta"]["total"] == 1

    # (100000 - 40000 - 10000) * 10%
    completed = client.patch(
        f"/api/v1/admin/orders/{order['id']}/status", headers=admin_headers, json={"status": "completed"}
    ).json()["data"]
    assert completed["order"]["status"] == "completed"
    assert completed["order"]["commission_paid"] is True
    assert completed["commission"]["status"] == "paid"
    assert completed["commission"]["amount"] == 5000

    again = client.patch(
        f"/api/v1/admin/orders/{order['id']}/status", headers=admin_headers, json={"status": "completed"}
    ).json()["data"]
    assert again["commission"]["status"] == "skipped"

    me = client.get("/api/v1/users/me", headers=affiliate_headers).json()["data"]
    assert me["balance"] == 5000

    commissions = client.get("/api/v1/users/me/commissions", headers=affiliate_headers).json()
    assert commissions["total_commission"] == 5000
    assert commissions["data"][0]["source_buyer"] == "Budi"

    affiliates = client.get("/api/v1/admin/affiliates", headers=admin_headers).json()["data"]
    assert [a["affiliate_code"] for a in affiliates] == [code]

    payout = client.post(f"/api/v1/admin/affiliates/{me['id']}/payout", headers=admin_headers)
    assert payout.status_code == 200
    assert payout.json()["data"]["amount"] == 5000
    assert client.get("/api/v1/users/me", headers=affiliate_headers).json()["data"]["balance"] == 0
    assert client.post(f"/api/v1/admin/affiliates/{me['id']}/payout", headers=admin_headers).status_code == 400


def test_commission_failure_does_not_block_status(client, admin_headers, store, monkeypatch):
    buyer_headers = auth_headers(client, "buyer@digistore.id")
    order = client.post("/api/v1/checkout", headers=buyer_headers, json={
        "items": [{"product_id": store["product"]["id"]}],
    }).json()["data"]["order"]

    def failing(db, order):
        raise CommissionError(order.id, "database is locked")

    monkeypatch.setattr(CommissionService, "process_order_commission", staticmethod(failing))

    response = client.patch(
        f"/api/v1/admin/orders/{order['id']}/status", headers=admin_headers, json={"status": "completed"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["order"]["status"] == "completed"
    assert data["order"]["commission_paid"] is False
    assert data["commission"]["status"] == "failed"
    assert "database is locked" in data["commission"]["error"]


def test_withdrawal_request(client, db, admin_headers):
    headers = auth_headers(client, "affiliate@digistore.id", full_name="Rina")
    client.post("/api/v1/users/me/affiliate", headers=headers)

    too_low = client.post("/api/v1/users/me/withdrawal-request", headers=headers)
    assert too_low.status_code == 400

    db.query(Profile).filter(Profile.email == "affiliate@digistore.id").update({"balance": 150000})
    db.commit()

    no_bank = client.post("/api/v1/users/me/withdrawal-request", headers=headers)
    assert no_bank.status_code == 400

    client.put("/api/v1/users/me", headers=headers, json={
        "bank_name": "BCA", "bank_number": "1234567890", "bank_holder": "Rina",
    })
    no_store_number = client.post("/api/v1/users/me/withdrawal-request", headers=headers)
    assert no_store_number.status_code == 400

    client.put("/api/v1/admin/settings", headers=admin_headers, json={"whatsapp_number": "081234567890"})
    ok = client.post("/api/v1/users/me/withdrawal-request", headers=headers)
    assert ok.status_code == 200
    assert ok.json()["data"]["amount"] == 150000
    assert ok.json()["data"]["whatsapp_url"].startswith("https://wa.me/6281234567890?text=")


def test_dashboard(client, admin_headers, store):
    headers = auth_headers(client, "buyer@digistore.id")
    order = client.post("/api/v1/checkout", headers=headers, json={
        "items": [{"product_id": store["product"]["id"]}],
    }).json()["data"]["order"]
    client.patch(f"/api/v1/admin/orders/{order['id']}/status", headers=admin_headers, json={"status": "completed"})

    stats = client.get("/api/v1/admin/dashboard", headers=admin_headers).json()["data"]

    assert stats["total_users"] == 2
    assert stats["total_products"] == 1
    assert stats["completed_orders"] == 1
    assert stats["revenue"] == 100000
    assert [day["day"] for day in stats["sales_by_day"]] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert sum(day["sales"] for day in stats["sales_by_day"]) == 1


def test_admin_orders_filter_by_status(client, admin_headers, store):
    headers = auth_headers(client, "buyer@digistore.id", full_name="Budi")
    for _ in range(2):
        client.post("/api/v1/checkout", headers=headers, json={"items": [{"product_id": store["product"]["id"]}]})

    pending = client.get("/api/v1/admin/orders", headers=admin_headers, params={"status": "pending"}).json()
    completed = client.get("/api/v1/admin/orders", headers=admin_headers, params={"status": "completed"}).json()

    assert pending["meta"]["total"] == 2
    assert pending["data"][0]["buyer"]["full_name"] == "Budi"
    assert completed["meta"]["total"] == 0
    assert client.get("/api/v1/admin/orders", headers=admin_headers, params={"status": "lost"}).status_code == 400
