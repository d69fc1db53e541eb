from datetime import datetime, timezone

from fastapi.testclient import TestClient

from app.adapters.path_cache import PathCache
from app.api.routes_invoices import get_path_cache
from app.db import SessionLocal, init_db
from app.main import app
from app.models.customer import Customer
from app.models.invoice import Invoice

client = TestClient(app)
cache = PathCache()
CUSTOMER_ID = "cust-api-1"


def setup_module(module):
    init_db(reset=True)
    app.dependency_overrides[get_path_cache] = lambda: cache
    db = SessionLocal()
    try:
        db.add(Customer(id=CUSTOMER_ID, name="Lee Robinson", email="lee@robinson.com"))
        db.add(Customer(id="cust-api-2", name="Amy Burns", email="amy@burns.com"))
        db.commit()
    finally:
        db.close()


def teardown_module(module):
    app.dependency_overrides.pop(get_path_cache, None)


def _invoices_for(customer_id):
    db = SessionLocal()
    try:
        return db.query(Invoice).filter(Invoice.customer_id == customer_id).all()
    finally:
        db.close()


def test_create_redirects_and_stores_cents():
    form = {"customerId": CUSTOMER_ID, "amount": "15.50", "status": "paid"}
    res = client.post("/dashboard/invoices/create", data=form, follow_redirects=False)
    assert res.status_code == 303
    assert res.headers["location"] == "/dashboard/invoices"

    rows = _invoices_for(CUSTOMER_ID)
    assert len(rows) == 1
    assert rows[0].amount == 1550
    assert rows[0].status == "paid"
    assert rows[0].date == datetime.now(timezone.utc).date().isoformat()


def test_create_invalid_returns_state():
    form = {"customerId": CUSTOMER_ID, "amount": "0"}
    res = client.post("/dashboard/invoices/create", data=form, follow_redirects=False)
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Missing fields. Failed to create the invoice."
    assert body["errors"] == {
        "amount": ["Enter an amount greater than 0"],
        "status": ["Select an invoice status"],
    }


def test_list_is_cached_until_a_write_revalidates():
    first = client.get("/dashboard/invoices")
    assert first.status_code == 200
    count = len(first.json()["invoices"])
    assert cache.is_cached("/dashboard/invoices")

    form = {"customerId": "cust-api-2", "amount": "2.00", "status": "pending"}
    client.post("/dashboard/invoices/create", data=form, follow_redirects=False)
    assert not cache.is_cached("/dashboard/invoices")

    second = client.get("/dashboard/invoices")
    assert len(second.json()["invoices"]) == count + 1


def test_list_search_by_customer_name():
    res = client.get("/dashboard/invoices", params={"query": "amy"})
    body = res.json()
    assert body["total_pages"] == 1
    assert {r["name"] for r in body["invoices"]} == {"Amy Burns"}


def test_edit_keeps_date_and_changes_fields():
    inv = _invoices_for(CUSTOMER_ID)[0]
    form = {"customerId": CUSTOMER_ID, "amount": "99.99", "status": "pending"}
    res = client.post(f"/dashboard/invoices/{inv.id}/edit", data=form, follow_redirects=False)
    assert res.status_code == 303

    res = client.get(f"/dashboard/invoices/{inv.id}")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "pending"
    assert float(body["amount"]) == 99.99

    updated = _invoices_for(CUSTOMER_ID)[0]
    assert updated.amount == 9999
    assert updated.date == inv.date


def test_edit_unknown_id_is_silent():
    form = {"customerId": CUSTOMER_ID, "amount": "1", "status": "paid"}
    res = client.post("/dashboard/invoices/does-not-exist/edit", data=form, follow_redirects=False)
    assert res.status_code == 303


def test_get_unknown_invoice_404():
    res = client.get("/dashboard/invoices/does-not-exist")
    assert res.status_code == 404


def test_delete_existing_and_missing_both_succeed():
    inv = _invoices_for(CUSTOMER_ID)[0]
    res = client.post(f"/dashboard/invoices/{inv.id}/delete")
    assert res.status_code == 200
    assert res.json() == {"message": "Deleted Invoice"}
    assert _invoices_for(CUSTOMER_ID) == []
    # the other customer's invoice is untouched
    assert len(_invoices_for("cust-api-2")) == 1

    res = client.post(f"/dashboard/invoices/{inv.id}/delete")
    assert res.json() == {"message": "Deleted Invoice"}


def test_customers_sorted_by_name():
    res = client.get("/dashboard/customers")
    assert res.status_code == 200
    assert [c["name"] for c in res.json()] == ["Amy Burns", "Lee Robinson"]


def test_amounts_outside_cents_range_are_rejected_and_not_stored():
    before = len(_invoices_for("cust-api-2"))
    for amount, message in [
        ("0.001", "Enter an amount greater than 0"),
        ("0.004", "Enter an amount greater than 0"),
        ("1e27", "Enter an amount no greater than 21474836.47"),
        ("100000000000000000", "Enter an amount no greater than 21474836.47"),
    ]:
        form = {"customerId": "cust-api-2", "amount": amount, "status": "paid"}
        res = client.post("/dashboard/invoices/create", data=form, follow_redirects=False)
        assert res.status_code == 400
        assert res.json()["errors"] == {"amount": [message]}
    assert len(_invoices_for("cust-api-2")) == before
