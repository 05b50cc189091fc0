import pytest

from conftest import login


@pytest.fixture
def portfolio(client, estate, admin_headers):
    """Two owners with one sole shop each, plus a common shop, all leased."""
    mine = estate.owner(name="Rahim Uddin")
    theirs = estate.owner(name="Salma Begum")
    my_shop = estate.shop(shop_number="E-1", owner_id=mine["id"])
    their_shop = estate.shop(shop_number="E-2", owner_id=theirs["id"])
    common_shop = estate.shop(shop_number="M-1", ownership_type="common")

    leases = {}
    for i, shop in enumerate([my_shop, their_shop, common_shop]):
        tenant = estate.tenant(name=f"Tenant {shop['shop_number']}", phone=f"0170000000{i}")
        leases[shop["shop_number"]] = estate.lease(tenant["id"], shop["id"])

    resp = client.post("/api/users", headers=admin_headers, json={
        "username": "rahim", "password": "owner-pass", "role": "owner",
        "owner_id": mine["id"]})
    assert resp.status_code == 200, resp.text

    return {
        "mine": mine, "theirs": theirs, "leases": leases,
        "shops": {"mine": my_shop, "theirs": their_shop, "common": common_shop},
        "headers": login(client, "rahim", "owner-pass"),
    }


def test_owner_sees_own_and_common_shops(client, portfolio):
    body = client.get("/api/shops", headers=portfolio["headers"]).json()
    assert [s["shop_number"] for s in body["shops"]] == ["E-1", "M-1"]

    resp = client.get(f"/api/shops/{portfolio['shops']['theirs']['id']}",
                      headers=portfolio["headers"])
    assert resp.status_code == 403


def test_owner_cannot_open_other_owners_lease(client, portfolio):
    lease = portfolio["leases"]["E-2"]
    resp = client.get(f"/api/leases/{lease['id']}/ledger", headers=portfolio["headers"])
    assert resp.status_code == 403

    own = portfolio["leases"]["E-1"]
    resp = client.get(f"/api/leases/{own['id']}/ledger", headers=portfolio["headers"],
                      params={"as_of": "2024-01-31"})
    assert resp.status_code == 200


def test_owner_lease_and_tenant_lists_are_scoped(client, portfolio):
    leases = client.get("/api/leases", headers=portfolio["headers"]).json()
    assert {l["shop_number"] for l in leases["leases"]} == {"E-1", "M-1"}

    tenants = client.get("/api/tenants", headers=portfolio["headers"],
                         params={"as_of": "2024-01-31"}).json()
    assert {t["name"] for t in tenants["tenants"]} == {"Tenant E-1", "Tenant M-1"}


def test_owner_dashboard_is_scoped(client, portfolio):
    body = client.get("/api/dashboard/stats", headers=portfolio["headers"],
                      params={"as_of": "2024-01-31"}).json()
    assert body["occupancy"]["total_shops"] == 2
    assert body["total_dues"] == "10000.00"


def test_owner_cannot_write_admin_records(client, portfolio):
    headers = portfolio["headers"]
    resp = client.post("/api/shops", headers=headers, json={
        "shop_number": "W-1", "floor": "ground", "ownership_type": "common"})
    assert resp.status_code == 403
    assert client.get("/api/owners", headers=headers).status_code == 403
    assert client.get("/api/deletion-logs", headers=headers).status_code == 403
    resp = client.put("/api/settings/currency", headers=headers,
                      json={"exchange_rate": "2"})
    assert resp.status_code == 403


def test_owner_reads_only_own_owner_record(client, portfolio):
    headers = portfolio["headers"]
    own = client.get(f"/api/owners/{portfolio['mine']['id']}/details", headers=headers,
                     params={"as_of": "2024-01-31"})
    assert own.status_code == 200
    assert [t["shop_number"] for t in own.json()["tenants"]] == ["E-1"]

    other = client.get(f"/api/owners/{portfolio['theirs']['id']}", headers=headers)
    assert other.status_code == 403

    statement = client.get("/api/reports/owner-statement", headers=headers, params={
        "owner_id": portfolio["theirs"]["id"], "start_date": "2024-01-01",
        "end_date": "2024-01-31"})
    assert statement.status_code == 403


def test_inactive_user_is_locked_out(client, portfolio, admin_headers):
    users = client.get("/api/users", headers=admin_headers).json()["users"]
    owner_user = next(u for u in users if u["username"] == "rahim")
    resp = client.put(f"/api/users/{owner_user['id']}", headers=admin_headers,
                      json={"status": "inactive"})
    assert resp.status_code == 200

    assert client.get("/api/shops", headers=portfolio["headers"]).status_code == 403


def test_owner_deposit_summary_is_scoped(client, estate, portfolio):
    for number in ("E-1", "E-2"):
        lease = portfolio["leases"][number]
        estate.payment(lease["tenant_id"], lease["id"], "5000", "2024-01-05")

    body = client.get("/api/reports/monthly-deposit-summary",
                      headers=portfolio["headers"]).json()
    assert {r["owner_id"] for r in body["rows"]} == {portfolio["mine"]["id"]}
    assert body["total_rent_payments"] == "5000.00"

    resp = client.get("/api/reports/monthly-deposit-summary", headers=portfolio["headers"],
                      params={"owner_id": portfolio["theirs"]["id"]})
    assert resp.status_code == 403


def test_owner_top_outstandings(client, portfolio):
    url = f"/api/owners/{portfolio['mine']['id']}/top-outstandings"
    resp = client.get(url, headers=portfolio["headers"], params={"as_of": "2024-01-31"})
    assert resp.status_code == 200, resp.text
    body = resp.json()

    assert [(e["shop_number"], e["outstanding"]) for e in body["entries"]] == [
        ("E-1", "5000.00"), ("M-1", "2500.00")]
    assert body["entries"][1]["full_outstanding"] == "5000.00"
    assert body["total_outstanding"] == "7500.00"
    assert body["debtor_count"] == 2

    resp = client.get(url, headers=portfolio["headers"],
                      params={"as_of": "2024-01-31", "limit": 1})
    assert len(resp.json()["entries"]) == 1
    assert resp.json()["total_outstanding"] == "7500.00"

    other = f"/api/owners/{portfolio['theirs']['id']}/top-outstandings"
    assert client.get(other, headers=portfolio["headers"]).status_code == 403


def test_owner_rent_payment_report(client, estate, portfolio):
    lease = portfolio["leases"]["E-1"]
    estate.payment(lease["tenant_id"], lease["id"], "3000", "2024-01-10")
    estate.payment(lease["tenant_id"], lease["id"], "1000", "2024-02-10")

    resp = client.get(f"/api/owners/{portfolio['mine']['id']}/reports/rent-payments",
                      headers=portfolio["headers"],
                      params={"month": 1, "year": 2024, "as_of": "2024-01-31"})
    assert resp.status_code == 200, resp.text
    body = resp.json()

    mine, common = body["rows"]
    assert mine["shop_number"] == "E-1"
    assert mine["recent_payment_amount"] == "3000.00"
    assert mine["payment_dates"] == ["2024-01-10"]
    assert mine["current_outstanding"] == "2000.00"
    assert common["shop_number"] == "M-1"
    assert common["monthly_rent"] == "2500.00"
    assert common["full_monthly_rent"] == "5000.00"
    assert common["current_outstanding"] == "2500.00"
    assert body["total_outstanding"] == "4500.00"

    resp = client.get(f"/api/owners/{portfolio['mine']['id']}/reports/rent-payments",
                      headers=portfolio["headers"], params={"month": 13, "year": 2024})
    assert resp.status_code == 400


def test_owner_financial_transactions(client, portfolio, admin_headers):
    resp = client.post("/api/expenses", headers=admin_headers, json={
        "expense_type": "maintenance", "description": "Lift repair", "amount": "600",
        "expense_date": "2024-01-20", "allocation": "common"})
    assert resp.status_code == 200, resp.text
    for owner in (portfolio["mine"], portfolio["theirs"]):
        resp = client.post("/api/bank-deposits", headers=admin_headers, json={
            "owner_id": owner["id"], "amount": "7000", "deposit_date": "2024-01-25",
            "bank_name": "Sonali Bank", "deposit_slip_ref": "SL-1"})
        assert resp.status_code == 200, resp.text

    url = f"/api/owners/{portfolio['mine']['id']}/reports/financial-transactions"
    resp = client.get(url, headers=portfolio["headers"], params={"month": 1, "year": 2024})
    assert resp.status_code == 200, resp.text
    body = resp.json()

    assert [(t["transaction_type"], t["amount"]) for t in body["transactions"]] == [
        ("deposit", "7000.00"), ("expense", "300.00")]
    assert body["transactions"][0]["description"] == "Sonali Bank - Ref: SL-1"
    assert body["net_balance"] == "6700.00"
    assert body["owner_name"] == "Rahim Uddin"

    other = f"/api/owners/{portfolio['theirs']['id']}/reports/financial-transactions"
    assert client.get(other, headers=portfolio["headers"]).status_code == 403
