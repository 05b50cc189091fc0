def test_shops_sorted_by_floor_wing_and_number(client, estate, admin_headers):
    owner = estate.owner()
    for number, floor in [("W-2", "ground"), ("E-10", "ground"), ("E-2", "ground"),
                          ("M-1", "first"), ("M-3", "ground")]:
        estate.shop(shop_number=number, floor=floor, owner_id=owner["id"])
    estate.shop(shop_number="S-1", floor="subedari", ownership_type="common",
                subedari_category="shops")

    resp = client.get("/api/shops", headers=admin_headers)
    assert resp.status_code == 200
    numbers = [s["shop_number"] for s in resp.json()["shops"]]
    assert numbers == ["E-2", "E-10", "M-3", "W-2", "M-1", "S-1"]
    assert resp.json()["total"] == 6


def test_shop_number_must_be_unique(client, estate, admin_headers):
    estate.shop(shop_number="E-1", ownership_type="common")
    resp = client.post("/api/shops", headers=admin_headers, json={
        "shop_number": "e-1", "floor": "ground", "ownership_type": "common"})
    assert resp.status_code == 400


def test_subedari_category_only_on_subedari_floor(client, admin_headers):
    resp = client.post("/api/shops", headers=admin_headers, json={
        "shop_number": "E-1", "floor": "ground", "ownership_type": "common",
        "subedari_category": "shops"})
    assert resp.status_code == 400

    resp = client.post("/api/shops", headers=admin_headers, json={
        "shop_number": "S-1", "floor": "subedari", "ownership_type": "common"})
    assert resp.status_code == 400


def test_sole_shop_needs_owner_and_common_has_none(client, estate, admin_headers):
    resp = client.post("/api/shops", headers=admin_headers, json={
        "shop_number": "E-1", "floor": "ground", "ownership_type": "sole"})
    assert resp.status_code == 400

    owner = estate.owner()
    resp = client.post("/api/shops", headers=admin_headers, json={
        "shop_number": "E-1", "floor": "ground", "ownership_type": "common",
        "owner_id": owner["id"]})
    assert resp.status_code == 400


def test_new_shop_is_vacant(estate):
    shop = estate.shop(ownership_type="common")
    assert shop["status"] == "vacant"


def test_shop_status_locked_while_leased(client, leased_shop, admin_headers):
    shop_id = leased_shop["shop"]["id"]
    resp = client.put(f"/api/shops/{shop_id}", headers=admin_headers,
                      json={"status": "vacant"})
    assert resp.status_code == 400


def test_occupied_shop_cannot_be_deleted(client, leased_shop, admin_headers):
    shop_id = leased_shop["shop"]["id"]
    resp = client.request("DELETE", f"/api/shops/{shop_id}", headers=admin_headers,
                          json={"reason": "demolished"})
    assert resp.status_code == 400


def test_delete_shop_is_logged(client, estate, admin_headers):
    shop = estate.shop(shop_number="W-9", ownership_type="common")
    resp = client.request("DELETE", f"/api/shops/{shop['id']}", headers=admin_headers,
                          json={"reason": "merged with W-8"})
    assert resp.status_code == 200

    assert client.get(f"/api/shops/{shop['id']}", headers=admin_headers).status_code == 404

    logs = client.get("/api/deletion-logs", headers=admin_headers).json()["logs"]
    assert logs[0]["record_type"] == "shop"
    assert logs[0]["record_id"] == shop["id"]
    assert logs[0]["reason"] == "merged with W-8"


def test_owner_with_shops_cannot_be_deleted(client, estate, admin_headers):
    owner = estate.owner()
    estate.shop(owner_id=owner["id"])
    resp = client.delete(f"/api/owners/{owner['id']}", headers=admin_headers)
    assert resp.status_code == 400
