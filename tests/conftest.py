import os

# must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("SUPER_ADMIN_USERNAME", None)
os.environ.pop("SUPER_ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from shared.core.database import Base, EstateSessionLocal, estate_engine
from shared.models.users import Users
from shared.utils.enums import UserRole, UserStatus
from estate_service.app.main import app


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.create_all(bind=estate_engine)
    yield
    Base.metadata.drop_all(bind=estate_engine)


@pytest.fixture
def db():
    session = EstateSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


def create_user(db, username, password, role, owner_id=None):
    user = Users(username=username, role=role, owner_id=owner_id,
                 status=UserStatus.ACTIVE.value)
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client, username, password):
    resp = client.post("/api/auth/login",
                       json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, db):
    create_user(db, "admin", "admin-pass", UserRole.SUPER_ADMIN.value)
    return login(client, "admin", "admin-pass")


class EstateFactory:
    """Creates estate records through the API as the super admin."""

    def __init__(self, client, headers):
        self.client = client
        self.headers = headers

    def _post(self, url, payload):
        resp = self.client.post(url, json=payload, headers=self.headers)
        assert resp.status_code == 200, resp.text
        return resp.json()

    def owner(self, name="Rahim Uddin", **extra):
        return self._post("/api/owners", {"name": name, **extra})

    def shop(self, shop_number="E-1", floor="ground", ownership_type="sole",
             owner_id=None, **extra):
        payload = {"shop_number": shop_number, "floor": floor,
                   "ownership_type": ownership_type, **extra}
        if owner_id is not None:
            payload["owner_id"] = owner_id
        return self._post("/api/shops", payload)

    def tenant(self, name="Karim Traders", phone="01711000000", **extra):
        return self._post("/api/tenants", {"name": name, "phone": phone, **extra})

    def lease(self, tenant_id, shop_id, start_date="2024-01-01",
              end_date="2030-12-31", monthly_rent="5000", **extra):
        return self._post("/api/leases", {
            "tenant_id": tenant_id,
            "shop_id": shop_id,
            "start_date": start_date,
            "end_date": end_date,
            "monthly_rent": monthly_rent,
            **extra,
        })

    def payment(self, tenant_id, lease_id, amount, payment_date, rent_months=()):
        return self._post("/api/payments", {
            "tenant_id": tenant_id,
            "lease_id": lease_id,
            "amount": amount,
            "payment_date": payment_date,
            "rent_months": list(rent_months),
        })


@pytest.fixture
def estate(client, admin_headers):
    return EstateFactory(client, admin_headers)


@pytest.fixture
def leased_shop(estate):
    """One owner, one sole shop, one tenant on a 5000/month lease from Jan 2024."""
    owner = estate.owner()
    shop = estate.shop(owner_id=owner["id"])
    tenant = estate.tenant()
    lease = estate.lease(tenant["id"], shop["id"], security_deposit="15000")
    return {"owner": owner, "shop": shop, "tenant": tenant, "lease": lease}
