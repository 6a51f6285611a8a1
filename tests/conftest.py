import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db, init_db
from app.main import app


PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, name, email, role="employee"):
    payload = {"name": name, "email": email, "password": PASSWORD, "role": role}
    if role == "admin":
        payload["adminSecret"] = settings.ADMIN_SECRET
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "id": body["user"]["id"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def admin(client):
    return register(client, "Ada Admin", "ada@example.com", role="admin")


@pytest.fixture
def employee(client):
    return register(client, "Eve Employee", "eve@example.com")


@pytest.fixture
def other_employee(client):
    return register(client, "Oscar Other", "oscar@example.com")


def submit(client, who, amount=300, category="Travel", description="Flight to client site", **extra):
    payload = {"amount": amount, "category": category, "description": description, **extra}
    response = client.post("/api/expenses", json=payload, headers=who["headers"])
    assert response.status_code == 201, response.text
    return response.json()["expense"]


def create_budget(client, admin, category="Travel", total_amount=1000, period="FY 2024"):
    response = client.post(
        "/api/budgets",
        json={"category": category, "totalAmount": total_amount, "period": period},
        headers=admin["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["budget"]


def review(client, admin, expense_id, status="approved", **extra):
    return client.put(
        f"/api/expenses/{expense_id}/status",
        json={"status": status, **extra},
        headers=admin["headers"],
    )
