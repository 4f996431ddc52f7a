import os

# Settings are read at import time; point them at throwaway values first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from bloomhub.core.config import OperatorAccount
from bloomhub.core.escalation import AdminEscalationPolicy, get_escalation_policy
from bloomhub.core.security import TokenService, get_token_service, hash_password
from bloomhub.database import get_session
from bloomhub.main import app

OPERATOR_PASSWORD = "break-glass-1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def tokens():
    return TokenService("test-secret")


@pytest.fixture
def operator_password():
    return OPERATOR_PASSWORD


@pytest.fixture
def policy():
    return AdminEscalationPolicy(
        emails=["ops@example.com"],
        subjects=["main-admin"],
        operators=[
            OperatorAccount(
                subject="temp-admin",
                email="operator@example.com",
                password_hash=hash_password(OPERATOR_PASSWORD),
            )
        ],
    )


@pytest.fixture
def client(engine, tokens, policy):
    def _session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_token_service] = lambda: tokens
    app.dependency_overrides[get_escalation_policy] = lambda: policy
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_customer(client):
    def _register(email="shopper@example.com", password="Secret123", **extra):
        body = {
            "email": email,
            "password": password,
            "firstName": "Sam",
            "lastName": "Shopper",
            **extra,
        }
        response = client.post("/api/auth/customer/register", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def register_florist(client):
    def _register(email="a@b.com", password="pw123456"):
        response = client.post(
            "/api/auth/florist/register",
            json={"email": email, "password": password, "firstName": "Fern", "lastName": "Gully"},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register
