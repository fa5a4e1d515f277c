import os

# Configuration de test, avant tout import de l'application
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["ROUTE_DEFAULT_POLICY"] = "deny"

import pytest
from fastapi.testclient import TestClient

from app.core.roles import Role
from app.core.security import get_token_issuer
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import app
from app.models import Branch
from app.services import auth_service


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def branch(db):
    branch = Branch(name="Centre-ville", address="1 rue du Marché", is_active=True)
    db.add(branch)
    db.commit()
    db.refresh(branch)
    return branch


@pytest.fixture
def make_user(db):
    def _make_user(email: str, role: Role = Role.CASHIER, password: str = "Secret123", **kwargs):
        return auth_service.register(
            db,
            name=kwargs.pop("name", email.split("@")[0]),
            email=email,
            password=password,
            role=role,
            **kwargs,
        )
    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user) -> dict:
        token = get_token_issuer().issue(user.id, Role(user.role))
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def admin(make_user):
    return make_user("admin@pos.com", Role.ADMIN)


@pytest.fixture
def manager(make_user):
    return make_user("manager@pos.com", Role.MANAGER)


@pytest.fixture
def cashier(make_user):
    return make_user("cashier@pos.com", Role.CASHIER)
