import os

# Settings are read at import time, configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.config.database import Base, get_db
from app.core.auth.repository import UserRepository
from app.core.auth.service import AuthService
from app.main import app
from app.modules.orders.schemas import OrderCreateRequest
from app.modules.orders.service import OrderService
from app.modules.partners.repository import PartnerRepository
from app.modules.partners.schemas import PartnerCreateRequest
from app.modules.partners.service import PartnerService
from app.shared.constants import UserRole

DEFAULT_PASSWORD = "secret123"


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
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


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {AuthService.create_access_token(user_id)}"}


@pytest.fixture()
def make_user(db):
    def _make_user(email: str, role: UserRole = UserRole.ADMIN, password: str = DEFAULT_PASSWORD):
        user = UserRepository(db).add(
            email=email,
            password_hash=AuthService.get_password_hash(password),
            role=role.value
        )
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture()
def admin(make_user):
    return make_user("admin@example.com", UserRole.ADMIN)


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin.id)


@pytest.fixture()
def make_partner(db):
    """Provision a partner and return its ORM row"""
    def _make_partner(email: str, name: str = "Luis", latitude: float = 19.43, longitude: float = -99.13):
        response = PartnerService(db).provision_partner(PartnerCreateRequest(
            name=name,
            email=email,
            password=DEFAULT_PASSWORD,
            contact_number="+52 55 1234 5678",
            current_location={"latitude": latitude, "longitude": longitude}
        ))
        return PartnerRepository(db).get_by_id(response.partner.id)
    return _make_partner


@pytest.fixture()
def make_order(db):
    """Create a pending order and return its primary key"""
    def _make_order(order_id: str = "O1", item_name: str = "Book", customer_name: str = "Alice"):
        response = OrderService(db).create_order(OrderCreateRequest(
            order_id=order_id,
            item_name=item_name,
            customer_name=customer_name,
            delivery_location={"latitude": 10, "longitude": 20}
        ))
        return response.order.id
    return _make_order


@pytest.fixture()
def headers_for():
    return auth_headers
