import os

# Tests build their own data; keep the app's startup hook from seeding
os.environ.setdefault("SEED_DATA", "0")

import pytest
from fastapi.testclient import TestClient

from storefront.database.core import Base, build_engine, get_db
from storefront.database import models  # noqa: F401
from storefront.auth.passwords import hash_password
from storefront.products.models import Product
from storefront.users.models import User
from main import app
from sqlalchemy.orm import sessionmaker

TEST_PASSWORD = "ValidPassword123!"
SHIPPING_ADDRESS = {
    "street": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "zipCode": "62701",
    "country": "US",
}


@pytest.fixture(scope="function")
def db_session():
    """
    Creates a new, isolated in-memory database session for each test.
    """
    engine = build_engine("")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_product(db_session):
    """Factory inserting a product row; keyword arguments override the defaults."""

    def _make(**overrides):
        data = {
            "name": "Test Product",
            "description": "A product used in tests",
            "price": 100.0,
            "category": "Test",
            "image_url": None,
            "stock": 5,
            "rating": 4.0,
            "review_count": 0,
            "featured": False,
        }
        data.update(overrides)
        product = Product(**data)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def catalogue(make_product):
    """A small mixed catalogue for listing and filtering tests."""
    return [
        make_product(name="Laptop Pro", description="Fast laptop", category="Electronics", price=1500.0, rating=4.8, featured=True),
        make_product(name="Phone X", description="Smart phone", category="Electronics", price=900.0, rating=4.6, featured=True),
        make_product(name="Running Shoe", description="Light trainer", category="Footwear", price=120.0, rating=4.2),
        make_product(name="Denim Jeans", description="Blue denim", category="Clothing", price=80.0, rating=4.1),
        make_product(name="Novel", description="Classic laptop-free reading", category="Books", price=12.5, rating=4.7, featured=True),
    ]


def _make_user(db_session, email, first_name="Test", last_name="User"):
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(TEST_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db_session):
    """
    Creates a pre-defined, password-based user in the test database.
    """
    return _make_user(db_session, "test@example.com")


@pytest.fixture
def other_user(db_session):
    return _make_user(db_session, "other@example.com", first_name="Other")


@pytest.fixture(scope="function")
def client(db_session):
    """
    Creates a TestClient for the app, with get_db bound to the test session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def login(client, email, password=TEST_PASSWORD):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, "Failed to log in test user"
    return response.json()["data"]["token"]


@pytest.fixture(scope="function")
def auth_headers(client, test_user):
    """
    Logs in the `test_user` and returns valid authorization headers.
    """
    return {"Authorization": f"Bearer {login(client, test_user.email)}"}


@pytest.fixture
def other_auth_headers(client, other_user):
    return {"Authorization": f"Bearer {login(client, other_user.email)}"}


@pytest.fixture
def shipping_address():
    return dict(SHIPPING_ADDRESS)


@pytest.fixture
def login_as(client):
    """Returns a function logging a user in and giving back bearer headers."""

    def _login(email, password=TEST_PASSWORD):
        return {"Authorization": f"Bearer {login(client, email, password)}"}

    return _login
