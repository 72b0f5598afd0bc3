from storefront.auth.passwords import verify_password
from storefront.database.seed import SAMPLE_PRODUCTS, seed_database
from storefront.products.models import Product
from storefront.users.models import User


def test_seed_loads_catalogue_and_users(db_session):
    seed_database(db_session)

    assert db_session.query(Product).count() == len(SAMPLE_PRODUCTS)
    featured = {p.name for p in db_session.query(Product).filter(Product.featured.is_(True))}
    assert "Levi's 501 Jeans" not in featured
    assert "The Great Gatsby" in featured

    john = db_session.query(User).filter(User.email == "john@example.com").one()
    assert verify_password("Ecomm@123", john.password_hash)


def test_seed_is_idempotent(db_session):
    seed_database(db_session)
    seed_database(db_session)

    assert db_session.query(Product).count() == len(SAMPLE_PRODUCTS)
    assert db_session.query(User).count() == 2


def test_seeded_users_can_log_in(client, db_session):
    seed_database(db_session)
    response = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "Ecomm@123"})
    assert response.status_code == 200
    assert response.json()["data"]["user"]["firstName"] == "Jane"
