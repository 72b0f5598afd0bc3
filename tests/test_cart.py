import pytest

from storefront.cart.models import CartItem
from storefront.cart.service import CartService
from storefront.core.exceptions import InsufficientStockError, NotFoundError, ValidationError


def add(client, headers, product_id, quantity):
    return client.post("/api/cart", json={"productId": product_id, "quantity": quantity}, headers=headers)


def test_empty_cart_has_zero_totals(client, auth_headers, test_user):
    response = client.get("/api/cart", headers=auth_headers)
    assert response.status_code == 200

    cart = response.json()["data"]
    assert cart["items"] == []
    assert cart["totalItems"] == 0
    assert cart["totalAmount"] == 0
    assert cart["userId"] == test_user.id


def test_add_to_cart_captures_price(client, auth_headers, product):
    response = add(client, auth_headers, product.id, 2)
    assert response.status_code == 200

    cart = response.json()["data"]
    assert len(cart["items"]) == 1
    line = cart["items"][0]
    assert line["productId"] == product.id
    assert line["quantity"] == 2
    assert line["price"] == 100.0
    assert line["subtotal"] == 200.0
    assert line["product"]["name"] == "Test Product"
    assert cart["totalItems"] == 2
    assert cart["totalAmount"] == 200.0
    assert cart["totalPrice"] == 200.0


def test_adding_same_product_merges_lines(client, auth_headers, product, db_session):
    add(client, auth_headers, product.id, 1)
    cart = add(client, auth_headers, product.id, 2).json()["data"]

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert db_session.query(CartItem).count() == 1


def test_totals_use_captured_price_not_live_price(client, auth_headers, product, db_session):
    add(client, auth_headers, product.id, 2)

    product.price = 150.0
    db_session.commit()

    cart = client.get("/api/cart", headers=auth_headers).json()["data"]
    assert cart["items"][0]["price"] == 100.0
    assert cart["items"][0]["product"]["price"] == 150.0
    assert cart["totalAmount"] == 200.0


@pytest.mark.parametrize(
    "payload",
    [
        {"quantity": 1},
        {"productId": "x"},
        {"productId": "x", "quantity": 0},
        {"productId": "x", "quantity": -2},
    ],
)
def test_add_requires_product_and_positive_quantity(client, auth_headers, payload):
    response = client.post("/api/cart", json=payload, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Product ID and valid quantity are required"


def test_add_unknown_product(client, auth_headers):
    response = add(client, auth_headers, "missing-product", 1)
    assert response.status_code == 404
    assert response.json()["error"] == "Product not found"


def test_add_more_than_stock(client, auth_headers, product):
    response = add(client, auth_headers, product.id, 6)
    assert response.status_code == 400
    assert response.json()["error"] == "Insufficient stock for Test Product"


def test_update_quantity_replaces(client, auth_headers, product):
    line_id = add(client, auth_headers, product.id, 3).json()["data"]["items"][0]["id"]

    response = client.put(f"/api/cart/{line_id}", json={"quantity": 1}, headers=auth_headers)
    assert response.status_code == 200
    cart = response.json()["data"]
    assert cart["items"][0]["quantity"] == 1
    assert cart["totalAmount"] == 100.0


def test_update_requires_positive_quantity(client, auth_headers, product):
    line_id = add(client, auth_headers, product.id, 1).json()["data"]["items"][0]["id"]
    response = client.put(f"/api/cart/{line_id}", json={"quantity": 0}, headers=auth_headers)
    assert response.status_code == 400


def test_update_rejects_oversized_quantity(client, auth_headers, product):
    line_id = add(client, auth_headers, product.id, 1).json()["data"]["items"][0]["id"]

    response = client.put(f"/api/cart/{line_id}", json={"quantity": 10**20}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Quantity cannot exceed 1000"}

    cart = client.get("/api/cart", headers=auth_headers).json()["data"]
    assert cart["items"][0]["quantity"] == 1


def test_add_rejects_oversized_quantity(client, auth_headers, product):
    response = add(client, auth_headers, product.id, 10**20)
    assert response.status_code == 400
    assert response.json()["error"] == "Quantity cannot exceed 1000"


def test_cannot_touch_another_users_line(client, auth_headers, other_auth_headers, product):
    line_id = add(client, auth_headers, product.id, 1).json()["data"]["items"][0]["id"]

    assert client.put(f"/api/cart/{line_id}", json={"quantity": 4}, headers=other_auth_headers).status_code == 404
    assert client.delete(f"/api/cart/{line_id}", headers=other_auth_headers).status_code == 404

    cart = client.get("/api/cart", headers=auth_headers).json()["data"]
    assert cart["items"][0]["quantity"] == 1


def test_remove_line(client, auth_headers, product):
    line_id = add(client, auth_headers, product.id, 1).json()["data"]["items"][0]["id"]

    response = client.delete(f"/api/cart/{line_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["items"] == []

    assert client.delete(f"/api/cart/{line_id}", headers=auth_headers).status_code == 404


def test_clear_cart_is_idempotent(client, auth_headers, product):
    add(client, auth_headers, product.id, 1)

    first = client.delete("/api/cart", headers=auth_headers)
    second = client.delete("/api/cart", headers=auth_headers)
    assert first.status_code == second.status_code == 200
    assert second.json()["data"]["totalItems"] == 0


def test_line_for_deleted_product_has_null_product(client, auth_headers, product, db_session):
    add(client, auth_headers, product.id, 2)

    db_session.delete(product)
    db_session.commit()

    cart = client.get("/api/cart", headers=auth_headers).json()["data"]
    assert cart["items"][0]["product"] is None
    assert cart["totalAmount"] == 200.0


def test_cart_requires_authentication(client, product, db_session):
    assert client.get("/api/cart").status_code == 401
    assert add(client, {}, product.id, 1).status_code == 401
    assert db_session.query(CartItem).count() == 0


def test_unknown_body_fields_rejected(client, auth_headers, product):
    response = client.post(
        "/api/cart", json={"productId": product.id, "quantity": 1, "price": 0.01}, headers=auth_headers
    )
    assert response.status_code == 400


# Service level

def test_service_add_and_merge(db_session, test_user, product):
    CartService.add_item(db_session, test_user.id, product.id, 2)
    cart = CartService.add_item(db_session, test_user.id, product.id, 1)
    assert cart.total_items == 3
    assert cart.total_amount == 300.0


def test_service_errors(db_session, test_user, product):
    with pytest.raises(ValidationError):
        CartService.add_item(db_session, test_user.id, None, 1)
    with pytest.raises(NotFoundError):
        CartService.add_item(db_session, test_user.id, "nope", 1)
    with pytest.raises(InsufficientStockError) as exc:
        CartService.add_item(db_session, test_user.id, product.id, 10)
    assert exc.value.available == 5


def test_service_rolls_back_failed_write(db_session, test_user, product, mocker):
    mocker.patch.object(db_session, "commit", side_effect=RuntimeError("disk full"))
    with pytest.raises(RuntimeError):
        CartService.add_item(db_session, test_user.id, product.id, 1)
    mocker.stopall()

    assert db_session.query(CartItem).count() == 0


def test_service_merge_respects_quantity_ceiling(db_session, test_user, make_product, mocker):
    mocker.patch("storefront.cart.service.settings.MAX_LINE_QUANTITY", 3)
    product = make_product(stock=10)
    CartService.add_item(db_session, test_user.id, product.id, 2)

    with pytest.raises(ValidationError):
        CartService.add_item(db_session, test_user.id, product.id, 2)

    db_session.expire_all()
    assert db_session.query(CartItem).one().quantity == 2
