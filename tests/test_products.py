def test_list_products_paginates(client, catalogue):
    response = client.get("/api/products", params={"page": 1, "limit": 2})
    assert response.status_code == 200

    body = response.json()
    assert body["success"] is True
    page = body["data"]
    assert len(page["data"]) == 2
    assert page["pagination"] == {"page": 1, "limit": 2, "total": 5, "totalPages": 3}


def test_list_products_last_and_out_of_range_pages(client, catalogue):
    last = client.get("/api/products", params={"page": 3, "limit": 2}).json()["data"]
    assert len(last["data"]) == 1

    beyond = client.get("/api/products", params={"page": 9, "limit": 2}).json()["data"]
    assert beyond["data"] == []
    assert beyond["pagination"]["total"] == 5


def test_list_products_uses_camel_case_fields(client, product):
    item = client.get("/api/products").json()["data"]["data"][0]
    assert item["id"] == product.id
    assert item["reviewCount"] == 0
    assert "imageUrl" in item
    assert "review_count" not in item


def test_search_is_case_insensitive_over_name_and_description(client, catalogue):
    page = client.get("/api/products", params={"search": "LAPTOP"}).json()["data"]
    names = {p["name"] for p in page["data"]}
    assert names == {"Laptop Pro", "Novel"}


def test_filter_by_category(client, catalogue):
    page = client.get("/api/products", params={"category": "electronics"}).json()["data"]
    assert page["pagination"]["total"] == 2
    assert all(p["category"] == "Electronics" for p in page["data"])


def test_no_matches_gives_zero_pages(client, catalogue):
    page = client.get("/api/products", params={"search": "nothing-like-this"}).json()["data"]
    assert page["data"] == []
    assert page["pagination"]["totalPages"] == 0


def test_invalid_pagination_is_rejected(client):
    response = client.get("/api/products", params={"page": 0})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_featured_products_ordered_by_rating(client, catalogue):
    response = client.get("/api/products/featured")
    assert response.status_code == 200
    names = [p["name"] for p in response.json()["data"]]
    assert names == ["Laptop Pro", "Novel", "Phone X"]


def test_featured_products_respects_limit(client, catalogue):
    data = client.get("/api/products/featured", params={"limit": 1}).json()["data"]
    assert [p["name"] for p in data] == ["Laptop Pro"]


def test_categories_sorted_and_distinct(client, catalogue):
    response = client.get("/api/products/categories")
    assert response.json()["data"] == ["Books", "Clothing", "Electronics", "Footwear"]


def test_get_product_by_id(client, product):
    response = client.get(f"/api/products/{product.id}")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Test Product"


def test_get_unknown_product_returns_404(client):
    response = client.get("/api/products/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Product not found"}
