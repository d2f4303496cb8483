import pytest

from grocery_service.routers.categories import slugify

PRODUCT = {
    "name": "Basmati Rice",
    "description": "Long grain rice",
    "price": 120.0,
    "image": "/rice.jpg",
    "category": "Grains",
    "stockQuantity": 10,
}


@pytest.fixture
def product(client):
    return client.post("/api/admin/products", json=PRODUCT).json()


def test_create_and_get_product(client, product):
    assert product["id"] == "1"
    assert product["inStock"] is True
    assert product["rating"] == 4.0
    assert client.get(f"/api/products/{product['id']}").json()["name"] == "Basmati Rice"


def test_unknown_product_is_404(client):
    assert client.get("/api/products/999").status_code == 404
    assert client.get("/api/products/abc").status_code == 404


def test_invalid_product_is_400(client):
    response = client.post("/api/admin/products", json={**PRODUCT, "price": 0})
    assert response.status_code == 400


def test_filter_and_search(client):
    client.post("/api/admin/products", json=PRODUCT)
    client.post("/api/admin/products", json={**PRODUCT, "name": "Milk", "description": "Fresh cow milk", "category": "Dairy"})

    dairy = client.get("/api/products", params={"category": "Dairy"}).json()
    assert [p["name"] for p in dairy] == ["Milk"]

    found = client.get("/api/products", params={"search": "GRAIN"}).json()
    assert [p["name"] for p in found] == ["Basmati Rice"]

    assert len(client.get("/api/products").json()) == 2


def test_update_and_delete_product(client, product):
    response = client.patch(f"/api/admin/products/{product['id']}", json={"price": 110, "inStock": False})
    assert response.json()["price"] == 110
    assert response.json()["inStock"] is False

    assert client.delete(f"/api/admin/products/{product['id']}").json()["success"] is True
    assert client.get(f"/api/products/{product['id']}").status_code == 404


def test_bulk_stock_reports_each_item(client, product):
    response = client.patch(
        "/api/admin/products/bulk-stock",
        json={"updates": [
            {"id": product["id"], "stockQuantity": 0, "inStock": False},
            {"id": "404", "stockQuantity": 5, "inStock": True},
        ]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["results"] == [
        {"id": product["id"], "success": True},
        {"id": "404", "success": False},
    ]
    assert body["message"] == "Updated 1 products, 1 failed"
    # The successful update is kept despite the failure.
    assert client.get(f"/api/products/{product['id']}").json()["stockQuantity"] == 0


def test_bulk_stock_requires_updates(client):
    assert client.patch("/api/admin/products/bulk-stock", json={"updates": []}).status_code == 400


@pytest.mark.parametrize(
    "name,slug",
    [("Fresh Fruits", "fresh-fruits"), ("  Dairy & Eggs ", "dairy-eggs"), ("Snacks_and--Drinks", "snacks-and-drinks")],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


def test_category_crud(client):
    created = client.post("/api/categories", json={"name": " Fresh Fruits "})
    assert created.status_code == 201
    category = created.json()
    assert category["name"] == "Fresh Fruits"
    assert category["slug"] == "fresh-fruits"

    assert client.post("/api/categories", json={"name": "Fresh Fruits"}).status_code == 400
    assert client.post("/api/categories", json={"name": "   "}).status_code == 400

    updated = client.patch(f"/api/categories/{category['id']}", json={"name": "Fruits"}).json()
    assert updated["slug"] == "fruits"
    assert client.get(f"/api/categories/{category['id']}").json()["name"] == "Fruits"

    assert client.delete(f"/api/categories/{category['id']}").status_code == 200
    assert client.get(f"/api/categories/{category['id']}").status_code == 404


def test_categories_sorted_by_name(client):
    for name in ("Vegetables", "Bakery", "Meat"):
        client.post("/api/categories", json={"name": name})
    assert [c["name"] for c in client.get("/api/categories").json()] == ["Bakery", "Meat", "Vegetables"]


def test_category_delete_refused_while_in_use(client):
    category = client.post("/api/categories", json={"name": "Grains"}).json()
    client.post("/api/admin/products", json=PRODUCT)

    response = client.delete(f"/api/categories/{category['id']}")
    assert response.status_code == 400
    assert "1 product(s)" in response.json()["detail"]


def test_reviews(client):
    response = client.post(
        "/api/reviews",
        json={"productId": "1", "userName": "Nadia", "rating": 5, "comment": "Great"},
    )
    assert response.status_code == 201
    review = response.json()
    assert review["verified"] is False
    assert len(review["date"]) == 10

    reviews = client.get("/api/reviews", params={"productId": "1"}).json()
    assert [r["userName"] for r in reviews] == ["Nadia"]
    assert client.get("/api/reviews", params={"productId": "2"}).json() == []


def test_review_rating_bounds(client):
    body = {"productId": "1", "userName": "Nadia", "comment": "Meh"}
    assert client.post("/api/reviews", json={**body, "rating": 6}).status_code == 400
    assert client.post("/api/reviews", json={**body, "rating": 0}).status_code == 400


def test_reviews_require_product_id(client):
    assert client.get("/api/reviews").status_code == 400
