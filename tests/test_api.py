"""
HTTP tests for the storefront API.

Runs through the FastAPI TestClient with the in-memory store swapped in.
"""
from decimal import Decimal

BUYER = {"X-User-Id": "user-u"}
SELLER = {"X-User-Id": "seller-1"}
STRANGER = {"X-User-Id": "user-x"}


def create_listing(client, **overrides):
    payload = {
        "title": "Brake pads",
        "description": "Front brake pads",
        "price": "10.00",
        "stock": 5,
        "brand": "Honda",
        "tags": ["brakes"],
        "image_url": "images/brake-pads.png",
    }
    payload.update(overrides)
    response = client.post("/products", json=payload, headers=SELLER)
    assert response.status_code == 201
    return response.json()


def quantity_of(cart, product_id):
    return next(line["quantity"] for line in cart["lines"] if line["product_id"] == product_id)


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuthentication:
    def test_cart_requires_user_header(self, test_client):
        response = test_client.get("/cart")

        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"

    def test_blank_user_header(self, test_client):
        response = test_client.post("/cart/checkout", headers={"X-User-Id": "  "})
        assert response.status_code == 401


class TestCartFlow:
    def test_full_shopping_flow(self, test_client, notifier):
        product = create_listing(test_client)
        pid = product["id"]

        response = test_client.post("/cart/lines", json={"product_id": pid, "quantity": 3}, headers=BUYER)
        assert response.status_code == 200
        cart = response.json()
        assert cart["status"] == "pending"
        assert quantity_of(cart, pid) == 3

        cart = test_client.post("/cart/lines", json={"product_id": pid, "quantity": 2}, headers=BUYER).json()
        assert quantity_of(cart, pid) == 5

        cart = test_client.put(f"/cart/lines/{pid}", json={"quantity": 1}, headers=BUYER).json()
        assert quantity_of(cart, pid) == 1
        assert Decimal(cart["lines"][0]["price"]) == Decimal("10")

        response = test_client.post("/cart/checkout", headers=BUYER)
        assert response.status_code == 200
        completed = response.json()
        assert completed["status"] == "completed"
        assert Decimal(completed["total"]) == Decimal("10")
        assert len(notifier.sent) == 1

        response = test_client.get("/cart", headers=BUYER)
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

        response = test_client.get(f"/carts/{completed['cart_id']}", headers=BUYER)
        assert response.status_code == 200
        assert response.json()["status"] == "completed"

    def test_remove_and_clear(self, test_client):
        a = create_listing(test_client)["id"]
        b = create_listing(test_client, title="Rotors")["id"]
        test_client.post("/cart/lines", json={"product_id": a, "quantity": 2}, headers=BUYER)
        test_client.post("/cart/lines", json={"product_id": b, "quantity": 3}, headers=BUYER)

        cart = test_client.delete(f"/cart/lines/{a}", headers=BUYER).json()
        assert [line["product_id"] for line in cart["lines"]] == [b]

        response = test_client.delete(f"/cart/lines/{a}", headers=BUYER)
        assert response.status_code == 404

        cart = test_client.delete("/cart/lines", headers=BUYER).json()
        assert cart["lines"] == []
        assert cart["status"] == "pending"

    def test_over_stock_is_503(self, test_client):
        pid = create_listing(test_client, stock=5)["id"]

        response = test_client.post("/cart/lines", json={"product_id": pid, "quantity": 6}, headers=BUYER)

        assert response.status_code == 503
        assert response.json()["code"] == "unavailable"

    def test_unknown_product_is_404(self, test_client):
        response = test_client.post("/cart/lines", json={"product_id": "nope", "quantity": 1}, headers=BUYER)
        assert response.status_code == 404

    def test_zero_quantity_is_rejected_by_schema(self, test_client):
        pid = create_listing(test_client)["id"]
        response = test_client.post("/cart/lines", json={"product_id": pid, "quantity": 0}, headers=BUYER)
        assert response.status_code == 422

    def test_foreign_cart_is_403(self, test_client):
        pid = create_listing(test_client)["id"]
        cart = test_client.post("/cart/lines", json={"product_id": pid, "quantity": 1}, headers=BUYER).json()

        response = test_client.get(f"/carts/{cart['cart_id']}", headers=STRANGER)

        assert response.status_code == 403
        assert response.json()["code"] == "permission_denied"


class TestProductEndpoints:
    def test_create_and_get(self, test_client):
        product = create_listing(test_client)

        response = test_client.get(f"/products/{product['id']}", headers=BUYER)

        assert response.status_code == 200
        assert response.json()["owner"] == "seller-1"
        assert Decimal(response.json()["price"]) == Decimal("10.00")

    def test_invalid_payload_is_422(self, test_client):
        response = test_client.post("/products", json={"title": "x"}, headers=SELLER)
        assert response.status_code == 422

    def test_list_only_active(self, test_client):
        create_listing(test_client)
        create_listing(test_client, active=False)

        response = test_client.get("/products", params={"limit": 10})

        assert response.status_code == 200
        assert response.json()["total_count"] == 1
        assert len(response.json()["products"]) == 1

    def test_patch_by_owner(self, test_client):
        pid = create_listing(test_client)["id"]

        response = test_client.patch(f"/products/{pid}", json={"stock": 9}, headers=SELLER)

        assert response.status_code == 200
        assert response.json()["stock"] == 9
        assert response.json()["title"] == "Brake pads"

    def test_patch_by_stranger_is_403(self, test_client):
        pid = create_listing(test_client)["id"]
        response = test_client.patch(f"/products/{pid}", json={"stock": 9}, headers=STRANGER)
        assert response.status_code == 403

    def test_delete(self, test_client):
        pid = create_listing(test_client)["id"]

        assert test_client.delete(f"/products/{pid}", headers=STRANGER).status_code == 403
        assert test_client.delete(f"/products/{pid}", headers=SELLER).status_code == 204
        assert test_client.get(f"/products/{pid}", headers=SELLER).status_code == 404


class TestUserEndpoints:
    def test_put_and_get_me(self, test_client):
        response = test_client.put("/users/me", json={"first_name": "Ada", "last_name": "Lovelace"}, headers=BUYER)
        assert response.status_code == 200

        response = test_client.get("/users/me", headers=BUYER)
        assert response.json() == {"id": "user-u", "first_name": "Ada", "last_name": "Lovelace"}

    def test_unknown_me_is_404(self, test_client):
        assert test_client.get("/users/me", headers=STRANGER).status_code == 404
