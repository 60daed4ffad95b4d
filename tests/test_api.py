"""
HTTP tests for the storefront API.

Services are wired with in-memory fakes; the lifespan's service builder
is patched so no backend is contacted.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from storefront.app import app
from storefront.dependencies import ServiceContainer

GUEST = {"X-Guest-Session": "session-abc"}

SHIPPING = {
    "full_name": "Nimal Perera",
    "phone": "0771234567",
    "address_line_1": "12 Temple Road",
    "city": "Kandy",
    "postal_code": "20000",
}


@pytest.fixture
def services(
    catalog,
    cart_service,
    order_service,
    order_viewer,
    checkout_service,
    wishlist_service,
    profile_service,
    product_admin_service,
):
    return ServiceContainer(
        catalog=catalog,
        cart=cart_service,
        orders=order_service,
        order_viewer=order_viewer,
        checkout=checkout_service,
        wishlist=wishlist_service,
        profile=profile_service,
        product_admin=product_admin_service,
    )


@pytest.fixture
def client(services):
    """Create test client with fake-backed services."""
    with patch("storefront.app.build_services", return_value=services):
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def auth(make_token):
    def _headers(user_id="user-1", role=None):
        return {"Authorization": f"Bearer {make_token(user_id=user_id, role=role)}"}

    return _headers


# ============================================================================
# Health and catalog
# ============================================================================


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["backend_configured"] is False


def test_metrics(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200


def request_count(method, endpoint, status):
    value = REGISTRY.get_sample_value(
        "storefront_http_requests_total",
        {"method": method, "endpoint": endpoint, "status": str(status)},
    )
    return value or 0


def test_requests_are_counted_by_route_template(client):
    before = request_count("GET", "/api/products/{product_id}", 404)
    unmatched_before = request_count("GET", "unmatched", 404)

    client.get("/api/products/404")
    client.get("/api/products/405")
    client.get("/no-such-page")

    assert request_count("GET", "/api/products/{product_id}", 404) == before + 2
    assert request_count("GET", "unmatched", 404) == unmatched_before + 1


class TestCatalog:
    def test_list_products(self, client):
        response = client.get("/api/products", params={"category": "string_instruments", "sort_by": "price_high"})

        assert response.status_code == 200
        body = response.json()
        assert body["source"] == "remote"
        assert [p["id"] for p in body["products"]] == ["4", "1"]
        assert body["total"] == 2

    def test_sample_catalog_when_backend_down(self, client, product_repo):
        product_repo.failing = True

        body = client.get("/api/products").json()

        assert body["source"] == "sample"
        assert body["total"] == 4

    def test_product_not_found(self, client):
        response = client.get("/api/products/404")

        assert response.status_code == 404
        assert response.json()["error_code"] == "product_not_found"

    def test_cities(self, client):
        assert "Kandy" in client.get("/api/cities").json()


# ============================================================================
# Cart
# ============================================================================


class TestCartApi:
    def test_owner_required(self, client):
        response = client.get("/api/cart")

        assert response.status_code == 400
        assert response.json()["error_code"] == "cart_owner_required"

    def test_invalid_token(self, client):
        response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_guest_cart(self, client):
        response = client.post("/api/cart/items", json={"product_id": "1", "quantity": 2}, headers=GUEST)

        assert response.status_code == 201
        body = response.json()
        assert body["total"] == 90000
        assert body["count"] == 2
        assert body["source"] == "local"

        response = client.patch("/api/cart/items/1", json={"quantity": 1}, headers=GUEST)
        assert response.json()["total"] == 45000

        response = client.delete("/api/cart/items/3", headers=GUEST)
        assert response.status_code == 404

        response = client.delete("/api/cart", headers=GUEST)
        assert response.json()["message"] == "Cart cleared"
        assert client.get("/api/cart", headers=GUEST).json()["items"] == []

    def test_quantity_validation(self, client):
        response = client.post("/api/cart/items", json={"product_id": "1", "quantity": 0}, headers=GUEST)
        assert response.status_code == 422

    def test_merge_on_login(self, client, auth):
        client.post("/api/cart/items", json={"product_id": "3"}, headers=GUEST)

        response = client.post("/api/cart/merge", json={"guest_session": "session-abc"}, headers=auth())

        assert response.status_code == 200
        body = response.json()
        assert body["merged"] is True
        assert [i["product_id"] for i in body["cart"]["items"]] == ["3"]
        assert client.get("/api/cart", headers=GUEST).json()["items"] == []
        assert client.get("/api/cart", headers=auth()).json()["count"] == 1

    def test_merge_requires_login(self, client):
        response = client.post("/api/cart/merge", json={"guest_session": "session-abc"})
        assert response.status_code == 401


# ============================================================================
# Checkout and orders
# ============================================================================


class TestCheckoutApi:
    def test_quote(self, client):
        client.post("/api/cart/items", json={"product_id": "1"}, headers=GUEST)

        body = client.get("/api/checkout/quote", headers=GUEST).json()

        assert body["subtotal"] == 45000
        assert body["delivery_fee"] == 0

    def test_guest_cannot_place_order(self, client):
        response = client.post("/api/checkout", json={"shipping_address": SHIPPING}, headers=GUEST)
        assert response.status_code == 401

    def test_place_order_and_view_it(self, client, auth):
        client.post("/api/cart/items", json={"product_id": "2"}, headers=auth())

        response = client.post("/api/checkout", json={"shipping_address": SHIPPING}, headers=auth())

        assert response.status_code == 201
        placed = response.json()
        assert placed["total_amount"] == 125000
        assert placed["is_mock"] is False
        assert client.get("/api/cart", headers=auth()).json()["items"] == []

        order = client.get(f"/api/orders/{placed['order_id']}", headers=auth()).json()
        assert order["order_number"] == placed["order_number"]
        assert order["customer"]["full_name"] == "Nimal Perera"

        history = client.get("/api/orders", headers=auth()).json()
        assert [o["id"] for o in history] == [placed["order_id"]]

    def test_other_users_order_is_hidden(self, client, auth):
        client.post("/api/cart/items", json={"product_id": "2"}, headers=auth())
        placed = client.post("/api/checkout", json={"shipping_address": SHIPPING}, headers=auth()).json()

        response = client.get(f"/api/orders/{placed['order_id']}", headers=auth(user_id="user-2"))
        assert response.status_code == 404

        response = client.get(f"/api/orders/{placed['order_id']}", headers=auth(user_id="clerk", role="staff"))
        assert response.status_code == 200

    def test_mock_order_when_backend_down(self, client, auth, order_repo):
        client.post("/api/cart/items", json={"product_id": "1"}, headers=auth())
        order_repo.failing = True

        placed = client.post("/api/checkout", json={"shipping_address": SHIPPING}, headers=auth()).json()

        assert placed["is_mock"] is True
        assert placed["order_id"].startswith("mock-")
        order = client.get(f"/api/orders/{placed['order_id']}", headers=auth()).json()
        assert order["is_mock"] is True

    def test_missing_address_fields(self, client, auth):
        client.post("/api/cart/items", json={"product_id": "1"}, headers=auth())

        response = client.post(
            "/api/checkout", json={"shipping_address": dict(SHIPPING, city="")}, headers=auth()
        )

        assert response.status_code == 422
        assert response.json()["details"]["fields"] == {"city": "City is required"}


# ============================================================================
# Wishlist and profile
# ============================================================================


def test_wishlist(client):
    assert client.post("/api/wishlist", json={"product_id": "4"}, headers=GUEST).status_code == 201

    response = client.post("/api/wishlist", json={"product_id": "4"}, headers=GUEST)
    assert response.status_code == 409

    body = client.delete("/api/wishlist/4", headers=GUEST).json()
    assert body["count"] == 0


def test_profile_defaults_to_token_claims(client, auth):
    body = client.get("/api/profile", headers=auth(role="staff")).json()
    assert body == {"id": "user-1", "email": "user@example.com", "role": "staff"}


def test_onboarding(client, auth, profile_repo):
    response = client.post(
        "/api/profile/onboarding",
        json={"responses": [{"question_id": 1, "answer": "1-3 years", "points_beginner": 2, "points_intermediate": 4}]},
        headers=auth(),
    )

    assert response.json() == {"skill_level": "intermediate", "onboarding_completed": True}
    assert profile_repo.profiles["user-1"]["skill_level"] == "intermediate"


# ============================================================================
# Back office
# ============================================================================


class TestAdminApi:
    def _place(self, client, auth, user_id="user-1"):
        client.post("/api/cart/items", json={"product_id": "1"}, headers=auth(user_id=user_id))
        return client.post("/api/checkout", json={"shipping_address": SHIPPING}, headers=auth(user_id=user_id)).json()

    def test_customers_are_rejected(self, client, auth):
        response = client.get("/api/admin/orders", headers=auth())

        assert response.status_code == 403
        assert response.json()["error_code"] == "permission_denied"

    def test_orders_and_status_update(self, client, auth):
        placed = self._place(client, auth)
        staff = auth(user_id="clerk", role="staff")

        orders = client.get("/api/admin/orders", headers=staff).json()
        assert [o["order_number"] for o in orders] == [placed["order_number"]]

        response = client.patch(
            f"/api/admin/orders/{placed['order_id']}/status",
            json={"status": "shipped", "tracking_number": "TRK-9"},
            headers=staff,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "shipped"
        assert response.json()["tracking_number"] == "TRK-9"

        shipped = client.get("/api/admin/orders", params={"status": "shipped"}, headers=staff).json()
        assert len(shipped) == 1
        assert client.get("/api/admin/orders", params={"status": "pending"}, headers=staff).json() == []

        stats = client.get("/api/admin/orders/statistics", headers=staff).json()
        assert stats["total_orders"] == 1
        assert stats["status_counts"] == {"shipped": 1}

    def test_unknown_status_is_rejected(self, client, auth):
        placed = self._place(client, auth)
        response = client.patch(
            f"/api/admin/orders/{placed['order_id']}/status",
            json={"status": "lost"},
            headers=auth(user_id="clerk", role="staff"),
        )
        assert response.status_code == 422

    def test_missing_order(self, client, auth):
        response = client.get("/api/admin/orders/missing", headers=auth(user_id="clerk", role="staff"))
        assert response.status_code == 404

    def test_products_require_admin(self, client, auth):
        response = client.get("/api/admin/products", headers=auth(user_id="clerk", role="staff"))
        assert response.status_code == 403

        response = client.get("/api/admin/products", params={"search": "tabla"}, headers=auth(role="admin"))
        assert [p["id"] for p in response.json()] == ["p3"]

    def test_delete_product(self, client, auth, product_admin_repo):
        response = client.delete("/api/admin/products/p1", headers=auth(role="admin"))

        assert response.json()["message"] == "Product deleted successfully"
        assert product_admin_repo.calls == [("delete_product", {"p_product_id": "p1"})]
