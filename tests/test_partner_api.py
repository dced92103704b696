"""Delivery partner endpoints: my orders, status changes, availability, location."""

import pytest

from app.modules.orders.service import OrderService
from app.shared.constants import OrderStatus, UserRole


@pytest.fixture()
def partner(make_partner):
    return make_partner("luis@example.com", name="Luis")


@pytest.fixture()
def partner_headers(partner, headers_for):
    return headers_for(partner.user_id)


@pytest.fixture()
def assigned_order(db, partner, make_order):
    order_pk = make_order("O1")
    OrderService(db).assign_order(order_pk, partner.id)
    return order_pk


class TestPartnerAccess:
    def test_requires_token(self, client):
        assert client.get("/api/v1/partner/orders").status_code == 401

    def test_admin_token_is_rejected(self, client, admin_headers):
        response = client.get("/api/v1/partner/profile", headers=admin_headers)

        assert response.status_code == 403
        assert response.json()["message"] == (
            "Insufficient permissions. User role: admin, Required: delivery_partner"
        )

    def test_partner_user_without_profile(self, client, make_user, headers_for):
        user = make_user("orphan@example.com", UserRole.DELIVERY_PARTNER)

        response = client.get("/api/v1/partner/orders", headers=headers_for(user.id))

        assert response.status_code == 404
        assert response.json()["message"] == "Partner profile not found"


class TestMyOrders:
    def test_list_only_my_orders(self, client, db, partner, partner_headers, assigned_order, make_partner, make_order):
        other = make_partner("other@example.com", name="Other")
        OrderService(db).assign_order(make_order("O2"), other.id)
        make_order("O3")

        response = client.get("/api/v1/partner/orders", headers=partner_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["partner_id"] == partner.id
        assert body["orders"][0]["order_id"] == "O1"

    def test_status_filter(self, client, db, partner, partner_headers, assigned_order, make_order):
        second = make_order("O2")
        orders = OrderService(db)
        orders.assign_order(second, partner.id)
        orders.advance_status(second, partner, OrderStatus.PICKED_UP)

        picked_up = client.get("/api/v1/partner/orders?status=picked_up", headers=partner_headers)
        assert [o["order_id"] for o in picked_up.json()["orders"]] == ["O2"]

        delivered = client.get("/api/v1/partner/orders?status=delivered", headers=partner_headers)
        assert delivered.json()["count"] == 0

    def test_unknown_status_filter(self, client, partner_headers):
        response = client.get("/api/v1/partner/orders?status=lost", headers=partner_headers)
        assert response.status_code == 422

    def test_active_orders(self, client, db, partner, partner_headers, assigned_order, make_order):
        done = make_order("O2")
        orders = OrderService(db)
        orders.assign_order(done, partner.id)
        orders.advance_status(done, partner, OrderStatus.PICKED_UP)
        orders.advance_status(done, partner, OrderStatus.DELIVERED)

        response = client.get("/api/v1/partner/orders/active", headers=partner_headers)

        assert response.status_code == 200
        assert [o["order_id"] for o in response.json()["orders"]] == ["O1"]


class TestOrderStatus:
    def test_pick_up_and_deliver(self, client, partner, partner_headers, assigned_order):
        url = f"/api/v1/partner/orders/{assigned_order}/status"

        picked = client.put(url, json={"status": "picked_up"}, headers=partner_headers)
        assert picked.status_code == 200
        assert picked.json()["order"]["status"] == "picked_up"

        delivered = client.put(url, json={"status": "delivered"}, headers=partner_headers)
        assert delivered.status_code == 200
        assert delivered.json()["order"]["status"] == "delivered"
        assert delivered.json()["order"]["assigned_to"] == partner.id

    def test_skipping_a_step(self, client, partner_headers, assigned_order):
        response = client.put(
            f"/api/v1/partner/orders/{assigned_order}/status",
            json={"status": "delivered"},
            headers=partner_headers
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "INVALID_TRANSITION"
        assert body["message"] == "Cannot change status from assigned to delivered"

    def test_unknown_status_value(self, client, partner_headers, assigned_order):
        response = client.put(
            f"/api/v1/partner/orders/{assigned_order}/status",
            json={"status": "lost"},
            headers=partner_headers
        )
        assert response.status_code == 422

    def test_order_of_another_partner(self, client, make_partner, headers_for, assigned_order):
        intruder = make_partner("intruder@example.com", name="Intruder")

        response = client.put(
            f"/api/v1/partner/orders/{assigned_order}/status",
            json={"status": "picked_up"},
            headers=headers_for(intruder.user_id)
        )

        assert response.status_code == 403
        assert response.json()["message"] == "This order is not assigned to you"

    def test_missing_order(self, client, partner_headers):
        response = client.put(
            "/api/v1/partner/orders/missing/status",
            json={"status": "picked_up"},
            headers=partner_headers
        )
        assert response.status_code == 404


class TestAvailability:
    def test_go_unavailable_and_back(self, client, partner_headers):
        response = client.put(
            "/api/v1/partner/status", json={"availability_status": "unavailable"}, headers=partner_headers
        )
        assert response.status_code == 200
        assert response.json()["partner"]["availability_status"] == "unavailable"

        response = client.put(
            "/api/v1/partner/status", json={"availability_status": "available"}, headers=partner_headers
        )
        assert response.json()["partner"]["availability_status"] == "available"

    def test_refused_with_active_order(self, client, partner_headers, assigned_order):
        response = client.put(
            "/api/v1/partner/status", json={"availability_status": "unavailable"}, headers=partner_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

        profile = client.get("/api/v1/partner/profile", headers=partner_headers).json()
        assert profile["partner"]["availability_status"] == "available"

    def test_unknown_availability(self, client, partner_headers):
        response = client.put(
            "/api/v1/partner/status", json={"availability_status": "busy"}, headers=partner_headers
        )
        assert response.status_code == 422


class TestLocation:
    def test_update(self, client, partner_headers):
        response = client.put(
            "/api/v1/partner/location",
            json={"latitude": 40.4, "longitude": -3.7, "address": "Gran Via 1"},
            headers=partner_headers
        )

        assert response.status_code == 200
        assert response.json()["current_location"] == {
            "latitude": 40.4, "longitude": -3.7, "address": "Gran Via 1"
        }

    @pytest.mark.parametrize("payload", [
        {"latitude": "40.4", "longitude": -3.7},
        {"latitude": 40.4},
        {"latitude": True, "longitude": -3.7},
    ])
    def test_not_numbers(self, client, partner_headers, payload):
        response = client.put("/api/v1/partner/location", json=payload, headers=partner_headers)
        assert response.status_code == 422

    def test_out_of_range(self, client, partner_headers):
        response = client.put(
            "/api/v1/partner/location", json={"latitude": 95, "longitude": 0}, headers=partner_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid coordinates"


class TestProfile:
    def test_profile_with_stats(self, client, db, partner, partner_headers, assigned_order, make_order):
        done = make_order("O2")
        orders = OrderService(db)
        orders.assign_order(done, partner.id)
        orders.advance_status(done, partner, OrderStatus.PICKED_UP)
        orders.advance_status(done, partner, OrderStatus.DELIVERED)

        response = client.get("/api/v1/partner/profile", headers=partner_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["partner"]["name"] == "Luis"
        assert body["partner"]["email"] == "luis@example.com"
        assert body["stats"] == {
            "total_orders": 2,
            "active_orders": 1,
            "completed_orders": 1,
            "picked_up_orders": 0
        }
