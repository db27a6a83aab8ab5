"""
Orders API Integration Tests

These tests exercise the order endpoints end to end: authentication,
error rendering, reads and the events published by the shared hub.
"""
import uuid

import pytest
from django.test import override_settings

from orders.models import Order

ORDERS_URL = "/api/orders/"


def order_url(order_id):
    return f"/api/orders/{order_id}/"


@pytest.mark.django_db
class TestOrdersAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get(ORDERS_URL)
        assert response.status_code == 401
        assert response.data["code"] == "not_authenticated"

    def test_create_single_order(self, staff_client, hub, channel_layer, table_t1, menu_item,
                                 django_capture_on_commit_callbacks):
        """
        HIGH: POST /api/orders/ creates one pendente order

        Expected: 201 with the order payload, one order:created to the
        orders room and to the table room
        """
        with django_capture_on_commit_callbacks(execute=True):
            response = staff_client.post(
                ORDERS_URL,
                {"table_ids": [str(table_t1.pk)], "menu_item_id": str(menu_item.pk), "price": "12.50"},
                format="json",
            )

        assert response.status_code == 201, response.data
        assert response.data["status"] == "pendente"
        assert response.data["created_by"]["username"] == "ana"
        assert sorted(channel_layer.rooms("order:created")) == sorted(
            ["orders", f"table:{table_t1.pk}"]
        )

    def test_batch_accepts_bare_list_and_wrapped_list(self, staff_client, table_t1, menu_item):
        item = {"table_ids": [str(table_t1.pk)], "menu_item_id": str(menu_item.pk), "price": "4.00"}

        response = staff_client.post(f"{ORDERS_URL}batch/", [item, item], format="json")
        assert response.status_code == 201
        assert len(response.data) == 2

        response = staff_client.post(f"{ORDERS_URL}batch/", {"orders": [item]}, format="json")
        assert response.status_code == 201
        assert Order.objects.count() == 3

    def test_batch_validation_error_body(self, staff_client, table_t1, menu_item):
        good = {"table_ids": [str(table_t1.pk)], "menu_item_id": str(menu_item.pk), "price": "4.00"}
        bad = dict(good, price="abc")

        response = staff_client.post(f"{ORDERS_URL}batch/", [good, bad], format="json")

        assert response.status_code == 400
        assert response.data["code"] == "validation_error"
        assert "price" in response.data["details"][1]
        assert Order.objects.count() == 0

    def test_list_filters_by_status(self, staff_client, table_t1, make_order):
        make_order([table_t1])
        make_order([table_t1], status=Order.Status.READY)
        make_order([table_t1], status=Order.Status.PAID)

        response = staff_client.get(ORDERS_URL, {"status": "pronto,pago"})

        assert response.status_code == 200
        assert sorted(order["status"] for order in response.data) == ["pago", "pronto"]

    def test_orders_for_tables(self, staff_client, table_t1, table_t2, make_table, make_order):
        other = make_table(9)
        first = make_order([table_t1])
        second = make_order([table_t2, table_t1])
        make_order([other])

        response = staff_client.get(f"{ORDERS_URL}table/{table_t1.pk},{table_t2.pk}/")

        assert response.status_code == 200
        assert {order["id"] for order in response.data} == {str(first.pk), str(second.pk)}

    def test_orders_for_tables_rejects_malformed_ids(self, staff_client):
        response = staff_client.get(f"{ORDERS_URL}table/abc,123/")
        assert response.status_code == 400

    def test_retrieve_unknown_order(self, staff_client):
        response = staff_client.get(order_url(uuid.uuid4()))
        assert response.status_code == 404
        assert response.data["code"] == "order_not_found"

    def test_patch_status(self, staff_client, table_t1, make_order, waiter):
        order = make_order([table_t1])

        response = staff_client.patch(order_url(order.pk), {"status": "aceite"}, format="json")

        assert response.status_code == 200
        assert response.data["status"] == "aceite"
        assert response.data["accepted_by"]["id"] == str(waiter.pk)

    def test_update_paid_order_price_conflicts(self, staff_client, table_t1, make_order):
        order = make_order([table_t1], status=Order.Status.PAID)

        response = staff_client.put(order_url(order.pk), {"price": "1.00"}, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "order_paid"

    def test_create_for_unknown_table_reports_table_not_found(self, staff_client, menu_item):
        missing = uuid.uuid4()
        response = staff_client.post(
            ORDERS_URL,
            {"table_ids": [str(missing)], "menu_item_id": str(menu_item.pk), "price": "4.00"},
            format="json",
        )

        assert response.status_code == 404
        assert response.data["code"] == "table_not_found"
        assert response.data["details"] == {"table_ids": [str(missing)]}
        assert Order.objects.count() == 0

    def test_delete_missing_order(self, staff_client):
        response = staff_client.delete(order_url(uuid.uuid4()))
        assert response.status_code == 404

    def test_delete_order(self, staff_client, table_t1, make_order):
        order = make_order([table_t1])
        response = staff_client.delete(order_url(order.pk))
        assert response.status_code == 204
        assert not Order.objects.filter(pk=order.pk).exists()

    def test_delete_can_be_restricted_to_managers(self, settings, staff_client, manager_client,
                                                  table_t1, make_order):
        """
        Verify the manager-only deletion variant

        Scenario:
        - ORDER_DELETE_REQUIRES_MANAGER enabled
        - Expected: waiter gets 403, manager deletes
        """
        settings.RESTAURANT = dict(settings.RESTAURANT, ORDER_DELETE_REQUIRES_MANAGER=True)
        order = make_order([table_t1])

        response = staff_client.delete(order_url(order.pk))
        assert response.status_code == 403
        assert response.data["code"] == "permission_denied"
        assert Order.objects.filter(pk=order.pk).exists()

        response = manager_client.delete(order_url(order.pk))
        assert response.status_code == 204

    @override_settings(DEBUG=False)
    def test_unexpected_failure_is_opaque(self, staff_client, monkeypatch, table_t1, make_order):
        """
        Verify unexpected exceptions surface as a generic 500

        Value: No internal detail reaches the client
        """
        from orders.services import OrderService

        def explode(*args, **kwargs):
            raise RuntimeError("database password is hunter2")

        monkeypatch.setattr(OrderService, "get_order", staticmethod(explode))
        order = make_order([table_t1])

        response = staff_client.get(order_url(order.pk))

        assert response.status_code == 500
        assert response.data == {"error": "Internal server error", "code": "internal_error"}
