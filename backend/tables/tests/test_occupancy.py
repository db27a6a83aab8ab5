"""
Table occupancy and floor listing tests.

A table is occupied exactly while at least one unpaid order references it.
"""
import uuid

import pytest

from core_backend.exceptions import NotFoundError
from orders.models import Order
from tables.models import Table
from tables.services import TableService


@pytest.mark.django_db
class TestRecomputeOccupancy:

    def test_free_table_with_unpaid_order_becomes_occupied(self, table_t1, make_order):
        make_order([table_t1])
        Table.objects.filter(pk=table_t1.pk).update(status=Table.Status.FREE)

        changed = TableService.recompute_occupancy([table_t1.pk])

        table_t1.refresh_from_db()
        assert table_t1.status == Table.Status.OCCUPIED
        assert [table.pk for table in changed] == [table_t1.pk]

    def test_only_paid_orders_frees_the_table(self, table_t1, make_order):
        """
        Scenario:
        - Table holds one paid and one cancelled order
        - Expected: cancelled still counts as unpaid, so the table stays occupied
        """
        make_order([table_t1], status=Order.Status.PAID)
        cancelled = make_order([table_t1], status=Order.Status.CANCELLED)

        assert TableService.recompute_occupancy([table_t1.pk]) == []
        table_t1.refresh_from_db()
        assert table_t1.status == Table.Status.OCCUPIED

        cancelled.delete()
        changed = TableService.recompute_occupancy([table_t1.pk])

        table_t1.refresh_from_db()
        assert table_t1.status == Table.Status.FREE
        assert len(changed) == 1

    def test_unchanged_tables_are_not_reported(self, table_t1, table_t2, make_order):
        make_order([table_t1])

        changed = TableService.recompute_occupancy([table_t1.pk, table_t2.pk, table_t1.pk])

        assert changed == []

    def test_get_tables_reports_missing_ids(self, table_t1):
        missing = uuid.uuid4()

        with pytest.raises(NotFoundError) as excinfo:
            TableService.get_tables([table_t1.pk, missing])

        assert excinfo.value.details == {"table_ids": [str(missing)]}

    def test_get_tables_keeps_request_order(self, table_t1, table_t2):
        tables = TableService.get_tables([table_t2.pk, table_t1.pk, table_t2.pk])
        assert [table.pk for table in tables] == [table_t2.pk, table_t1.pk]


@pytest.mark.django_db
class TestTableListing:

    def test_requires_authentication(self, api_client):
        response = api_client.get("/api/tables/")
        assert response.status_code == 401

    def test_lists_tables_with_status(self, staff_client, table_t1, table_t2, make_order):
        make_order([table_t2])

        response = staff_client.get("/api/tables/")

        assert response.status_code == 200
        statuses = {row["table_number"]: row["status"] for row in response.data}
        assert statuses == {1: "free", 2: "occupied"}
        assert response.data[0]["layout_name"] == "Sala Principal"

    def test_lists_tables_of_one_layout(self, staff_client, layout, table_t1):
        from tables.models import Layout

        other = Layout.objects.create(name="Esplanada")
        Table.objects.create(layout=other, table_number=1)

        response = staff_client.get(f"/api/tables/layout/{layout.pk}/")

        assert response.status_code == 200
        assert [row["id"] for row in response.data] == [str(table_t1.pk)]
