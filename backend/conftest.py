"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
from decimal import Decimal

import pytest
from asgiref.sync import async_to_sync
from django.apps import apps

from realtime.tests.layers import RecordingChannelLayer
from users.tests.helpers import access_token_for


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def flush_channel_layer():
    """
    Drop in-memory group membership after each test so rooms joined by one
    test never receive events from another.
    """
    yield
    hub = apps.get_app_config("realtime").hub
    layer = hub.channel_layer
    if hasattr(layer, "flush"):
        async_to_sync(layer.flush)()


# ============================================================================
# EVENT HUB FIXTURES
# ============================================================================

@pytest.fixture
def channel_layer():
    return RecordingChannelLayer()


@pytest.fixture
def hub(channel_layer, monkeypatch):
    """
    The process-wide hub (shared with the URL-configured views) writing to a
    RecordingChannelLayer for the duration of the test.

    Events are published on commit; wrap mutations in
    ``django_capture_on_commit_callbacks(execute=True)`` to observe them.
    """
    app_hub = apps.get_app_config("realtime").hub
    monkeypatch.setattr(app_hub, "channel_layer", channel_layer)
    return app_hub


# ============================================================================
# USER / TOKEN FIXTURES
# ============================================================================

@pytest.fixture
def waiter(django_user_model):
    return django_user_model.objects.create_user(
        username="ana",
        email="ana@restaurant.test",
        password="secret-pass-1",
        name="Ana Waiter",
        labels=["waiter"],
    )


@pytest.fixture
def manager(django_user_model):
    return django_user_model.objects.create_user(
        username="rui",
        email="rui@restaurant.test",
        password="secret-pass-2",
        name="Rui Manager",
        labels=["manager"],
    )


@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/health/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def staff_client(api_client, waiter):
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token_for(waiter)}")
    return api_client


@pytest.fixture
def manager_client(manager):
    from rest_framework.test import APIClient

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token_for(manager)}")
    return client


# ============================================================================
# FLOOR / MENU FIXTURES
# ============================================================================

@pytest.fixture
def layout(db):
    from tables.models import Layout
    return Layout.objects.create(name="Sala Principal")


@pytest.fixture
def make_table(layout):
    from tables.models import Table

    def _make_table(number, **kwargs):
        return Table.objects.create(layout=layout, table_number=number, **kwargs)

    return _make_table


@pytest.fixture
def table_t1(make_table):
    return make_table(1)


@pytest.fixture
def table_t2(make_table):
    return make_table(2)


@pytest.fixture
def menu_item(db):
    from menu.models import MenuItem
    return MenuItem.objects.create(name="Bitoque", price=Decimal("12.50"), category="Pratos")


@pytest.fixture
def make_order(menu_item):
    """
    Inserts an unpaid order directly (bypassing OrderService) and marks its
    tables occupied, as the create flow would.
    """
    from orders.models import Order, OrderTable
    from tables.models import Table

    def _make_order(tables, price="5.00", status=None, **kwargs):
        order = Order.objects.create(
            menu_item=menu_item,
            price=Decimal(price),
            status=status or Order.Status.PENDING,
            **kwargs,
        )
        for position, table in enumerate(tables):
            OrderTable.objects.create(order=order, table=table, position=position)
        Table.objects.filter(pk__in=[table.pk for table in tables]).update(
            status=Table.Status.OCCUPIED
        )
        return order

    return _make_order
