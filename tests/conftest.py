"""
Shared fixtures for the CementOps test suite: staff accounts, master data,
a dispatchable truck + driver unit and an order factory.
"""

import uuid
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

Agent = get_user_model()


# ═══════════════════════════════════════════════════════════════════════════════
# STAFF
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_agent(db):
    def _make(phone=None, role="DISPATCHER", **kwargs):
        phone = phone or f"+2348{uuid.uuid4().int % 1000000000:09d}"
        return Agent.objects.create_user(
            phone=phone, password="Test@1234",
            full_name=kwargs.get("full_name", "Test Agent"),
            role=role,
        )
    return _make


@pytest.fixture
def dispatcher(make_agent):
    return make_agent(phone="+2348031000001", role="DISPATCHER", full_name="Dispatcher Dayo")


@pytest.fixture
def accountant(make_agent):
    return make_agent(phone="+2348031000002", role="ACCOUNTANT", full_name="Accountant Ada")


@pytest.fixture
def manager(make_agent):
    return make_agent(phone="+2348031000003", role="MANAGER", full_name="Manager Musa")


@pytest.fixture
def auth_client(api_client, dispatcher):
    api_client.force_authenticate(user=dispatcher)
    return api_client


@pytest.fixture
def finance_client(api_client, accountant):
    api_client.force_authenticate(user=accountant)
    return api_client


@pytest.fixture
def manager_client(api_client, manager):
    api_client.force_authenticate(user=manager)
    return api_client


# ═══════════════════════════════════════════════════════════════════════════════
# MASTER DATA
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def depot(db):
    """Stocked with enough Dangote 42.5R, in bags and in tons, for any test dispatch."""
    from apps.orders.models import Depot, Inventory
    depot = Depot.objects.create(name="Kano Depot", address="Sharada Industrial Estate")
    Inventory.objects.create(depot=depot, cement_type="Dangote 42.5R", unit="bags", quantity=Decimal("100000"),
                             cost_price_bag=Decimal("4500"), selling_price_bag=Decimal("5000"))
    Inventory.objects.create(depot=depot, cement_type="Dangote 42.5R", unit="tons", quantity=Decimal("5000"),
                             cost_price_ton=Decimal("90000"), selling_price_ton=Decimal("100000"))
    return depot


@pytest.fixture
def stock(depot):
    from apps.orders.models import Inventory
    return Inventory.objects.get(depot=depot, cement_type="Dangote 42.5R", unit="bags")


@pytest.fixture
def supplier(db):
    from apps.orders.models import Supplier
    return Supplier.objects.create(name="Dangote Cement Plc", contact_person="Sales Desk")


@pytest.fixture
def customer(db):
    from apps.customers.models import Customer
    return Customer.objects.create(
        name="Bello Builders Ltd", phone="+2348035550001", address="12 Zoo Road, Kano",
        credit_limit=Decimal("10000000.00"),
    )


@pytest.fixture
def make_unit(db):
    """Truck paired with a driver; both active, no documents on file."""
    from apps.fleet.models import Driver, Truck

    def _make(plate="KAN-101-XA", driver_name="Driver One", fuel=Decimal("85000"),
              allowance=Decimal("15000"), **truck_kwargs):
        driver = Driver.objects.create(
            name=driver_name, phone=f"+2348{uuid.uuid4().int % 1000000000:09d}",
            standard_allowance=allowance,
        )
        truck = Truck.objects.create(
            plate_number=plate, driver=driver, default_fuel_cost=fuel,
            capacity_tons=Decimal("30"), **truck_kwargs,
        )
        return truck, driver
    return _make


@pytest.fixture
def unit(make_unit):
    return make_unit(plate="T1-KAN-001", driver_name="D1 Garba")


# ═══════════════════════════════════════════════════════════════════════════════
# ORDERS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def controller():
    from apps.orders.service import OrderLifecycleController
    return OrderLifecycleController(otp_notifier=MagicMock())


@pytest.fixture
def make_order(controller, customer, depot):
    def _make(quantity="600", unit="bags", price="5000", **kwargs):
        data = {
            "customer":          kwargs.pop("customer", customer),
            "depot":             kwargs.pop("depot", depot),
            "cement_type":       "Dangote 42.5R",
            "quantity":          Decimal(quantity),
            "unit":              unit,
            "cement_sale_price": Decimal(price),
            **kwargs,
        }
        return controller.create_order(data)
    return _make


@pytest.fixture
def dispatched_order(controller, make_order, unit):
    truck, driver = unit
    order = make_order()
    controller.dispatch(order.id, truck_id=truck.id, driver_id=driver.id)
    order.refresh_from_db()
    return order
