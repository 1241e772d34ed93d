"""
Shared builders for the test suites.

Each helper creates a valid row with sensible defaults; keyword arguments
override any field.
"""

import itertools
from decimal import Decimal

_counter = itertools.count(1)


def _next():
    return next(_counter)


def create_location(**kwargs):
    from apps.locationsapp.models import Location

    n = _next()
    defaults = {
        "name": f"Branch {n}",
        "code": f"BR{n:03d}",
        "address": "Bole Road",
        "city": "Addis Ababa",
        "country": "Ethiopia",
        "phone": "0111234567",
    }
    defaults.update(kwargs)
    return Location.objects.create(**defaults)


def create_user(role="technician", location=None, **kwargs):
    from apps.authapp.models import User

    n = _next()
    defaults = {
        "username": f"user{n}",
        "email": f"user{n}@example.com",
        "password": "s3cret-pass",
        "role": role,
        "location": location,
    }
    defaults.update(kwargs)
    return User.objects.create_user(**defaults)


def create_admin(**kwargs):
    return create_user(role="admin", **kwargs)


def create_customer(location, **kwargs):
    from apps.customersapp.models import Customer

    n = _next()
    defaults = {
        "name": f"Customer {n}",
        "phone": f"0911{n:06d}",
        "location": location,
    }
    defaults.update(kwargs)
    return Customer.objects.create(**defaults)


def create_device(customer, location=None, **kwargs):
    from apps.devicesapp.models import Device

    n = _next()
    defaults = {
        "customer": customer,
        "location": location or customer.location,
        "device_type_name": "Smartphone",
        "brand_name": "Samsung",
        "model_name": "Galaxy A52",
        "problem_description": "Cracked screen",
        "receipt_number": f"RCP-TEST-{n:06d}",
        "total_cost": Decimal("1500.00"),
    }
    defaults.update(kwargs)
    return Device.objects.create(**defaults)


def create_inventory_item(location, **kwargs):
    from apps.inventoryapp.models import InventoryItem

    n = _next()
    defaults = {
        "location": location,
        "name": f"Screen protector {n}",
        "sku": f"SKU-{n:05d}",
        "quantity": 20,
        "min_stock_level": 5,
        "purchase_price": Decimal("50.00"),
        "sale_price": Decimal("120.00"),
    }
    defaults.update(kwargs)
    return InventoryItem.objects.create(**defaults)
