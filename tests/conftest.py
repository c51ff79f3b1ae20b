from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from catalog.models import MRIncentive, Plan, ProductSKU
from incentives.models import SpotIncentiveReport
from stores.models import Canvasser, Store


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        "zopper.admin",
        password="testpass123",
        full_name="Zopper Admin",
        phone="9000000001",
        role=User.Role.ZOPPER_ADMINISTRATOR,
        validation=User.Validation.APPROVED,
    )


@pytest.fixture
def uat_user(db):
    return User.objects.create_user(
        "benepik.uat",
        password="testpass123",
        role=User.Role.ZOPPER_ADMINISTRATOR,
        validation=User.Validation.APPROVED,
        metadata={"isUatUser": True},
    )


@pytest.fixture
def store(db):
    return Store.objects.create(
        name="PALAYAMKOTTAI - (1302)",
        code="1302",
        city="PALAYAMKOTTAI",
        number_of_canvassers=2,
    )


@pytest.fixture
def other_store(db):
    return Store.objects.create(name="MADURAI - (1410)", code="1410", city="MADURAI")


@pytest.fixture
def canvasser_user(db):
    return User.objects.create_user(
        "9876543210",
        phone="9876543210",
        full_name="Ravi Kumar",
        role=User.Role.CANVASSER,
        validation=User.Validation.APPROVED,
    )


@pytest.fixture
def canvasser(canvasser_user, store):
    return Canvasser.objects.create(
        user=canvasser_user,
        phone="9876543210",
        full_name="Ravi Kumar",
        email="ravi@example.com",
        store=store,
    )


@pytest.fixture
def sku(db):
    return ProductSKU.objects.create(
        category="Refrigerator",
        model_name="RT28 Double Door",
        model_price=Decimal("28990"),
    )


@pytest.fixture
def plan(sku):
    return Plan.objects.create(
        sku=sku,
        plan_type="EXTENDED_WARRANTY_2_YR",
        price=Decimal("1799"),
        price_range="10000-40000",
        incentive_amount=Decimal("100"),
    )


@pytest.fixture
def band(db):
    return MRIncentive.objects.create(
        category="Refrigerator",
        min_price=Decimal("10000"),
        max_price=Decimal("30000"),
        incentive_1_yr=Decimal("40"),
        incentive_2_yr=Decimal("80"),
        incentive_3_yr=Decimal("120"),
        incentive_4_yr=Decimal("160"),
    )


@pytest.fixture
def make_report(canvasser, store, sku, plan):
    def _make(serial="SN-0001", incentive="150", **extra):
        values = {
            "canvasser": canvasser,
            "store": store,
            "sku": sku,
            "plan": plan,
            "serial_number": serial,
            "incentive_earned": Decimal(incentive),
            "date_of_sale": timezone.now() - timedelta(days=1),
        }
        values.update(extra)
        return SpotIncentiveReport.objects.create(**values)

    return _make


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def canvasser_client(api_client, canvasser):
    api_client.force_authenticate(user=canvasser.user)
    return api_client
