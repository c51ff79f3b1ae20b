"""Seed demo data for local development.

Creates a couple of stores, appliance SKUs with warranty plans, MR
incentive bands, a running campaign, one canvasser and one administrator.
Running it twice is safe; ``--flush`` wipes the seeded tables first.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone


class Command(BaseCommand):
    help = "Seed stores, SKUs, plans, MR bands, a canvasser and an admin for local development."

    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD = "admin123!"
    CANVASSER_PHONE = "9876543210"

    STORES = [
        ("Croma - Andheri West", "CRM-AW-01", "Mumbai"),
        ("Reliance Digital - Koramangala", "RD-KR-02", "Bengaluru"),
        ("Vijay Sales - Saket", "VS-SK-03", "Delhi"),
    ]

    SKUS = [
        ("Refrigerator", "RT28 Double Door 253L", Decimal("28990")),
        ("Washing Machine", "WW70 Front Load 7kg", Decimal("34990")),
        ("Air Conditioner", "AR18 Split 1.5T", Decimal("42990")),
    ]

    # (plan type, price, incentive) per SKU
    PLANS = [
        ("EXTENDED_WARRANTY_1_YR", Decimal("999"), Decimal("50")),
        ("EXTENDED_WARRANTY_2_YR", Decimal("1799"), Decimal("100")),
        ("EXTENDED_WARRANTY_3_YR", Decimal("2499"), Decimal("150")),
    ]

    # (category, min, max, 1yr, 2yr, 3yr, 4yr)
    BANDS = [
        ("Refrigerator", Decimal("10000"), Decimal("30000"), 40, 80, 120, 160),
        ("Refrigerator", Decimal("30001"), None, 60, 120, 180, 240),
        ("Washing Machine", Decimal("10000"), Decimal("40000"), 50, 100, 150, 200),
        ("Air Conditioner", Decimal("20000"), None, 75, 150, 225, 300),
    ]

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete existing demo data first")

    def handle(self, *args, **options):
        with transaction.atomic():
            if options["flush"]:
                self.stdout.write("Flushing existing data...")
                self._flush()

            self.stdout.write("Seeding data...")
            stores = self._create_stores()
            plans = self._create_catalog()
            bands = self._create_bands()
            self._create_campaign(stores[0], plans[0])
            self._create_users(stores[0])

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: {len(stores)} stores, {len(plans)} plans, {bands} MR bands, "
            f"admin '{self.ADMIN_USERNAME}', canvasser {self.CANVASSER_PHONE}"
        ))

    def _flush(self):
        from accounts.models import OtpCode, User
        from catalog.models import MRIncentive, Plan, ProductSKU
        from incentives.models import SpotIncentiveCampaign, SpotIncentiveReport
        from stores.models import Canvasser, Store, StoreChangeRequest
        from support.models import SupportQuery

        for model in [SupportQuery, SpotIncentiveReport, SpotIncentiveCampaign,
                      StoreChangeRequest, Canvasser, Plan, ProductSKU, MRIncentive,
                      Store, OtpCode]:
            model.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def _create_stores(self):
        from stores.models import Store

        stores = []
        for name, code, city in self.STORES:
            store, _ = Store.objects.update_or_create(
                code=code,
                defaults={"name": name, "city": city, "number_of_canvassers": 2},
            )
            stores.append(store)
        return stores

    def _create_catalog(self):
        from catalog.models import Plan, ProductSKU

        plans = []
        for category, model_name, model_price in self.SKUS:
            sku, _ = ProductSKU.objects.update_or_create(
                category=category,
                model_name=model_name,
                defaults={"model_price": model_price},
            )
            for plan_type, price, incentive in self.PLANS:
                plan, _ = Plan.objects.update_or_create(
                    sku=sku,
                    plan_type=plan_type,
                    defaults={
                        "price": price,
                        "price_range": "10000-60000",
                        "incentive_amount": incentive,
                    },
                )
                plans.append(plan)
        return plans

    def _create_bands(self):
        from catalog.models import MRIncentive

        for category, low, high, one, two, three, four in self.BANDS:
            MRIncentive.objects.update_or_create(
                category=category,
                min_price=low,
                defaults={
                    "max_price": high,
                    "incentive_1_yr": Decimal(one),
                    "incentive_2_yr": Decimal(two),
                    "incentive_3_yr": Decimal(three),
                    "incentive_4_yr": Decimal(four),
                },
            )
        return len(self.BANDS)

    def _create_campaign(self, store, plan):
        from incentives.models import SpotIncentiveCampaign

        now = timezone.now()
        SpotIncentiveCampaign.objects.get_or_create(
            store=store,
            sku=plan.sku,
            plan=plan,
            defaults={
                "incentive_type": SpotIncentiveCampaign.IncentiveType.FIXED,
                "incentive_value": Decimal("100"),
                "start_date": now - timedelta(days=1),
                "end_date": now + timedelta(days=30),
            },
        )

    def _create_users(self, store):
        from accounts.models import User
        from stores.models import Canvasser

        admin = User.objects.filter(username=self.ADMIN_USERNAME).first()
        if admin is None:
            admin = User.objects.create_superuser(
                self.ADMIN_USERNAME,
                self.ADMIN_PASSWORD,
                full_name="Zopper Admin",
                phone="9000000001",
            )

        user, _ = User.objects.get_or_create(
            username=self.CANVASSER_PHONE,
            defaults={
                "phone": self.CANVASSER_PHONE,
                "full_name": "Demo Canvasser",
                "role": User.Role.CANVASSER,
                "validation": User.Validation.APPROVED,
            },
        )
        Canvasser.objects.update_or_create(
            phone=self.CANVASSER_PHONE,
            defaults={"user": user, "full_name": "Demo Canvasser", "store": store},
        )
        return admin, user
