import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("stores", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SpotIncentiveCampaign",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "incentive_type",
                    models.CharField(
                        choices=[("FIXED", "Fixed amount"), ("PERCENTAGE", "Percentage of plan price")],
                        default="FIXED",
                        max_length=16,
                        verbose_name="incentive type",
                    ),
                ),
                ("incentive_value", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="incentive value")),
                ("start_date", models.DateTimeField(verbose_name="start date")),
                ("end_date", models.DateTimeField(verbose_name="end date")),
                ("active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                (
                    "plan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaigns",
                        to="catalog.plan",
                        verbose_name="plan",
                    ),
                ),
                (
                    "sku",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaigns",
                        to="catalog.productsku",
                        verbose_name="SKU",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="campaigns",
                        to="stores.store",
                        verbose_name="store",
                    ),
                ),
            ],
            options={
                "verbose_name": "spot incentive campaign",
                "verbose_name_plural": "spot incentive campaigns",
                "ordering": ["-start_date"],
            },
        ),
        migrations.CreateModel(
            name="SpotIncentiveReport",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("serial_number", models.CharField(max_length=100, unique=True, verbose_name="serial number")),
                ("invoice_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="invoice price")),
                ("incentive_earned", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10, verbose_name="incentive earned")),
                ("is_campaign_active", models.BooleanField(default=False, verbose_name="campaign active")),
                ("date_of_sale", models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="date of sale")),
                ("customer_name", models.CharField(blank=True, default="", max_length=200, verbose_name="customer name")),
                ("customer_phone", models.CharField(blank=True, default="", max_length=20, verbose_name="customer phone")),
                ("paid_at", models.DateTimeField(blank=True, db_index=True, null=True, verbose_name="paid at")),
                ("voucher_code", models.CharField(blank=True, db_index=True, default="", max_length=100, verbose_name="voucher code")),
                ("transaction_id", models.CharField(blank=True, max_length=100, null=True, unique=True, verbose_name="transaction id")),
                ("transaction_metadata", models.JSONField(blank=True, default=dict, verbose_name="transaction metadata")),
                (
                    "canvasser",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reports",
                        to="stores.canvasser",
                        verbose_name="canvasser",
                    ),
                ),
                (
                    "plan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reports",
                        to="catalog.plan",
                        verbose_name="plan",
                    ),
                ),
                (
                    "sku",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reports",
                        to="catalog.productsku",
                        verbose_name="SKU",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reports",
                        to="stores.store",
                        verbose_name="store",
                    ),
                ),
            ],
            options={
                "verbose_name": "spot incentive report",
                "verbose_name_plural": "spot incentive reports",
                "ordering": ["-date_of_sale"],
            },
        ),
    ]
