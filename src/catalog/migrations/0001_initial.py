import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProductSKU",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("category", models.CharField(db_index=True, max_length=120, verbose_name="category")),
                ("model_name", models.CharField(blank=True, default="", max_length=255, verbose_name="model name")),
                ("model_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="model price")),
            ],
            options={
                "verbose_name": "product SKU",
                "verbose_name_plural": "product SKUs",
                "ordering": ["category", "model_name"],
            },
        ),
        migrations.CreateModel(
            name="Plan",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("plan_type", models.CharField(db_index=True, max_length=64, verbose_name="plan type")),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12, verbose_name="price")),
                (
                    "price_range",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text='Either "min-max" or "min+".',
                        max_length=50,
                        verbose_name="appliance price range",
                    ),
                ),
                (
                    "incentive_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12, verbose_name="incentive amount"),
                ),
                (
                    "sku",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="plans",
                        to="catalog.productsku",
                        verbose_name="SKU",
                    ),
                ),
            ],
            options={
                "verbose_name": "plan",
                "verbose_name_plural": "plans",
                "ordering": ["sku__category", "plan_type"],
            },
        ),
        migrations.CreateModel(
            name="MRIncentive",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("category", models.CharField(db_index=True, max_length=120, verbose_name="category")),
                ("min_price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="min price")),
                ("max_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="max price")),
                ("price_range", models.CharField(blank=True, default="", max_length=80, verbose_name="price range label")),
                ("incentive_1_yr", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10, verbose_name="1 year incentive")),
                ("incentive_2_yr", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10, verbose_name="2 year incentive")),
                ("incentive_3_yr", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10, verbose_name="3 year incentive")),
                ("incentive_4_yr", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10, verbose_name="4 year incentive")),
            ],
            options={
                "verbose_name": "MR incentive band",
                "verbose_name_plural": "MR incentive bands",
                "ordering": ["category", "min_price"],
            },
        ),
        migrations.AddConstraint(
            model_name="mrincentive",
            constraint=models.UniqueConstraint(fields=("category", "min_price"), name="uniq_mr_band_category_min"),
        ),
    ]
