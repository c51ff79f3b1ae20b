import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Store",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(db_index=True, max_length=255, verbose_name="name")),
                ("code", models.CharField(blank=True, max_length=50, null=True, unique=True, verbose_name="code")),
                ("city", models.CharField(blank=True, db_index=True, default="", max_length=120, verbose_name="city")),
                ("number_of_canvassers", models.PositiveIntegerField(default=0, verbose_name="number of canvassers")),
            ],
            options={
                "verbose_name": "store",
                "verbose_name_plural": "stores",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Canvasser",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("phone", models.CharField(max_length=20, unique=True, verbose_name="phone")),
                ("full_name", models.CharField(blank=True, default="", max_length=200, verbose_name="full name")),
                ("employee_id", models.CharField(blank=True, db_index=True, default="", max_length=50, verbose_name="employee id")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="email")),
                ("agency", models.CharField(blank=True, default="", max_length=200, verbose_name="agency")),
                ("kyc_info", models.JSONField(blank=True, default=dict, verbose_name="KYC info")),
                (
                    "store",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="canvassers",
                        to="stores.store",
                        verbose_name="store",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="canvasser_profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "canvasser",
                "verbose_name_plural": "canvassers",
                "ordering": ["full_name", "phone"],
            },
        ),
        migrations.CreateModel(
            name="StoreChangeRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("reason", models.TextField(blank=True, default="", verbose_name="reason")),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("REJECTED", "Rejected")],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                        verbose_name="status",
                    ),
                ),
                ("review_notes", models.TextField(blank=True, default="", verbose_name="review notes")),
                ("reviewed_at", models.DateTimeField(blank=True, null=True, verbose_name="reviewed at")),
                (
                    "canvasser",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="store_change_requests",
                        to="stores.canvasser",
                        verbose_name="canvasser",
                    ),
                ),
                (
                    "current_store",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="stores.store",
                        verbose_name="current store",
                    ),
                ),
                (
                    "requested_store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="incoming_change_requests",
                        to="stores.store",
                        verbose_name="requested store",
                    ),
                ),
                (
                    "reviewed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="reviewed by",
                    ),
                ),
            ],
            options={
                "verbose_name": "store change request",
                "verbose_name_plural": "store change requests",
                "ordering": ["-created_at"],
            },
        ),
    ]
