import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("stores", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SupportQuery",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("query_number", models.CharField(max_length=16, unique=True, verbose_name="query number")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("TECHNICAL_ISSUE", "Technical Issue"),
                            ("ACCOUNT_PROBLEM", "Account Problem"),
                            ("PAYMENT_INQUIRY", "Payment Inquiry"),
                            ("TRAINING_SUPPORT", "Training Support"),
                            ("GENERAL_INQUIRY", "General Inquiry"),
                            ("BUG_REPORT", "Bug Report"),
                            ("FEATURE_REQUEST", "Feature Request"),
                            ("OTHER", "Other"),
                        ],
                        max_length=32,
                        verbose_name="category",
                    ),
                ),
                ("description", models.TextField(max_length=2500, verbose_name="description")),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("IN_PROGRESS", "In progress"), ("RESOLVED", "Resolved")],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                        verbose_name="status",
                    ),
                ),
                ("resolved_at", models.DateTimeField(blank=True, null=True, verbose_name="resolved at")),
                (
                    "canvasser",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="support_queries",
                        to="stores.canvasser",
                        verbose_name="canvasser",
                    ),
                ),
            ],
            options={
                "verbose_name": "support query",
                "verbose_name_plural": "support queries",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="SupportQueryMessage",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("is_from_admin", models.BooleanField(default=False, verbose_name="from admin")),
                ("admin_name", models.CharField(blank=True, default="", max_length=150, verbose_name="admin name")),
                ("message", models.TextField(verbose_name="message")),
                (
                    "author",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="author",
                    ),
                ),
                (
                    "query",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="support.supportquery",
                        verbose_name="query",
                    ),
                ),
            ],
            options={
                "verbose_name": "support message",
                "verbose_name_plural": "support messages",
                "ordering": ["created_at"],
            },
        ),
    ]
