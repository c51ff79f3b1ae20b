import uuid

import django.utils.timezone
from django.db import migrations, models

import accounts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "username",
                    models.CharField(
                        error_messages={"unique": "A user with this username already exists."},
                        max_length=150,
                        unique=True,
                        verbose_name="username",
                    ),
                ),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="email address")),
                ("full_name", models.CharField(blank=True, default="", max_length=200, verbose_name="full name")),
                ("phone", models.CharField(blank=True, db_index=True, default="", max_length=20, verbose_name="phone")),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("ABM", "Area Business Manager"),
                            ("ASE", "Area Sales Executive"),
                            ("ZSM", "Zonal Sales Manager"),
                            ("ZSE", "Zonal Sales Executive"),
                            ("CANVASSER", "Canvasser"),
                            ("SEC", "SEC (legacy canvasser)"),
                            ("SAMSUNG_ADMINISTRATOR", "Samsung administrator"),
                            ("ZOPPER_ADMINISTRATOR", "Zopper administrator"),
                        ],
                        db_index=True,
                        default="CANVASSER",
                        max_length=32,
                        verbose_name="role",
                    ),
                ),
                (
                    "validation",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("BLOCKED", "Blocked")],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                        verbose_name="validation",
                    ),
                ),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                ("is_staff", models.BooleanField(default=False, verbose_name="staff status")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "ordering": ["username"],
            },
            managers=[
                ("objects", accounts.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="OtpCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("phone", models.CharField(db_index=True, max_length=20, verbose_name="phone")),
                ("code", models.CharField(max_length=6, verbose_name="code")),
                (
                    "purpose",
                    models.CharField(
                        choices=[("LOGIN", "Canvasser login"), ("REWARD", "Reward dispatch confirmation")],
                        default="LOGIN",
                        max_length=16,
                        verbose_name="purpose",
                    ),
                ),
                ("expires_at", models.DateTimeField(verbose_name="expires at")),
                ("verified", models.BooleanField(default=False, verbose_name="verified")),
                ("verified_at", models.DateTimeField(blank=True, null=True, verbose_name="verified at")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "OTP code",
                "verbose_name_plural": "OTP codes",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["phone", "purpose", "verified"], name="otp_phone_purpose_idx"),
                ],
            },
        ),
    ]
