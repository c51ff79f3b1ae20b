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
            name="ClaimProcedurePDF",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("title", models.CharField(max_length=255, verbose_name="title")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                ("category", models.CharField(default="GENERAL", max_length=64, verbose_name="category")),
                ("file_name", models.CharField(max_length=255, verbose_name="file name")),
                ("file_size", models.PositiveIntegerField(verbose_name="file size")),
                ("content", models.BinaryField(verbose_name="content")),
                ("content_type", models.CharField(default="application/pdf", max_length=100, verbose_name="content type")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                (
                    "uploaded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="uploaded by",
                    ),
                ),
            ],
            options={
                "verbose_name": "claim procedure PDF",
                "verbose_name_plural": "claim procedure PDFs",
                "ordering": ["-created_at"],
            },
        ),
    ]
