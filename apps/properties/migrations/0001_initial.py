import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "property_type",
                    models.CharField(
                        choices=[
                            ("full-house", "Full house"),
                            ("single-room", "Single room"),
                            ("multi-room", "Multi room"),
                            ("pg", "Paying guest"),
                        ],
                        default="multi-room",
                        max_length=20,
                    ),
                ),
                ("city", models.CharField(max_length=100)),
                ("address_line", models.CharField(blank=True, max_length=255)),
                (
                    "base_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "bill_type",
                    models.CharField(
                        choices=[("daily", "Daily"), ("monthly", "Monthly")],
                        default="monthly",
                        max_length=10,
                    ),
                ),
                (
                    "total_rooms",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("available_rooms", models.PositiveIntegerField()),
                ("available_from", models.DateField()),
                ("is_active", models.BooleanField(default=True)),
                ("is_verified", models.BooleanField(default=False)),
                ("is_rented", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Property",
                "verbose_name_plural": "Properties",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_active", "is_verified"], name="properties__is_acti_5f1c2b_idx"),
                    models.Index(fields=["owner", "is_active"], name="properties__owner_i_8d3e41_idx"),
                    models.Index(fields=["available_rooms"], name="properties__availab_2a7c90_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_rooms__gte=1),
                        name="property_total_rooms_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(available_rooms__gte=0)
                        & models.Q(available_rooms__lte=models.F("total_rooms")),
                        name="property_available_rooms_within_total",
                    ),
                ],
            },
        ),
    ]
