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
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("BOOKING_CONFIRMATION", "Booking request sent"),
                            ("NEW_BOOKING_NOTIFICATION", "New booking request"),
                            ("BOOKING_CONFIRMED", "Booking confirmed"),
                            ("BOOKING_REJECTED", "Booking rejected"),
                            ("BOOKING_CANCELLED", "Booking cancelled"),
                            ("BOOKING_COMPLETED", "Booking completed"),
                            ("BOOKING_UPDATED", "Booking updated"),
                            ("CONTRACT_READY", "Contract ready"),
                            ("MOVE_IN_REMINDER", "Move-in reminder"),
                        ],
                        max_length=40,
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField()),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
