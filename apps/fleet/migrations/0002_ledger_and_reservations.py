import uuid
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("fleet", "0001_initial"),
        ("orders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DriverTransaction",
            fields=[
                ("id",               models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("type",             models.CharField(
                    choices=[
                        ("shortage_deduction", "Shortage Deduction"),
                        ("allowance", "Allowance"),
                        ("salary_payment", "Salary Payment"),
                        ("bonus", "Bonus"),
                        ("deposit", "Deposit"),
                        ("other", "Other Credit"),
                    ],
                    max_length=20,
                )),
                ("amount",           models.DecimalField(decimal_places=2, max_digits=12,
                                                         validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("description",      models.CharField(blank=True, max_length=255)),
                ("transaction_date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at",       models.DateTimeField(auto_now_add=True)),
                ("driver",           models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                       related_name="transactions", to="fleet.driver")),
                ("order",            models.ForeignKey(blank=True, null=True,
                                                       on_delete=django.db.models.deletion.PROTECT,
                                                       related_name="driver_transactions", to="orders.order")),
                ("created_by",       models.ForeignKey(blank=True, null=True,
                                                       on_delete=django.db.models.deletion.SET_NULL,
                                                       to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["-transaction_date", "-created_at"]},
        ),
        migrations.AddIndex(
            model_name="drivertransaction",
            index=models.Index(fields=["driver", "transaction_date"], name="drvtx_driver_date_idx"),
        ),
        migrations.AddConstraint(
            model_name="drivertransaction",
            constraint=models.UniqueConstraint(
                condition=models.Q(("type", "shortage_deduction")),
                fields=("order",),
                name="uniq_shortage_deduction_per_order",
            ),
        ),
        migrations.CreateModel(
            name="FleetReservation",
            fields=[
                ("id",             models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("acquired_at",    models.DateTimeField(default=django.utils.timezone.now)),
                ("released_at",    models.DateTimeField(blank=True, null=True)),
                ("release_reason", models.CharField(
                    blank=True,
                    choices=[
                        ("delivered", "Delivered"),
                        ("reassigned", "Re-assigned"),
                        ("cancelled", "Order cancelled / deleted"),
                    ],
                    max_length=12,
                )),
                ("truck",          models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                     related_name="reservations", to="fleet.truck")),
                ("driver",         models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                     related_name="reservations", to="fleet.driver")),
                ("order",          models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                     related_name="reservations", to="orders.order")),
            ],
            options={"ordering": ["-acquired_at"]},
        ),
        migrations.AddConstraint(
            model_name="fleetreservation",
            constraint=models.UniqueConstraint(
                condition=models.Q(("released_at__isnull", True)),
                fields=("truck",),
                name="uniq_active_reservation_truck",
            ),
        ),
        migrations.AddConstraint(
            model_name="fleetreservation",
            constraint=models.UniqueConstraint(
                condition=models.Q(("released_at__isnull", True)),
                fields=("driver",),
                name="uniq_active_reservation_driver",
            ),
        ),
        migrations.AddConstraint(
            model_name="fleetreservation",
            constraint=models.UniqueConstraint(
                condition=models.Q(("released_at__isnull", True)),
                fields=("order",),
                name="uniq_active_reservation_order",
            ),
        ),
    ]
