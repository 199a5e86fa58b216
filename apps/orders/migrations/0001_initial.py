import uuid
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models

UNIT_CHOICES = [("tons", "Tons"), ("bags", "Bags")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        ("fleet", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Depot",
            fields=[
                ("id",           models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name",         models.CharField(max_length=120, unique=True)),
                ("address",      models.TextField(blank=True)),
                ("manager_name", models.CharField(blank=True, max_length=120)),
                ("is_active",    models.BooleanField(default=True)),
                ("created_at",   models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Supplier",
            fields=[
                ("id",             models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name",           models.CharField(max_length=160, unique=True)),
                ("contact_person", models.CharField(blank=True, max_length=120)),
                ("phone",          models.CharField(blank=True, max_length=20)),
                ("email",          models.EmailField(blank=True, max_length=254)),
                ("address",        models.TextField(blank=True)),
                ("is_active",      models.BooleanField(default=True)),
                ("created_at",     models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id",                    models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_number",          models.CharField(db_index=True, max_length=20, unique=True)),
                ("order_type",            models.CharField(
                    choices=[("plant_direct", "Plant Direct"), ("depot_dispatch", "Depot Dispatch")],
                    default="depot_dispatch",
                    max_length=14,
                )),
                ("cement_type",           models.CharField(max_length=80)),
                ("quantity",              models.DecimalField(decimal_places=2, max_digits=12,
                                                              validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("unit",                  models.CharField(choices=UNIT_CHOICES, default="bags", max_length=4)),
                ("status",                models.CharField(
                    choices=[
                        ("requested", "Requested"),
                        ("in_gate", "In Gate"),
                        ("loaded", "Loaded"),
                        ("dispatched", "Dispatched"),
                        ("delivered", "Delivered"),
                    ],
                    default="requested",
                    max_length=10,
                )),
                ("cement_purchase_price", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("cement_sale_price",     models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("total_cement_purchase", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("total_cement_sale",     models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("cement_profit",         models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("cement_margin_percent", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=7)),
                ("total_amount",          models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("fuel_cost",             models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("driver_allowance",      models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("other_trip_costs",      models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("total_trip_cost",       models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("payment_status",        models.CharField(
                    choices=[("Pending", "Pending"), ("Partial", "Partial"), ("Confirmed", "Confirmed")],
                    default="Pending",
                    max_length=9,
                )),
                ("payment_terms",           models.CharField(blank=True, max_length=60)),
                ("delivery_otp",            models.CharField(blank=True, max_length=6)),
                ("delivery_address",        models.TextField(blank=True)),
                ("waybill_number",          models.CharField(blank=True, max_length=40)),
                ("waybill_url",             models.URLField(blank=True)),
                ("gate_pass_number",        models.CharField(blank=True, max_length=20)),
                ("loading_manifest_number", models.CharField(blank=True, max_length=20)),
                ("atc_number",              models.CharField(blank=True, max_length=40)),
                ("cap_number",              models.CharField(blank=True, max_length=40)),
                ("is_direct_drop",          models.BooleanField(default=False)),
                ("notes",                   models.TextField(blank=True)),
                ("created_at",              models.DateTimeField(auto_now_add=True)),
                ("updated_at",              models.DateTimeField(auto_now=True)),
                ("dispatched_at",           models.DateTimeField(blank=True, null=True)),
                ("delivered_at",            models.DateTimeField(blank=True, null=True)),
                ("customer",   models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                 related_name="orders", to="customers.customer")),
                ("depot",      models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                                                 related_name="orders", to="orders.depot")),
                ("supplier",   models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                                                 related_name="orders", to="orders.supplier")),
                ("truck",      models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                 related_name="orders", to="fleet.truck")),
                ("driver",     models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                 related_name="orders", to="fleet.driver")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                 related_name="created_orders", to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(fields=["status"], name="order_status_idx"),
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(fields=["customer", "status"], name="order_customer_status_idx"),
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(fields=["truck", "status"], name="order_truck_status_idx"),
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(fields=["created_at"], name="order_created_idx"),
        ),
        migrations.CreateModel(
            name="OrderEvent",
            fields=[
                ("id",          models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("from_status", models.CharField(max_length=10)),
                ("to_status",   models.CharField(max_length=10)),
                ("note",        models.CharField(blank=True, max_length=255)),
                ("occurred_at", models.DateTimeField(auto_now_add=True)),
                ("order",       models.ForeignKey(on_delete=django.db.models.deletion.CASCADE,
                                                  related_name="events", to="orders.order")),
                ("actor",       models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                  to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["occurred_at"]},
        ),
        migrations.CreateModel(
            name="Shortage",
            fields=[
                ("id",                  models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("dispatched_quantity", models.DecimalField(decimal_places=2, max_digits=12)),
                ("received_quantity",   models.DecimalField(decimal_places=2, max_digits=12)),
                ("missing_quantity",    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("damaged_quantity",    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("shortage_quantity",   models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("unit",                models.CharField(choices=UNIT_CHOICES, max_length=4)),
                ("liability",           models.CharField(choices=[("driver", "Driver"), ("company", "Company")],
                                                         default="company", max_length=7)),
                ("deduction_amount",    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("reason",              models.TextField(blank=True)),
                ("status",              models.CharField(
                    choices=[("pending", "Pending"), ("approved", "Approved"), ("deducted", "Deducted")],
                    default="pending",
                    max_length=8,
                )),
                ("created_at",          models.DateTimeField(auto_now_add=True)),
                ("order",         models.OneToOneField(on_delete=django.db.models.deletion.PROTECT,
                                                       related_name="shortage", to="orders.order")),
                ("truck",         models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                    to="fleet.truck")),
                ("driver",        models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                    related_name="shortages", to="fleet.driver")),
                ("reconciled_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                    to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.AddIndex(
            model_name="shortage",
            index=models.Index(fields=["status"], name="shortage_status_idx"),
        ),
        migrations.CreateModel(
            name="CreditNote",
            fields=[
                ("id",         models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("amount",     models.DecimalField(decimal_places=2, max_digits=14)),
                ("quantity",   models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("unit",       models.CharField(choices=UNIT_CHOICES, default="bags", max_length=4)),
                ("reason",     models.TextField(blank=True)),
                ("status",     models.CharField(
                    choices=[("issued", "Issued"), ("applied", "Applied to balance"), ("void", "Void")],
                    default="issued",
                    max_length=7,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("customer",   models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                 related_name="credit_notes", to="customers.customer")),
                ("order",      models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                                                 related_name="credit_notes", to="orders.order")),
            ],
            options={"ordering": ["-created_at"]},
        ),
    ]
