import uuid
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Driver",
            fields=[
                ("id",                 models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name",               models.CharField(max_length=120)),
                ("phone",              models.CharField(blank=True, max_length=20)),
                ("license_number",     models.CharField(blank=True, max_length=40)),
                ("standard_allowance", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12,
                                                           validators=[django.core.validators.MinValueValidator(0)])),
                ("is_active",          models.BooleanField(default=True)),
                ("total_trips",        models.PositiveIntegerField(default=0)),
                ("total_delivered",    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("created_at",         models.DateTimeField(auto_now_add=True)),
                ("updated_at",         models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.AddIndex(
            model_name="driver",
            index=models.Index(fields=["is_active"], name="driver_active_idx"),
        ),
        migrations.CreateModel(
            name="Truck",
            fields=[
                ("id",                models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("plate_number",      models.CharField(max_length=20, unique=True)),
                ("model",             models.CharField(blank=True, max_length=80)),
                ("truck_type",        models.CharField(blank=True, max_length=40)),
                ("capacity_tons",     models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("default_fuel_cost", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12,
                                                          validators=[django.core.validators.MinValueValidator(0)])),
                ("is_active",         models.BooleanField(default=True)),
                ("created_at",        models.DateTimeField(auto_now_add=True)),
                ("updated_at",        models.DateTimeField(auto_now=True)),
                ("driver",            models.OneToOneField(
                    blank=True, null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="truck",
                    to="fleet.driver",
                )),
            ],
            options={"ordering": ["plate_number"]},
        ),
        migrations.AddIndex(
            model_name="truck",
            index=models.Index(fields=["is_active"], name="truck_active_idx"),
        ),
        migrations.CreateModel(
            name="ComplianceDocument",
            fields=[
                ("id",              models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("entity_type",     models.CharField(choices=[("truck", "Truck"), ("driver", "Driver")], max_length=6)),
                ("entity_id",       models.UUIDField()),
                ("document_type",   models.CharField(
                    choices=[
                        ("license", "Driver's Licence"),
                        ("insurance", "Insurance"),
                        ("road_worthiness", "Road Worthiness"),
                        ("hackney_permit", "Hackney Permit"),
                        ("heavy_duty_permit", "Heavy Duty Permit"),
                        ("vehicle_registration", "Vehicle Registration"),
                    ],
                    max_length=24,
                )),
                ("document_number", models.CharField(blank=True, max_length=60)),
                ("issue_date",      models.DateField(blank=True, null=True)),
                ("expiry_date",     models.DateField()),
                ("notes",           models.CharField(blank=True, max_length=255)),
                ("created_at",      models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["expiry_date"]},
        ),
        migrations.AddIndex(
            model_name="compliancedocument",
            index=models.Index(fields=["entity_type", "entity_id"], name="doc_entity_idx"),
        ),
        migrations.AddIndex(
            model_name="compliancedocument",
            index=models.Index(fields=["expiry_date"], name="doc_expiry_idx"),
        ),
    ]
