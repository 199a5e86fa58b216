import uuid
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models

UNIT_CHOICES = [("tons", "Tons"), ("bags", "Bags")]


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Inventory",
            fields=[
                ("id",                models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("cement_type",       models.CharField(max_length=80)),
                ("unit",              models.CharField(choices=UNIT_CHOICES, default="bags", max_length=4)),
                ("quantity",          models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14,
                                                          validators=[django.core.validators.MinValueValidator(Decimal("0"))])),
                ("cost_price_ton",    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("selling_price_ton", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("cost_price_bag",    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("selling_price_bag", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("created_at",        models.DateTimeField(auto_now_add=True)),
                ("last_updated",      models.DateTimeField(auto_now=True)),
                ("depot",             models.ForeignKey(on_delete=django.db.models.deletion.CASCADE,
                                                        related_name="inventory", to="orders.depot")),
            ],
            options={"ordering": ["depot__name", "cement_type"]},
        ),
        migrations.AddConstraint(
            model_name="inventory",
            constraint=models.UniqueConstraint(
                fields=("depot", "cement_type", "unit"),
                name="uniq_inventory_depot_cement_unit",
            ),
        ),
    ]
