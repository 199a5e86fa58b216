import uuid
import django.core.validators
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id",              models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name",            models.CharField(max_length=160)),
                ("phone",           models.CharField(blank=True, max_length=20)),
                ("email",           models.EmailField(blank=True, max_length=254)),
                ("address",         models.TextField(blank=True)),
                ("category",        models.CharField(
                    choices=[
                        ("individual", "Individual"),
                        ("business", "Business"),
                        ("contractor", "Contractor"),
                        ("government", "Government"),
                    ],
                    default="business",
                    max_length=12,
                )),
                ("price_tier",      models.CharField(
                    choices=[("Wholesaler", "Wholesaler"), ("Retailer", "Retailer"), ("End-User", "End-User")],
                    default="Retailer",
                    max_length=10,
                )),
                ("price_per_bag",   models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True,
                                                        validators=[django.core.validators.MinValueValidator(0)])),
                ("credit_limit",    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14,
                                                        validators=[django.core.validators.MinValueValidator(0)])),
                ("current_balance", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("is_blocked",      models.BooleanField(default=False)),
                ("notes",           models.TextField(blank=True)),
                ("created_at",      models.DateTimeField(auto_now_add=True)),
                ("updated_at",      models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.AddIndex(
            model_name="customer",
            index=models.Index(fields=["name"], name="customer_name_idx"),
        ),
        migrations.AddIndex(
            model_name="customer",
            index=models.Index(fields=["is_blocked"], name="customer_blocked_idx"),
        ),
    ]
