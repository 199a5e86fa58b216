import uuid
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models

UNIT_CHOICES   = [("tons", "Tons"), ("bags", "Bags")]
METHOD_CHOICES = [("cash", "Cash"), ("pos", "POS"), ("transfer", "Bank Transfer"), ("cheque", "Cheque")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        ("fleet", "0001_initial"),
        ("orders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentAccount",
            fields=[
                ("id",             models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("name",           models.CharField(max_length=120)),
                ("bank_name",      models.CharField(blank=True, max_length=120)),
                ("account_number", models.CharField(blank=True, max_length=20)),
                ("is_active",      models.BooleanField(default=True)),
            ],
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id",           models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("amount",       models.DecimalField(decimal_places=2, max_digits=14,
                                                     validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("method",       models.CharField(choices=METHOD_CHOICES, max_length=8)),
                ("reference",    models.CharField(blank=True, max_length=80)),
                ("status",       models.CharField(
                    choices=[("Pending", "Pending"), ("Confirmed", "Confirmed"), ("Rejected", "Rejected")],
                    default="Pending",
                    max_length=9,
                )),
                ("payment_date", models.DateField(default=django.utils.timezone.localdate)),
                ("notes",        models.TextField(blank=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at",   models.DateTimeField(auto_now_add=True)),
                ("updated_at",   models.DateTimeField(auto_now=True)),
                ("customer",     models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                   related_name="payments", to="customers.customer")),
                ("order",        models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                                                   related_name="payments", to="orders.order")),
                ("account",      models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                   related_name="payments", to="finance.paymentaccount")),
                ("recorded_by",  models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                   related_name="recorded_payments", to=settings.AUTH_USER_MODEL)),
                ("confirmed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                   related_name="confirmed_payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["-payment_date", "-created_at"]},
        ),
        migrations.AddIndex(
            model_name="payment",
            index=models.Index(fields=["status"], name="payment_status_idx"),
        ),
        migrations.AddIndex(
            model_name="payment",
            index=models.Index(fields=["customer", "status"], name="payment_customer_status_idx"),
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id",           models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("category",     models.CharField(
                    choices=[
                        ("fuel", "Fuel"),
                        ("driver_allowance", "Driver Allowance"),
                        ("transport", "Transport"),
                        ("toll", "Toll"),
                        ("salary", "Salary"),
                        ("maintenance", "Maintenance"),
                        ("insurance", "Insurance"),
                        ("license", "Licence"),
                        ("office", "Office"),
                        ("other", "Other"),
                    ],
                    max_length=16,
                )),
                ("amount",       models.DecimalField(decimal_places=2, max_digits=12,
                                                     validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("description",  models.CharField(blank=True, max_length=255)),
                ("expense_date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at",   models.DateTimeField(auto_now_add=True)),
                ("order",        models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT,
                                                   related_name="expenses", to="orders.order")),
                ("truck",        models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                   related_name="expenses", to="fleet.truck")),
                ("recorded_by",  models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                   to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["-expense_date", "-created_at"]},
        ),
        migrations.AddIndex(
            model_name="expense",
            index=models.Index(fields=["category", "expense_date"], name="expense_cat_date_idx"),
        ),
        migrations.CreateModel(
            name="ManufacturerWallet",
            fields=[
                ("id",          models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("cement_type", models.CharField(max_length=80)),
                ("unit",        models.CharField(choices=UNIT_CHOICES, default="bags", max_length=4)),
                ("balance",     models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("created_at",  models.DateTimeField(auto_now_add=True)),
                ("updated_at",  models.DateTimeField(auto_now=True)),
                ("supplier",    models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                  related_name="wallets", to="orders.supplier")),
            ],
        ),
        migrations.AddConstraint(
            model_name="manufacturerwallet",
            constraint=models.UniqueConstraint(fields=("supplier", "cement_type"), name="uniq_wallet_supplier_cement"),
        ),
        migrations.CreateModel(
            name="WalletTransaction",
            fields=[
                ("id",          models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("type",        models.CharField(
                    choices=[("deposit", "Deposit"), ("withdrawal", "Withdrawal"), ("adjustment", "Adjustment")],
                    max_length=10,
                )),
                ("amount",      models.DecimalField(decimal_places=2, max_digits=14)),
                ("description", models.CharField(blank=True, max_length=255)),
                ("created_at",  models.DateTimeField(auto_now_add=True)),
                ("wallet",      models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                  related_name="transactions", to="finance.manufacturerwallet")),
                ("order",       models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                  related_name="wallet_transactions", to="orders.order")),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="SupplierPayment",
            fields=[
                ("id",             models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("payment_type",   models.CharField(
                    choices=[("prepayment", "Prepayment"), ("postpayment", "Postpayment")],
                    default="prepayment",
                    max_length=11,
                )),
                ("cement_type",    models.CharField(blank=True, max_length=80)),
                ("amount",         models.DecimalField(decimal_places=2, max_digits=14,
                                                       validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("payment_date",   models.DateField(default=django.utils.timezone.localdate)),
                ("reference",      models.CharField(blank=True, max_length=80)),
                ("period_covered", models.CharField(blank=True, max_length=60)),
                ("method",         models.CharField(choices=METHOD_CHOICES, default="transfer", max_length=8)),
                ("notes",          models.TextField(blank=True)),
                ("created_at",     models.DateTimeField(auto_now_add=True)),
                ("supplier",       models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                     related_name="payments", to="orders.supplier")),
                ("wallet",         models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                     related_name="supplier_payments", to="finance.manufacturerwallet")),
            ],
            options={"ordering": ["-payment_date", "-created_at"]},
        ),
        migrations.CreateModel(
            name="Purchase",
            fields=[
                ("id",                 models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("purchase_number",    models.CharField(max_length=20, unique=True)),
                ("cement_type",        models.CharField(max_length=80)),
                ("quantity",           models.DecimalField(decimal_places=2, max_digits=12,
                                                           validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("unit",               models.CharField(choices=UNIT_CHOICES, default="bags", max_length=4)),
                ("cost_per_unit",      models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("total_cost",         models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("is_direct_delivery", models.BooleanField(default=False)),
                ("atc_number",         models.CharField(blank=True, max_length=40)),
                ("cap_number",         models.CharField(blank=True, max_length=40)),
                ("status",             models.CharField(
                    choices=[("ordered", "Ordered"), ("received", "Received"), ("cancelled", "Cancelled")],
                    default="ordered",
                    max_length=9,
                )),
                ("purchase_date",      models.DateField(default=django.utils.timezone.localdate)),
                ("notes",              models.TextField(blank=True)),
                ("created_at",         models.DateTimeField(auto_now_add=True)),
                ("supplier",           models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                                         related_name="purchases", to="orders.supplier")),
                ("destination_depot",  models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                         related_name="purchases", to="orders.depot")),
                ("sales_order",        models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                         related_name="purchases", to="orders.order")),
                ("wallet",             models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                                                         related_name="purchases", to="finance.manufacturerwallet")),
            ],
            options={"ordering": ["-purchase_date", "-created_at"]},
        ),
        migrations.AddIndex(
            model_name="purchase",
            index=models.Index(fields=["status"], name="purchase_status_idx"),
        ),
    ]
