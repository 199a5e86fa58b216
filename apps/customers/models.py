"""
Customer — the credit-bearing counterparty on every order.
current_balance is the running receivable: posted at dispatch, reduced by
confirmed payments and credit notes.
"""

import uuid
from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator


class Customer(models.Model):

    class PriceTier(models.TextChoices):
        WHOLESALER = "Wholesaler", "Wholesaler"
        RETAILER   = "Retailer",   "Retailer"
        END_USER   = "End-User",   "End-User"

    class Category(models.TextChoices):
        INDIVIDUAL = "individual", "Individual"
        BUSINESS   = "business",   "Business"
        CONTRACTOR = "contractor", "Contractor"
        GOVERNMENT = "government", "Government"

    id              = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name            = models.CharField(max_length=160)
    phone           = models.CharField(max_length=20, blank=True)
    email           = models.EmailField(blank=True)
    address         = models.TextField(blank=True)
    category        = models.CharField(max_length=12, choices=Category.choices, default=Category.BUSINESS)
    price_tier      = models.CharField(max_length=10, choices=PriceTier.choices, default=PriceTier.RETAILER)
    price_per_bag   = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True,
                                          validators=[MinValueValidator(0)])
    credit_limit    = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"),
                                          validators=[MinValueValidator(0)])
    current_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    is_blocked      = models.BooleanField(default=False)
    notes           = models.TextField(blank=True)
    created_at      = models.DateTimeField(auto_now_add=True)
    updated_at      = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes  = [
            models.Index(fields=["name"],       name="customer_name_idx"),
            models.Index(fields=["is_blocked"], name="customer_blocked_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def available_credit(self) -> Decimal:
        return self.credit_limit - self.current_balance
