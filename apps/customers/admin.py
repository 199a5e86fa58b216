from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display  = ("name", "phone", "price_tier", "credit_limit", "current_balance", "is_blocked")
    list_filter   = ("price_tier", "category", "is_blocked")
    search_fields = ("name", "phone", "email")
    readonly_fields = ("id", "current_balance", "created_at", "updated_at")
