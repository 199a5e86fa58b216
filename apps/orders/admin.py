from django.contrib import admin
from .models import CreditNote, Depot, Inventory, Order, OrderEvent, Shortage, Supplier


@admin.register(Depot)
class DepotAdmin(admin.ModelAdmin):
    list_display  = ("name", "manager_name", "is_active")
    list_filter   = ("is_active",)
    search_fields = ("name",)


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display  = ("name", "contact_person", "phone", "is_active")
    search_fields = ("name", "contact_person")


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display  = ("depot", "cement_type", "unit", "quantity", "selling_price_bag", "selling_price_ton", "last_updated")
    list_filter   = ("depot", "unit")
    search_fields = ("cement_type", "depot__name")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display  = ("order_number", "order_type", "status", "payment_status", "customer",
                     "truck", "quantity", "unit", "total_amount", "created_at")
    list_filter   = ("status", "order_type", "payment_status", "depot")
    search_fields = ("order_number", "customer__name", "atc_number")
    # Lifecycle fields move only through the controller
    readonly_fields = ("id", "order_number", "status", "delivery_otp", "truck", "driver",
                       "dispatched_at", "delivered_at", "created_at", "updated_at")
    ordering      = ("-created_at",)


@admin.register(OrderEvent)
class OrderEventAdmin(admin.ModelAdmin):
    list_display    = ("order", "from_status", "to_status", "actor", "occurred_at")
    readonly_fields = ("occurred_at",)


@admin.register(Shortage)
class ShortageAdmin(admin.ModelAdmin):
    list_display = ("order", "driver", "shortage_quantity", "unit", "liability", "deduction_amount", "status")
    list_filter  = ("status", "liability")


@admin.register(CreditNote)
class CreditNoteAdmin(admin.ModelAdmin):
    list_display = ("customer", "order", "amount", "status", "created_at")
    list_filter  = ("status",)
