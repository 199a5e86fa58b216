from django.contrib import admin
from .models import ComplianceDocument, Driver, DriverTransaction, FleetReservation, Truck


@admin.register(Truck)
class TruckAdmin(admin.ModelAdmin):
    list_display  = ("plate_number", "model", "driver", "capacity_tons", "default_fuel_cost", "is_active")
    list_filter   = ("is_active", "truck_type")
    search_fields = ("plate_number",)


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display  = ("name", "phone", "standard_allowance", "total_trips", "is_active")
    list_filter   = ("is_active",)
    search_fields = ("name", "phone")


@admin.register(ComplianceDocument)
class ComplianceDocumentAdmin(admin.ModelAdmin):
    list_display = ("document_type", "entity_type", "entity_id", "document_number", "expiry_date")
    list_filter  = ("entity_type", "document_type")
    ordering     = ("expiry_date",)


@admin.register(DriverTransaction)
class DriverTransactionAdmin(admin.ModelAdmin):
    list_display    = ("driver", "type", "amount", "order", "transaction_date")
    list_filter     = ("type",)
    readonly_fields = ("created_at",)


@admin.register(FleetReservation)
class FleetReservationAdmin(admin.ModelAdmin):
    list_display    = ("truck", "driver", "order", "acquired_at", "released_at", "release_reason")
    list_filter     = ("release_reason",)
    readonly_fields = ("acquired_at", "released_at")
