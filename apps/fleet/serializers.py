"""Fleet serializers."""

from rest_framework import serializers

from apps.orders.exceptions import PreconditionError
from .models import ComplianceDocument, Driver, DriverTransaction, FleetReservation, Truck


class DriverSerializer(serializers.ModelSerializer):
    truck_plate = serializers.CharField(source="truck.plate_number", read_only=True, default=None)

    class Meta:
        model  = Driver
        fields = [
            "id", "name", "phone", "license_number", "standard_allowance", "is_active",
            "truck_plate", "total_trips", "total_delivered", "created_at",
        ]
        read_only_fields = ["id", "total_trips", "total_delivered", "created_at"]


class TruckSerializer(serializers.ModelSerializer):
    driver_name = serializers.CharField(source="driver.name", read_only=True, default=None)

    class Meta:
        model  = Truck
        fields = [
            "id", "plate_number", "model", "truck_type", "capacity_tons",
            "default_fuel_cost", "driver", "driver_name", "is_active", "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate_driver(self, driver):
        truck = self.instance
        if truck is None or truck.driver_id == getattr(driver, "id", None):
            return driver
        if FleetReservation.objects.filter(truck=truck, released_at__isnull=True).exists():
            raise PreconditionError(
                f"Truck {truck.plate_number} is on a trip; change its driver after delivery.", code="truck_busy",
            )
        return driver


class AvailableUnitSerializer(serializers.ModelSerializer):
    """A dispatchable truck + driver pair, as offered by the dispatch dialog."""
    driver = DriverSerializer(read_only=True)

    class Meta:
        model  = Truck
        fields = ["id", "plate_number", "model", "capacity_tons", "default_fuel_cost", "driver"]


class ComplianceDocumentSerializer(serializers.ModelSerializer):
    is_expired = serializers.SerializerMethodField()

    class Meta:
        model  = ComplianceDocument
        fields = [
            "id", "entity_type", "entity_id", "document_type", "document_number",
            "issue_date", "expiry_date", "is_expired", "notes", "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def get_is_expired(self, obj) -> bool:
        return obj.is_expired()

    def validate(self, data):
        model = Truck if data.get("entity_type", getattr(self.instance, "entity_type", None)) == "truck" else Driver
        entity_id = data.get("entity_id", getattr(self.instance, "entity_id", None))
        if not model.objects.filter(pk=entity_id).exists():
            raise serializers.ValidationError({"entity_id": f"No {model.__name__.lower()} with this id."})
        issue, expiry = data.get("issue_date"), data.get("expiry_date")
        if issue and expiry and expiry < issue:
            raise serializers.ValidationError({"expiry_date": "Expiry date is before the issue date."})
        return data


class DriverTransactionSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)

    class Meta:
        model  = DriverTransaction
        fields = [
            "id", "driver", "order", "order_number", "type", "amount",
            "description", "transaction_date", "created_at",
        ]
        read_only_fields = ["id", "created_at"]


class DriverWalletSerializer(serializers.Serializer):
    driver_id     = serializers.UUIDField()
    total_credits = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_debits  = serializers.DecimalField(max_digits=14, decimal_places=2)
    balance       = serializers.DecimalField(max_digits=14, decimal_places=2)
