"""Order serializers."""

from rest_framework import serializers

from apps.customers.models import Customer
from apps.fleet.models import Driver, Truck
from .models import CreditNote, Depot, Inventory, Order, OrderEvent, Shortage, Supplier


class DepotSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Depot
        fields = ["id", "name", "address", "manager_name", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Supplier
        fields = ["id", "name", "contact_person", "phone", "email", "address", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]


class InventorySerializer(serializers.ModelSerializer):
    depot_name = serializers.CharField(source="depot.name", read_only=True)
    quantity   = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)

    class Meta:
        model  = Inventory
        fields = [
            "id", "depot", "depot_name", "cement_type", "unit", "quantity",
            "cost_price_ton", "selling_price_ton", "cost_price_bag", "selling_price_bag",
            "created_at", "last_updated",
        ]
        read_only_fields = ["id", "created_at", "last_updated"]

    def validate(self, data):
        depot       = data.get("depot", getattr(self.instance, "depot", None))
        cement_type = data.get("cement_type", getattr(self.instance, "cement_type", None))
        unit        = data.get("unit", getattr(self.instance, "unit", Order.Unit.BAGS))
        clash = Inventory.objects.filter(depot=depot, cement_type=cement_type, unit=unit)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError(f"{depot} already lists {cement_type} in {unit}.")
        return data


class OrderEventSerializer(serializers.ModelSerializer):
    actor_name = serializers.CharField(source="actor.full_name", read_only=True, default=None)

    class Meta:
        model  = OrderEvent
        fields = ["from_status", "to_status", "actor_name", "note", "occurred_at"]


class ShortageSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    driver_name  = serializers.CharField(source="driver.name", read_only=True, default=None)

    class Meta:
        model  = Shortage
        fields = [
            "id", "order", "order_number", "truck", "driver", "driver_name",
            "dispatched_quantity", "received_quantity", "missing_quantity",
            "damaged_quantity", "shortage_quantity", "unit", "liability",
            "deduction_amount", "reason", "status", "created_at",
        ]


class CreditNoteSerializer(serializers.ModelSerializer):
    class Meta:
        model  = CreditNote
        fields = ["id", "customer", "order", "amount", "quantity", "unit", "reason", "status", "created_at"]


class OrderWriteSerializer(serializers.ModelSerializer):
    """Create/update payload. Status, fleet and OTP move only through lifecycle actions."""
    customer       = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    transport_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0,
                                              required=False, write_only=True)

    class Meta:
        model  = Order
        fields = [
            "order_type", "cement_type", "quantity", "unit", "customer", "depot", "supplier",
            "cement_purchase_price", "cement_sale_price", "total_amount",
            "other_trip_costs", "payment_terms", "delivery_address",
            "waybill_number", "waybill_url", "atc_number", "cap_number",
            "is_direct_drop", "notes", "transport_cost",
        ]


class OrderListSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    depot_name    = serializers.CharField(source="depot.name", read_only=True, default=None)
    truck_plate   = serializers.CharField(source="truck.plate_number", read_only=True, default=None)
    driver_name   = serializers.CharField(source="driver.name", read_only=True, default=None)

    class Meta:
        model  = Order
        fields = [
            "id", "order_number", "order_type", "status", "payment_status",
            "customer", "customer_name", "depot_name", "truck_plate", "driver_name",
            "cement_type", "quantity", "unit", "total_amount", "atc_number",
            "created_at", "dispatched_at", "delivered_at",
        ]


class OrderDetailSerializer(OrderListSerializer):
    events   = OrderEventSerializer(many=True, read_only=True)
    shortage = ShortageSerializer(read_only=True, default=None)

    class Meta(OrderListSerializer.Meta):
        fields = OrderListSerializer.Meta.fields + [
            "depot", "supplier", "truck", "driver",
            "cement_purchase_price", "cement_sale_price", "total_cement_purchase",
            "total_cement_sale", "cement_profit", "cement_margin_percent",
            "fuel_cost", "driver_allowance", "other_trip_costs", "total_trip_cost",
            "payment_terms", "delivery_address", "waybill_number", "waybill_url",
            "gate_pass_number", "loading_manifest_number", "cap_number",
            "is_direct_drop", "notes", "events", "shortage", "updated_at",
        ]


class DispatchSerializer(serializers.Serializer):
    truck            = serializers.PrimaryKeyRelatedField(queryset=Truck.objects.all(), required=False)
    driver           = serializers.PrimaryKeyRelatedField(queryset=Driver.objects.all(), required=False)
    fuel_cost        = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    driver_allowance = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)

    def to_assignment(self) -> dict:
        d = self.validated_data
        assignment = {
            "truck_id":  d["truck"].id if d.get("truck") else None,
            "driver_id": d["driver"].id if d.get("driver") else None,
        }
        for field in ("fuel_cost", "driver_allowance"):
            if field in d:
                assignment[field] = d[field]
        return assignment


class StatusUpdateSerializer(DispatchSerializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class ReassignSerializer(serializers.Serializer):
    truck  = serializers.PrimaryKeyRelatedField(queryset=Truck.objects.all())
    driver = serializers.PrimaryKeyRelatedField(queryset=Driver.objects.all(), required=False)


class ReconcileSerializer(serializers.Serializer):
    otp              = serializers.CharField(max_length=6, allow_blank=True)
    qty_good         = serializers.DecimalField(max_digits=12, decimal_places=2)
    qty_missing      = serializers.DecimalField(max_digits=12, decimal_places=2, default=0)
    qty_damaged      = serializers.DecimalField(max_digits=12, decimal_places=2, default=0)
    reason           = serializers.CharField(required=False, allow_blank=True, default="")
    liability        = serializers.ChoiceField(choices=Shortage.Liability.choices, required=False)
    deduction_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class OrderMetricsSerializer(serializers.Serializer):
    counts_by_status = serializers.DictField(child=serializers.IntegerField())
    busy_truck_ids   = serializers.ListField(child=serializers.CharField())
    orders_today     = serializers.IntegerField()
    delivered_today  = serializers.IntegerField()
