"""
Analytics views — thin read-only reports over orders, finance and fleet.

Dual-stream split: trading is cement bought and resold (total_cement_sale vs
total_cement_purchase); haulage is whatever the customer pays above the
cement value, against trip costs and expenses booked on the order.
"""

from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db.models import DecimalField, F, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema

from apps.authentication.permissions import require_role, REPORT_ROLES
from apps.fleet.models import ComplianceDocument, Driver, Truck
from apps.fleet.service import FleetAvailabilityResolver
from apps.orders.models import Order

ZERO = Value(Decimal("0"), output_field=DecimalField(max_digits=14, decimal_places=2))
AGING_BUCKETS = (("current_0_30", 0, 30), ("days_31_60", 31, 60), ("days_61_90", 61, 90), ("over_90_days", 91, None))


def _date_range(request, queryset, field="created_at"):
    date_from = parse_date(request.query_params.get("date_from", "") or "")
    date_to   = parse_date(request.query_params.get("date_to", "") or "")
    if date_from:
        queryset = queryset.filter(**{f"{field}__date__gte": date_from})
    if date_to:
        queryset = queryset.filter(**{f"{field}__date__lte": date_to})
    return queryset


@extend_schema(tags=["Analytics"], summary="Trading vs haulage revenue, cost and profit per order")
class DualStreamView(APIView):
    """GET /api/analytics/dual-stream/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        denied = require_role(request, REPORT_ROLES)
        if denied:
            return denied
        orders = _date_range(request, Order.objects.filter(dispatched_at__isnull=False))
        rows = (
            orders
            .annotate(expenses_total=Coalesce(Sum("expenses__amount"), ZERO))
            .values("id", "order_number", "status", "quantity", "unit", "created_at",
                    "total_amount", "total_cement_sale", "total_cement_purchase",
                    "total_trip_cost", "expenses_total", customer_name=F("customer__name"))
            .order_by("-created_at")[:200]
        )
        results, totals = [], {"trading_profit": Decimal("0"), "haulage_profit": Decimal("0")}
        for r in rows:
            trading_revenue = r["total_cement_sale"]
            trading_costs   = r["total_cement_purchase"]
            haulage_revenue = r["total_amount"] - r["total_cement_sale"]
            haulage_costs   = r["total_trip_cost"] + r["expenses_total"]
            row = {
                "order_id":        str(r["id"]),
                "order_number":    r["order_number"],
                "customer_name":   r["customer_name"],
                "status":          r["status"],
                "quantity":        r["quantity"],
                "unit":            r["unit"],
                "created_at":      r["created_at"],
                "trading_revenue": trading_revenue,
                "trading_costs":   trading_costs,
                "trading_profit":  trading_revenue - trading_costs,
                "haulage_revenue": haulage_revenue,
                "haulage_costs":   haulage_costs,
                "haulage_profit":  haulage_revenue - haulage_costs,
                "total_revenue":   r["total_amount"],
                "total_costs":     trading_costs + haulage_costs,
            }
            row["net_profit"] = row["total_revenue"] - row["total_costs"]
            totals["trading_profit"] += row["trading_profit"]
            totals["haulage_profit"] += row["haulage_profit"]
            results.append(row)
        totals["net_profit"] = totals["trading_profit"] + totals["haulage_profit"]
        return Response({"totals": totals, "results": results})


@extend_schema(tags=["Analytics"], summary="Revenue minus expenses for each completed trip")
class TripProfitabilityReportView(APIView):
    """GET /api/analytics/trips/profitability/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        denied = require_role(request, REPORT_ROLES)
        if denied:
            return denied
        rows = (
            _date_range(request, Order.objects.filter(status=Order.Status.DELIVERED), "delivered_at")
            .annotate(total_expenses=Coalesce(Sum("expenses__amount"), ZERO))
            .annotate(net_profit=F("total_amount") - F("total_expenses"))
            .values("order_number", "delivered_at", "total_amount", "total_expenses", "net_profit",
                    truck_plate=F("truck__plate_number"), driver_name=F("driver__name"))
            .order_by("-delivered_at")[:200]
        )
        results = []
        for r in rows:
            revenue = r["total_amount"]
            r["profit_margin_percent"] = round(r["net_profit"] / revenue * 100, 2) if revenue else Decimal("0")
            results.append(r)
        return Response(results)


@extend_schema(tags=["Analytics"], summary="Orders on the road, oldest first")
class PendingDeliveriesView(APIView):
    """GET /api/analytics/deliveries/pending/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        now = timezone.now()
        orders = (
            Order.objects.filter(status=Order.Status.DISPATCHED)
            .select_related("customer", "truck", "driver")
            .order_by("dispatched_at")
        )
        return Response([
            {
                "order_id":         str(o.id),
                "order_number":     o.order_number,
                "customer_name":    o.customer.name,
                "delivery_address": o.delivery_address,
                "truck_plate":      o.truck.plate_number if o.truck_id else None,
                "driver_name":      o.driver.name if o.driver_id else None,
                "driver_phone":     o.driver.phone if o.driver_id else None,
                "quantity":         o.quantity,
                "unit":             o.unit,
                "dispatched_at":    o.dispatched_at,
                "hours_in_transit": round((now - o.dispatched_at).total_seconds() / 3600, 1) if o.dispatched_at else None,
            }
            for o in orders
        ])


@extend_schema(tags=["Analytics"], summary="Compliance documents expired or expiring soon")
class ExpiringDocumentsView(APIView):
    """GET /api/analytics/documents/expiring/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        today = timezone.localdate()
        try:
            days = int(request.query_params.get("days", settings.DOCUMENT_EXPIRY_WARNING_DAYS))
        except ValueError:
            days = settings.DOCUMENT_EXPIRY_WARNING_DAYS
        docs = list(
            ComplianceDocument.objects
            .filter(expiry_date__lte=today + timedelta(days=days))
            .order_by("expiry_date")
        )
        ids = [d.entity_id for d in docs]
        names = dict(Truck.objects.filter(id__in=ids).values_list("id", "plate_number"))
        names.update(Driver.objects.filter(id__in=ids).values_list("id", "name"))
        return Response([
            {
                "id":             str(d.id),
                "entity_type":    d.entity_type,
                "entity_id":      str(d.entity_id),
                "entity_name":    names.get(d.entity_id),
                "document_type":  d.document_type,
                "expiry_date":    d.expiry_date,
                "days_remaining": (d.expiry_date - today).days,
                "is_expired":     d.is_expired(today),
            }
            for d in docs
        ])


@extend_schema(tags=["Analytics"], summary="Unpaid dispatched orders bucketed by age, per customer")
class CustomerAgingView(APIView):
    """GET /api/analytics/customers/aging/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        denied = require_role(request, REPORT_ROLES)
        if denied:
            return denied
        today = timezone.localdate()
        unpaid = (
            Order.objects
            .filter(dispatched_at__isnull=False)
            .exclude(payment_status=Order.PaymentStatus.CONFIRMED)
            .select_related("customer")
        )
        report = {}
        for o in unpaid:
            c = o.customer
            row = report.setdefault(c.id, {
                "customer_id":     str(c.id),
                "name":            c.name,
                "current_balance": c.current_balance,
                "credit_limit":    c.credit_limit,
                **{bucket: Decimal("0") for bucket, _, _ in AGING_BUCKETS},
            })
            age = (today - timezone.localtime(o.dispatched_at).date()).days
            for bucket, low, high in AGING_BUCKETS:
                if age >= low and (high is None or age <= high):
                    row[bucket] += o.total_amount
                    break
        rows = sorted(report.values(), key=lambda r: r["current_balance"], reverse=True)
        return Response(rows)


@extend_schema(tags=["Analytics"], summary="Every truck with its availability state")
class FleetStatusView(APIView):
    """GET /api/analytics/fleet/status/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        resolver = FleetAvailabilityResolver()
        busy            = resolver.busy_truck_ids()
        expired_trucks  = resolver.expired_entity_ids(ComplianceDocument.EntityType.TRUCK)
        expired_drivers = resolver.expired_entity_ids(ComplianceDocument.EntityType.DRIVER)

        def state(t):
            if not t.is_active:
                return "inactive"
            if t.id in busy:
                return "on_trip"
            if t.driver_id is None:
                return "no_driver"
            if t.id in expired_trucks or t.driver_id in expired_drivers:
                return "documents_expired"
            return "available"

        trucks = Truck.objects.select_related("driver").order_by("plate_number")
        return Response([
            {
                "truck_id":     str(t.id),
                "plate_number": t.plate_number,
                "driver_name":  t.driver.name if t.driver_id else None,
                "status":       state(t),
            }
            for t in trucks
        ])
