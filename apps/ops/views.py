"""
Operations views:
  - Deep health check (DB, cache, disk)
  - Prometheus-formatted business metrics
  - Dashboard summary
"""

import os
import logging

from django.core.cache import cache
from django.db import connection
from django.db.models import Count, Sum
from django.http import HttpResponse
from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_spectacular.utils import extend_schema

from apps.authentication.permissions import require_role, REPORT_ROLES
from apps.customers.models import Customer
from apps.finance.models import Payment
from apps.fleet.models import FleetReservation
from apps.fleet.service import FleetAvailabilityResolver
from apps.orders.models import Order, Shortage

logger = logging.getLogger("cementops.ops")


def _orders_by_status() -> dict:
    counts = {status: 0 for status in Order.Status.values}
    # order_by() clears Meta.ordering so the GROUP BY is on status alone
    counts.update(dict(Order.objects.order_by().values_list("status").annotate(c=Count("id"))))
    return counts


# ── GET /api/health/live/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Liveness probe (no dependencies touched)")
class LivenessView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return Response({"status": "ok", "time": timezone.now()})


# ── GET /api/health/deep/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Deep health check — DB, cache, disk")
class DeepHealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        checks = {}

        try:
            with connection.cursor() as cur:
                cur.execute("SELECT 1")
            checks["database"] = "ok"
        except Exception as exc:
            logger.error("Health check: database unreachable: %s", exc)
            checks["database"] = f"error: {exc}"

        try:
            cache.set("healthcheck", "1", 5)
            checks["cache"] = "ok" if cache.get("healthcheck") == "1" else "miss"
        except Exception as exc:
            logger.error("Health check: cache unreachable: %s", exc)
            checks["cache"] = f"error: {exc}"

        try:
            stat    = os.statvfs("/")
            free_gb = (stat.f_bavail * stat.f_frsize) / (1024 ** 3)
            checks["disk_free_gb"] = round(free_gb, 2)
            checks["disk"] = "ok" if free_gb > 1 else "low"
        except (AttributeError, OSError) as exc:
            checks["disk"] = f"error: {exc}"

        overall = "ok" if all(v == "ok" or isinstance(v, float) for v in checks.values()) else "degraded"
        return Response({"status": overall, "checks": checks}, status=200 if overall == "ok" else 503)


# ── GET /api/ops/metrics/ ────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Prometheus-formatted operational metrics")
class MetricsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        total_revenue = Payment.objects.filter(
            status=Payment.Status.CONFIRMED
        ).aggregate(t=Sum("amount"))["t"] or 0
        active_reservations = FleetReservation.objects.filter(released_at__isnull=True).count()
        receivables = Customer.objects.aggregate(t=Sum("current_balance"))["t"] or 0

        lines = [
            "# HELP cementops_orders_total Orders by status",
            "# TYPE cementops_orders_total gauge",
        ]
        for status, count in _orders_by_status().items():
            lines.append(f'cementops_orders_total{{status="{status}"}} {count}')
        lines += [
            "",
            "# HELP cementops_revenue_ngn Total confirmed customer payments in NGN",
            "# TYPE cementops_revenue_ngn gauge",
            f"cementops_revenue_ngn {total_revenue}",
            "",
            "# HELP cementops_receivables_ngn Sum of customer balances in NGN",
            "# TYPE cementops_receivables_ngn gauge",
            f"cementops_receivables_ngn {receivables}",
            "",
            "# HELP cementops_fleet_reservations_active Trucks currently held by a dispatched order",
            "# TYPE cementops_fleet_reservations_active gauge",
            f"cementops_fleet_reservations_active {active_reservations}",
        ]
        return HttpResponse("\n".join(lines) + "\n", content_type="text/plain; version=0.0.4")


# ── GET /api/admin/dashboard/summary/ ────────────────────────────────────────
@extend_schema(tags=["Admin"], summary="Control tower: orders, fleet and money at a glance")
class DashboardSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        denied = require_role(request, REPORT_ROLES)
        if denied:
            return denied

        today = timezone.localdate()
        resolver = FleetAvailabilityResolver(today=today)
        today_revenue = Payment.objects.filter(
            status=Payment.Status.CONFIRMED, confirmed_at__date=today,
        ).aggregate(t=Sum("amount"))["t"] or 0

        return Response({
            "orders_by_status":      _orders_by_status(),
            "orders_today":          Order.objects.filter(created_at__date=today).count(),
            "trucks_on_trip":        len(resolver.busy_truck_ids()),
            "trucks_available":      len(resolver.available_units()),
            "today_revenue_ngn":     str(today_revenue),
            "pending_payments":      Payment.objects.filter(status=Payment.Status.PENDING).count(),
            "pending_shortages":     Shortage.objects.filter(status=Shortage.Status.PENDING).count(),
            "blocked_customers":     Customer.objects.filter(is_blocked=True).count(),
            "total_receivables_ngn": str(Customer.objects.aggregate(t=Sum("current_balance"))["t"] or 0),
        })
