"""Order API views — thin HTTP wrappers around the lifecycle controller."""

import logging
from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from apps.authentication.permissions import require_role, DISPATCH_ROLES, FINANCE_ROLES, DELETE_ROLES
from .models import Depot, Inventory, Order, Shortage, Supplier
from .reconciliation import ReconciliationEngine
from .service import OrderLifecycleController
from . import serializers as sz

logger = logging.getLogger("cementops.orders")
controller = OrderLifecycleController()
reconciliation = ReconciliationEngine()

DETAIL_RELATED = ("customer", "depot", "supplier", "truck", "driver", "shortage")


def _detail(order_id):
    order = Order.objects.select_related(*DETAIL_RELATED).prefetch_related("events__actor").get(pk=order_id)
    return sz.OrderDetailSerializer(order).data


# ── GET/POST /api/orders/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="List orders (filtered, paginated) or create one")
class OrderListCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(responses=sz.OrderListSerializer(many=True))
    def get(self, request):
        try:
            page      = max(int(request.query_params.get("page", 1)), 1)
            page_size = min(max(int(request.query_params.get("page_size", 50)), 1), 200)
        except ValueError:
            return Response({"error": "page and page_size must be integers.", "code": "validation_error"},
                            status=400)
        orders, total = controller.list_orders(request.query_params, page=page, page_size=page_size)
        return Response({
            "count":     total,
            "page":      page,
            "page_size": page_size,
            "results":   sz.OrderListSerializer(orders, many=True).data,
        })

    @extend_schema(request=sz.OrderWriteSerializer, responses={201: sz.OrderDetailSerializer})
    def post(self, request):
        ser = sz.OrderWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = controller.create_order(ser.validated_data, actor=request.user)
        return Response(_detail(order.id), status=status.HTTP_201_CREATED)


# ── GET/PATCH/DELETE /api/orders/{id}/ ────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Retrieve, update or delete an order")
class OrderDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(responses=sz.OrderDetailSerializer)
    def get(self, request, pk):
        generics.get_object_or_404(Order, pk=pk)
        return Response(_detail(pk))

    @extend_schema(request=sz.OrderWriteSerializer, responses=sz.OrderDetailSerializer)
    def patch(self, request, pk):
        protected = [f for f in ("status", "truck", "driver", "delivery_otp") if f in request.data]
        if protected:
            return Response(
                {"error": f"Use the lifecycle actions to change {', '.join(protected)}.",
                 "code": "protected_field"},
                status=400,
            )
        ser = sz.OrderWriteSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        data.pop("transport_cost", None)
        controller.update_order(pk, data, actor=request.user)
        return Response(_detail(pk))

    def delete(self, request, pk):
        denied = require_role(request, DELETE_ROLES, "MANAGER or ADMIN")
        if denied:
            return denied
        removed = controller.delete_order(pk, actor=request.user)
        return Response({"deleted": str(pk), "removed": removed})


# ── POST /api/orders/{id}/next/ ───────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Advance to the next stage (requested → dispatched)",
               request=sz.DispatchSerializer, responses=sz.OrderDetailSerializer)
class OrderAdvanceView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, DISPATCH_ROLES)
        if denied:
            return denied
        ser = sz.DispatchSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        controller.advance(pk, actor=request.user, **ser.to_assignment())
        return Response(_detail(pk))


# ── POST /api/orders/{id}/dispatch/ ───────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Dispatch with a truck + driver from the available fleet",
               request=sz.DispatchSerializer, responses=sz.OrderDetailSerializer)
class OrderDispatchView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, DISPATCH_ROLES)
        if denied:
            return denied
        ser = sz.DispatchSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        controller.dispatch(pk, actor=request.user, **ser.to_assignment())
        return Response(_detail(pk))


# ── PATCH /api/orders/{id}/status/ ────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Explicit status write (forward only; delivered via reconciliation)",
               request=sz.StatusUpdateSerializer, responses=sz.OrderDetailSerializer)
class OrderStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, pk):
        denied = require_role(request, DISPATCH_ROLES)
        if denied:
            return denied
        ser = sz.StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        controller.update_order_status(
            pk, ser.validated_data["status"], assignment=ser.to_assignment(), actor=request.user,
        )
        return Response(_detail(pk))


# ── POST /api/orders/{id}/reassign/ ───────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Swap the truck + driver on a dispatched order",
               request=sz.ReassignSerializer, responses=sz.OrderDetailSerializer)
class OrderReassignView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, DISPATCH_ROLES)
        if denied:
            return denied
        ser = sz.ReassignSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        driver = ser.validated_data.get("driver")
        controller.reassign_fleet(
            pk, ser.validated_data["truck"].id, driver_id=driver.id if driver else None, actor=request.user,
        )
        return Response(_detail(pk))


# ── POST /api/orders/{id}/reconcile/ ──────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Confirm delivery with the customer OTP and counted quantities",
               request=sz.ReconcileSerializer, responses=sz.ShortageSerializer)
class OrderReconcileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, DISPATCH_ROLES)
        if denied:
            return denied
        ser = sz.ReconcileSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        shortage = reconciliation.submit(pk, actor=request.user, **ser.validated_data)
        return Response(sz.ShortageSerializer(shortage).data, status=status.HTTP_201_CREATED)


# ── POST /api/orders/{id}/confirm-payment/ ────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Accountant override: mark the order paid",
               request=None, responses=sz.OrderDetailSerializer)
class OrderConfirmPaymentView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, FINANCE_ROLES)
        if denied:
            return denied
        controller.confirm_order_payment(pk, actor=request.user)
        return Response(_detail(pk))


# ── GET /api/orders/metrics/ ──────────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Counts by status and trucks currently on the road",
               responses=sz.OrderMetricsSerializer)
class OrderMetricsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(sz.OrderMetricsSerializer(controller.get_order_metrics()).data)


# ── Shortages ─────────────────────────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="List reconciliation shortages")
class ShortageListView(generics.ListAPIView):
    serializer_class   = sz.ShortageSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["status", "liability", "driver"]
    queryset           = Shortage.objects.select_related("order", "driver")


# ── Masters: depots and suppliers ─────────────────────────────────────────────
@extend_schema(tags=["Masters"], summary="List or create depots")
class DepotListCreateView(generics.ListCreateAPIView):
    queryset           = Depot.objects.all()
    serializer_class   = sz.DepotSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["is_active"]
    search_fields      = ["name"]


@extend_schema(tags=["Masters"], summary="Retrieve or update a depot")
class DepotDetailView(generics.RetrieveUpdateAPIView):
    queryset           = Depot.objects.all()
    serializer_class   = sz.DepotSerializer
    permission_classes = [permissions.IsAuthenticated]


@extend_schema(tags=["Masters"], summary="List or create suppliers")
class SupplierListCreateView(generics.ListCreateAPIView):
    queryset           = Supplier.objects.all()
    serializer_class   = sz.SupplierSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["is_active"]
    search_fields      = ["name", "contact_person"]


@extend_schema(tags=["Masters"], summary="Retrieve or update a supplier")
class SupplierDetailView(generics.RetrieveUpdateAPIView):
    queryset           = Supplier.objects.all()
    serializer_class   = sz.SupplierSerializer
    permission_classes = [permissions.IsAuthenticated]


# ── Product catalog: depot stock and price list ──────────────────────────────
class _CatalogWriteGate:
    """Anyone signed in reads the catalog; stock and prices change at MANAGER or ADMIN."""

    def create(self, request, *args, **kwargs):
        denied = require_role(request, DELETE_ROLES, "MANAGER or ADMIN")
        if denied:
            return denied
        return super().create(request, *args, **kwargs)

    def update(self, request, *args, **kwargs):
        denied = require_role(request, DELETE_ROLES, "MANAGER or ADMIN")
        if denied:
            return denied
        return super().update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        denied = require_role(request, DELETE_ROLES, "MANAGER or ADMIN")
        if denied:
            return denied
        return super().destroy(request, *args, **kwargs)


@extend_schema(tags=["Masters"], summary="List depot stock or add a product line")
class InventoryListCreateView(_CatalogWriteGate, generics.ListCreateAPIView):
    queryset           = Inventory.objects.select_related("depot")
    serializer_class   = sz.InventorySerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["depot", "cement_type", "unit"]
    search_fields      = ["cement_type", "depot__name"]

    def perform_create(self, serializer):
        item = serializer.save()
        logger.info("Catalog: %s / %s added with %s %s",
                    item.depot.name, item.cement_type, item.quantity, item.unit)


@extend_schema(tags=["Masters"], summary="Retrieve, adjust or remove a product line")
class InventoryDetailView(_CatalogWriteGate, generics.RetrieveUpdateDestroyAPIView):
    queryset           = Inventory.objects.select_related("depot")
    serializer_class   = sz.InventorySerializer
    permission_classes = [permissions.IsAuthenticated]

    def perform_update(self, serializer):
        item = serializer.save()
        logger.info("Catalog: %s / %s set to %s %s",
                    item.depot.name, item.cement_type, item.quantity, item.unit)
