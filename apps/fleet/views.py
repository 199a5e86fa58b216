"""Fleet API views — trucks, drivers, compliance documents, availability, driver wallet."""

import logging
from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from apps.authentication.permissions import require_role, FINANCE_ROLES
from .models import ComplianceDocument, Driver, DriverTransaction, Truck
from .service import DriverWalletService, FleetAvailabilityResolver
from . import serializers as sz

logger = logging.getLogger("cementops.fleet")
wallet_service = DriverWalletService()


@extend_schema(tags=["Fleet"], summary="List or register trucks")
class TruckListCreateView(generics.ListCreateAPIView):
    queryset           = Truck.objects.select_related("driver")
    serializer_class   = sz.TruckSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["is_active", "truck_type"]
    search_fields      = ["plate_number", "model"]


@extend_schema(tags=["Fleet"], summary="Retrieve or update a truck (including its paired driver)")
class TruckDetailView(generics.RetrieveUpdateAPIView):
    queryset           = Truck.objects.select_related("driver")
    serializer_class   = sz.TruckSerializer
    permission_classes = [permissions.IsAuthenticated]


@extend_schema(tags=["Fleet"], summary="List or register drivers")
class DriverListCreateView(generics.ListCreateAPIView):
    queryset           = Driver.objects.select_related("truck")
    serializer_class   = sz.DriverSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["is_active"]
    search_fields      = ["name", "phone", "license_number"]


@extend_schema(tags=["Fleet"], summary="Retrieve or update a driver")
class DriverDetailView(generics.RetrieveUpdateAPIView):
    queryset           = Driver.objects.select_related("truck")
    serializer_class   = sz.DriverSerializer
    permission_classes = [permissions.IsAuthenticated]


# ── GET /api/fleet/available/ ─────────────────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="Truck + driver pairs eligible for a new dispatch",
               responses=sz.AvailableUnitSerializer(many=True))
class AvailableUnitsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        units = FleetAvailabilityResolver().available_units()
        return Response(sz.AvailableUnitSerializer(units, many=True).data)


# ── Compliance documents ──────────────────────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="List or add compliance documents")
class ComplianceDocumentListCreateView(generics.ListCreateAPIView):
    queryset           = ComplianceDocument.objects.all()
    serializer_class   = sz.ComplianceDocumentSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["entity_type", "entity_id", "document_type"]
    ordering_fields    = ["expiry_date"]


@extend_schema(tags=["Fleet"], summary="Retrieve, renew or remove a compliance document")
class ComplianceDocumentDetailView(generics.RetrieveUpdateDestroyAPIView):
    queryset           = ComplianceDocument.objects.all()
    serializer_class   = sz.ComplianceDocumentSerializer
    permission_classes = [permissions.IsAuthenticated]


# ── Driver wallet ─────────────────────────────────────────────────────────────
@extend_schema(tags=["Fleet"], summary="Driver wallet balance (credits − debits)",
               responses=sz.DriverWalletSerializer)
class DriverWalletView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        driver = generics.get_object_or_404(Driver, pk=pk)
        return Response(sz.DriverWalletSerializer(wallet_service.summary(driver)).data)


@extend_schema(tags=["Fleet"], summary="List a driver's wallet transactions or post one (finance roles)")
class DriverTransactionListCreateView(generics.ListCreateAPIView):
    serializer_class   = sz.DriverTransactionSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["type"]

    def get_queryset(self):
        return DriverTransaction.objects.filter(driver_id=self.kwargs["pk"]).select_related("order")

    def create(self, request, *args, **kwargs):
        denied = require_role(request, FINANCE_ROLES)
        if denied:
            return denied
        driver = generics.get_object_or_404(Driver, pk=kwargs["pk"])
        ser = self.get_serializer(data={**request.data, "driver": str(driver.id)})
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        tx = wallet_service.record_transaction(
            driver, d["type"], d["amount"], order=d.get("order"),
            description=d.get("description", ""), actor=request.user,
        )
        return Response(self.get_serializer(tx).data, status=status.HTTP_201_CREATED)
