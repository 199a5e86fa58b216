"""Customer API views — master data, credit block toggle, balance."""

import logging
from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from apps.authentication.permissions import require_role, FINANCE_ROLES
from apps.finance.service import get_customer_balance
from .models import Customer
from .serializers import CustomerSerializer, CustomerBalanceSerializer

logger = logging.getLogger("cementops.customers")


@extend_schema(tags=["Customers"], summary="List or create customers")
class CustomerListCreateView(generics.ListCreateAPIView):
    queryset           = Customer.objects.all()
    serializer_class   = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields   = ["price_tier", "category", "is_blocked"]
    search_fields      = ["name", "phone", "email"]
    ordering_fields    = ["name", "current_balance", "created_at"]


@extend_schema(tags=["Customers"], summary="Retrieve or update a customer")
class CustomerDetailView(generics.RetrieveUpdateAPIView):
    queryset           = Customer.objects.all()
    serializer_class   = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated]


@extend_schema(tags=["Customers"], summary="Block or unblock a customer (finance roles)")
class CustomerBlockView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        denied = require_role(request, FINANCE_ROLES)
        if denied:
            return denied
        customer = generics.get_object_or_404(Customer, pk=pk)
        customer.is_blocked = bool(request.data.get("is_blocked", not customer.is_blocked))
        customer.save(update_fields=["is_blocked", "updated_at"])
        logger.info("Customer %s blocked=%s by %s", customer.name, customer.is_blocked, request.user.phone)
        return Response(CustomerSerializer(customer).data)


@extend_schema(tags=["Customers"], summary="Current balance, credit limit and headroom",
               responses=CustomerBalanceSerializer)
class CustomerBalanceView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response(CustomerBalanceSerializer(get_customer_balance(pk)).data)
