"""Document views — fetch a snapshot, allocate print numbers, return HTML or PDF."""

import logging
from django.http import HttpResponse
from django.utils.dateparse import parse_date
from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.customers.models import Customer
from apps.finance.models import Payment
from apps.orders.models import Order
from apps.orders.service import OrderLifecycleController
from . import generators, pdf
from .snapshots import order_snapshot, payment_snapshot, statement_snapshot

logger = logging.getLogger("cementops.documents")
controller = OrderLifecycleController()

ORDER_DOCUMENTS = ("loading_manifest", "gate_pass", "waybill", "invoice")
PDF_RENDERERS   = {"invoice": pdf.render_invoice_pdf, "receipt": pdf.render_receipt_pdf}
OUTPUT_PARAM    = OpenApiParameter("output", str, enum=["html", "pdf"],
                                   description="pdf is available for invoice and receipt")


def _respond(kind, snapshot, output, filename):
    if output == "pdf":
        if kind not in PDF_RENDERERS:
            return Response({"error": f"No PDF layout for {kind}.", "code": "validation_error"}, status=400)
        response = HttpResponse(PDF_RENDERERS[kind](snapshot), content_type="application/pdf")
        response["Content-Disposition"] = f'inline; filename="{filename}.pdf"'
        return response
    return HttpResponse(generators.RENDERERS[kind](snapshot), content_type="text/html; charset=utf-8")


# ── GET /api/documents/orders/{id}/{kind}/ ────────────────────────────────────
@extend_schema(tags=["Documents"], summary="Printable order document (manifest, gate pass, waybill, invoice)",
               parameters=[OUTPUT_PARAM], responses={(200, "text/html"): str})
class OrderDocumentView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk, kind):
        kind = kind.replace("-", "_")
        if kind not in ORDER_DOCUMENTS:
            return Response({"error": f"Unknown document '{kind}'.", "code": "not_found"}, status=404)
        generics.get_object_or_404(Order, pk=pk)

        if kind in ("gate_pass", "loading_manifest"):
            controller.assign_document_numbers(pk, **{kind: True})

        order = Order.objects.select_related("customer", "depot", "supplier", "truck", "driver").get(pk=pk)
        logger.info("Printing %s for %s", kind, order.order_number)
        return _respond(kind, order_snapshot(order), request.query_params.get("output", "html"),
                        f"{kind}-{order.order_number}")


# ── GET /api/documents/payments/{id}/receipt/ ─────────────────────────────────
@extend_schema(tags=["Documents"], summary="Payment receipt", parameters=[OUTPUT_PARAM],
               responses={(200, "text/html"): str})
class ReceiptView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        payment = generics.get_object_or_404(Payment.objects.select_related("customer", "order"), pk=pk)
        snapshot = payment_snapshot(payment)
        return _respond("receipt", snapshot, request.query_params.get("output", "html"),
                        f"receipt-{snapshot['receipt_number']}")


# ── GET /api/documents/customers/{id}/statement/ ──────────────────────────────
@extend_schema(
    tags=["Documents"], summary="Statement of account with running balance",
    parameters=[OpenApiParameter("date_from", str), OpenApiParameter("date_to", str)],
    responses={(200, "text/html"): str},
)
class StatementView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        customer = generics.get_object_or_404(Customer, pk=pk)
        date_from = parse_date(request.query_params.get("date_from", "") or "")
        date_to   = parse_date(request.query_params.get("date_to", "") or "")
        snapshot = statement_snapshot(customer, date_from=date_from, date_to=date_to)
        return _respond("statement", snapshot, "html", f"statement-{customer.id}")
