"""
Printable documents rendered from snapshot dicts (see snapshots.py).

Nothing here reads or writes the database: the same snapshot always renders
the same document, which keeps the generators trivially testable.
"""

from decimal import Decimal

from django.template.loader import render_to_string
from django.utils import timezone

from .snapshots import company

TEMPLATES = {
    "loading_manifest": "documents/loading_manifest.html",
    "gate_pass":        "documents/gate_pass.html",
    "waybill":          "documents/waybill.html",
    "invoice":          "documents/invoice.html",
    "receipt":          "documents/receipt.html",
    "statement":        "documents/statement.html",
}


def statement_lines(entries, date_from=None, date_to=None):
    """
    Running balance over statement entries, oldest first.
    Entries before ``date_from`` fold into the opening balance.
    Returns (opening_balance, lines, closing_balance).
    """
    ordered = sorted(entries, key=lambda e: (e["date"], -e["debit"]))
    opening = Decimal("0")
    balance = Decimal("0")
    lines = []
    for entry in ordered:
        if date_to and entry["date"] > date_to:
            continue
        balance += entry["debit"] - entry["credit"]
        if date_from and entry["date"] < date_from:
            opening = balance
            continue
        lines.append({**entry, "balance": balance})
    return opening, lines, balance


def _render(kind, context) -> str:
    context = {"company": company(), "generated_at": timezone.localtime(), **context}
    return render_to_string(TEMPLATES[kind], context)


def render_loading_manifest(snapshot: dict) -> str:
    return _render("loading_manifest", {"doc": snapshot})


def render_gate_pass(snapshot: dict) -> str:
    return _render("gate_pass", {"doc": snapshot})


def render_waybill(snapshot: dict) -> str:
    return _render("waybill", {"doc": snapshot})


def render_invoice(snapshot: dict) -> str:
    return _render("invoice", {"doc": snapshot})


def render_receipt(snapshot: dict) -> str:
    return _render("receipt", {"doc": snapshot})


def render_statement(snapshot: dict) -> str:
    opening, lines, closing = statement_lines(
        snapshot["entries"], snapshot.get("date_from"), snapshot.get("date_to"),
    )
    return _render("statement", {
        "doc":     snapshot,
        "opening": opening,
        "lines":   lines,
        "closing": closing,
        "owing":   closing > 0,
    })


RENDERERS = {
    "loading_manifest": render_loading_manifest,
    "gate_pass":        render_gate_pass,
    "waybill":          render_waybill,
    "invoice":          render_invoice,
    "receipt":          render_receipt,
    "statement":        render_statement,
}
