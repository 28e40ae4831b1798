# ==== INVOICE SERVICE ==== #

"""
Invoice persistence with derived tax fields.

Every path that returns an invoice re-reads the linked purchase order's
nominal and recomputes DPP, PPN, PPh and grand total; nothing derived is
stored or cached.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from procurement.business.invoice_calculator import calculate_invoice_details
from procurement.exceptions import NotFoundError
from procurement.observability.metrics import invoice_calculations_total
from procurement.observability.tracing import get_tracer
from procurement.storage import repositories
from procurement.storage.repositories import apply_changes, to_dict


tracer = get_tracer(__name__)


def with_derived_fields(invoice: dict[str, Any], nominal_po: Decimal) -> dict[str, Any]:
    """Run the tax calculation for one invoice row and count it."""
    invoice_calculations_total.labels(
        ppn_status=str(invoice.get("ppn_status") or "none")
    ).inc()
    return calculate_invoice_details(invoice, nominal_po)


async def list_invoices(db: AsyncSession) -> list[dict[str, Any]]:
    """All invoices with derived fields, in id order."""
    with tracer.start_as_current_span("list_invoices") as span:
        rows = await repositories.list_invoices_with_nominal(db)
        span.set_attribute("invoice_count", len(rows))
        return [with_derived_fields(invoice, nominal) for invoice, nominal in rows]


async def _nominal_for(db: AsyncSession, no_po: str) -> Decimal:
    nominal = await repositories.get_po_nominal(db, no_po)
    if nominal is None:
        raise NotFoundError("PO", no_po)
    return nominal


async def get_invoice(db: AsyncSession, id_invoice: int) -> dict[str, Any]:
    """
    One invoice with derived fields.

    Raises:
        NotFoundError: If the invoice or its purchase order is missing
    """
    invoice = await repositories.get_invoice(db, id_invoice)
    if invoice is None:
        raise NotFoundError("Invoice", id_invoice)
    nominal = await _nominal_for(db, invoice.no_po)
    return with_derived_fields(to_dict(invoice), nominal)


async def create_invoice(db: AsyncSession, data: dict[str, Any]) -> dict[str, Any]:
    """
    Insert an invoice against an existing purchase order.

    Raises:
        NotFoundError: If ``data["no_po"]`` does not exist
    """
    with tracer.start_as_current_span("create_invoice") as span:
        span.set_attribute("no_po", data["no_po"])
        nominal = await _nominal_for(db, data["no_po"])
        invoice = await repositories.create_invoice(db, data)
        span.set_attribute("id_invoice", invoice.id_invoice)
        return with_derived_fields(to_dict(invoice), nominal)


async def replace_invoice(db: AsyncSession, id_invoice: int, data: dict[str, Any]) -> dict[str, Any]:
    """
    Overwrite every editable field of an invoice.

    Raises:
        NotFoundError: If the invoice or the target purchase order is missing
    """
    with tracer.start_as_current_span("replace_invoice") as span:
        span.set_attribute("id_invoice", id_invoice)
        invoice = await repositories.get_invoice(db, id_invoice)
        if invoice is None:
            raise NotFoundError("Invoice", id_invoice)
        nominal = await _nominal_for(db, data["no_po"])
        apply_changes(invoice, data)
        await db.flush()
        return with_derived_fields(to_dict(invoice), nominal)
