# ==== INVOICE TAX CALCULATION ==== #

"""
Derived financial fields for invoices.

An invoice bills a percentage of its purchase order's nominal value. The
taxable base (DPP) is that portion; VAT (PPN) applies only to PKP-registered
vendors; withholding tax (PPh) always applies. None of these fields are
stored: they are recomputed from the current purchase order nominal on
every read so a changed PO value is reflected immediately.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping


# ==== TAX RULES ==== #

PPN_RATE = Decimal("0.11")
PPH_RATE = Decimal("0.02")
PKP_STATUS = "PKP"

_HUNDRED = Decimal(100)
_NAN = Decimal("NaN")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a stored or submitted numeric value to ``Decimal``.

    Floats go through ``str`` so their shortest repr is used instead of the
    exact binary expansion. Values that cannot be parsed become ``NaN``,
    which then propagates through the arithmetic instead of raising.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        return _NAN
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return _NAN


def calculate_invoice_details(
    invoice: Mapping[str, Any],
    nominal_po: Any
) -> dict[str, Any]:
    """
    Compute DPP, PPN, PPh and grand total for one invoice.

    Args:
        invoice: Invoice record with ``invoice_portion_percent`` and ``ppn_status``
        nominal_po: Nominal of the linked purchase order, read fresh by the caller

    Returns:
        dict[str, Any]: A copy of ``invoice`` with ``nominal_po``, ``dpp``,
        ``ppn``, ``pph`` and ``grand_total`` added
    """
    nominal = to_decimal(nominal_po)
    portion = to_decimal(invoice.get("invoice_portion_percent"))

    dpp = nominal * (portion / _HUNDRED)
    ppn = dpp * PPN_RATE if invoice.get("ppn_status") == PKP_STATUS else Decimal(0)
    pph = dpp * PPH_RATE
    grand_total = dpp + ppn - pph

    return {
        **invoice,
        "nominal_po": nominal,
        "dpp": dpp,
        "ppn": ppn,
        "pph": pph,
        "grand_total": grand_total,
    }
