"""Pydantic schemas for invoices."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from procurement.schemas.common import FormModel


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""
    UNBILL = "Unbill"
    BILL = "Bill"
    PAID = "Paid"


class InvoiceRequest(FormModel):
    """
    Invoice fields for create and full replace.

    ``invoice_portion_percent`` must be numeric but is not range-checked;
    derived amounts follow whatever portion is stored.
    """

    no_po: str = Field(..., min_length=1, max_length=64)
    no_invoice: Optional[str] = Field(None, max_length=64)
    status_invoice: InvoiceStatus = InvoiceStatus.UNBILL.value
    termin: Optional[str] = Field(None, max_length=64)
    invoice_portion_percent: Decimal = Field(..., max_digits=7, decimal_places=4)
    ppn_status: Optional[str] = Field(None, max_length=16)

    model_config = ConfigDict(
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "no_po": "PO/2024/001",
                "no_invoice": "INV-0042",
                "status_invoice": "Unbill",
                "termin": "Termin 1",
                "invoice_portion_percent": "50",
                "ppn_status": "PKP"
            }
        }
    )


class InvoiceResponse(BaseModel):
    """Invoice with tax fields derived from the current PO nominal."""

    model_config = ConfigDict(from_attributes=True)

    id_invoice: int
    no_po: str
    no_invoice: Optional[str] = None
    status_invoice: InvoiceStatus
    termin: Optional[str] = None
    invoice_portion_percent: Decimal
    ppn_status: Optional[str] = None

    # Derived, never stored
    nominal_po: Decimal
    dpp: Decimal
    ppn: Decimal
    pph: Decimal
    grand_total: Decimal
