# ==== INVOICE ROUTES MODULE ==== #

"""
Invoice endpoints.

Every response carries DPP, PPN, PPh and grand total computed from the
linked purchase order's nominal at the time of the request.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.schemas.invoice import InvoiceRequest, InvoiceResponse
from procurement.services import invoice_service
from procurement.storage.db import get_db_session


router = APIRouter()


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(db: AsyncSession = Depends(get_db_session)) -> list[InvoiceResponse]:
    """List invoices in id order with derived tax fields."""
    rows = await invoice_service.list_invoices(db)
    return [InvoiceResponse.model_validate(row) for row in rows]


@router.get("/{id_invoice:int}", response_model=InvoiceResponse)
async def get_invoice(
    id_invoice: int,
    db: AsyncSession = Depends(get_db_session)
) -> InvoiceResponse:
    """Get one invoice with derived tax fields."""
    return InvoiceResponse.model_validate(await invoice_service.get_invoice(db, id_invoice))


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    payload: InvoiceRequest,
    db: AsyncSession = Depends(get_db_session)
) -> InvoiceResponse:
    """Create an invoice against an existing purchase order."""
    row = await invoice_service.create_invoice(db, payload.model_dump(mode="python"))
    await db.commit()
    return InvoiceResponse.model_validate(row)


@router.put("/{id_invoice:int}", response_model=InvoiceResponse)
async def replace_invoice(
    id_invoice: int,
    payload: InvoiceRequest,
    db: AsyncSession = Depends(get_db_session)
) -> InvoiceResponse:
    """Replace every editable field of an invoice."""
    row = await invoice_service.replace_invoice(db, id_invoice, payload.model_dump(mode="python"))
    await db.commit()
    return InvoiceResponse.model_validate(row)
