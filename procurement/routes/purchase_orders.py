# ==== PURCHASE ORDER ROUTES MODULE ==== #

"""
Purchase order endpoints with attachment uploads.

PO numbers are free text and commonly contain slashes
(``PO/2024/001``), so the identifier is matched as a path.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.exceptions import NotFoundError
from procurement.observability.tracing import get_tracer
from procurement.routes.submission import read_submission
from procurement.schemas.attachment import AttachmentResponse
from procurement.schemas.common import parse_form
from procurement.schemas.purchase_order import (
    PurchaseOrderCreateRequest, PurchaseOrderDetailResponse, PurchaseOrderResponse,
    PurchaseOrderUpdateRequest, PurchaseOrderWriteResponse
)
from procurement.services.attachment_service import store_attachments
from procurement.settings import settings
from procurement.storage import repositories
from procurement.storage.db import get_db_session
from procurement.storage.files import LocalFileStore, get_file_store
from procurement.storage.repositories import to_dict


router = APIRouter()
tracer = get_tracer(__name__)


@router.get("", response_model=list[PurchaseOrderResponse])
async def list_purchase_orders(
    db: AsyncSession = Depends(get_db_session)
) -> list[PurchaseOrderResponse]:
    """List purchase orders, newest PO date first."""
    rows = await repositories.list_purchase_orders(db)
    return [PurchaseOrderResponse.model_validate(row) for row in rows]


@router.get("/{no_po:path}", response_model=PurchaseOrderDetailResponse)
async def get_purchase_order(
    no_po: str,
    db: AsyncSession = Depends(get_db_session)
) -> PurchaseOrderDetailResponse:
    """Get one purchase order with its attachments, newest first."""
    po = await repositories.get_purchase_order(db, no_po)
    if po is None:
        raise NotFoundError("PO", no_po)

    attachments = await repositories.list_attachments(db, "po", no_po)
    return PurchaseOrderDetailResponse(
        **to_dict(po),
        attachments=[AttachmentResponse.model_validate(a) for a in attachments],
    )


@router.post("", response_model=PurchaseOrderWriteResponse, status_code=201)
async def create_purchase_order(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    file_store: LocalFileStore = Depends(get_file_store)
) -> PurchaseOrderWriteResponse:
    """Create a purchase order and store its attachments."""
    with file_store.discard_on_error():
        async with read_submission(request, settings.MAX_ATTACHMENTS_PER_UPLOAD) as (fields, uploads):
            payload = parse_form(PurchaseOrderCreateRequest, fields)

            with tracer.start_as_current_span("create_purchase_order") as span:
                span.set_attribute("no_po", payload.no_po)
                po = await repositories.create_purchase_order(db, payload.changes())
                await store_attachments(db, file_store, "po", po.no_po, uploads)

        await db.commit()
    return PurchaseOrderWriteResponse(no_po=po.no_po, message="PO berhasil dibuat")


@router.put("/{no_po:path}", response_model=PurchaseOrderWriteResponse)
async def update_purchase_order(
    no_po: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    file_store: LocalFileStore = Depends(get_file_store)
) -> PurchaseOrderWriteResponse:
    """
    Partially update a purchase order and append attachments.

    A changed ``nominal`` is picked up by every later invoice read.
    """
    with file_store.discard_on_error():
        async with read_submission(request, settings.MAX_ATTACHMENTS_PER_UPLOAD) as (fields, uploads):
            payload = parse_form(PurchaseOrderUpdateRequest, fields)

            po = await repositories.get_purchase_order(db, no_po)
            if po is None:
                raise NotFoundError("PO", no_po)

            repositories.apply_changes(po, payload.changes())
            await db.flush()
            await store_attachments(db, file_store, "po", no_po, uploads)

        await db.commit()
    return PurchaseOrderWriteResponse(no_po=no_po, message="PO berhasil diperbarui")
