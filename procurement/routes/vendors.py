# ==== VENDOR ROUTES MODULE ==== #

"""
Vendor endpoints with document uploads.

Creates and updates accept multipart form data. File fields named after a
document type (``NPWP_FILE``, ``NIB_FILE``, ...) are stored with that type
and count towards verification; files in the ``attachments`` field are
stored untyped. The vendor's ``status_verifikasi`` is re-derived after
every write and cannot be set by the client.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.business.vendor_verification import missing_documents
from procurement.exceptions import NotFoundError
from procurement.routes.submission import read_submission
from procurement.schemas.attachment import AttachmentResponse
from procurement.schemas.common import parse_form
from procurement.schemas.vendor import (
    VendorCreateRequest, VendorDetailResponse, VendorResponse,
    VendorUpdateRequest, VendorWriteResponse
)
from procurement.services.vendor_service import VendorService
from procurement.settings import settings
from procurement.storage import repositories
from procurement.storage.db import get_db_session
from procurement.storage.files import LocalFileStore, get_file_store
from procurement.storage.repositories import to_dict


router = APIRouter()


@router.get("", response_model=list[VendorResponse])
async def list_vendors(db: AsyncSession = Depends(get_db_session)) -> list[VendorResponse]:
    """List vendors in id order with their category name."""
    rows = await repositories.list_vendors(db)
    return [VendorResponse.model_validate(row) for row in rows]


@router.get("/{id_vendor:int}", response_model=VendorDetailResponse)
async def get_vendor(
    id_vendor: int,
    db: AsyncSession = Depends(get_db_session)
) -> VendorDetailResponse:
    """
    Get one vendor with its attachments, newest first.

    ``missing_documents`` lists the required document types not yet
    uploaded, which is empty exactly when the vendor is verified.
    """
    vendor = await repositories.get_vendor(db, id_vendor)
    if vendor is None:
        raise NotFoundError("Vendor", id_vendor)

    attachments = await repositories.list_attachments(db, "vendor", id_vendor)
    missing = missing_documents(
        [attachment.document_type for attachment in attachments],
        settings.required_vendor_documents
    )

    return VendorDetailResponse(
        **to_dict(vendor),
        attachments=[AttachmentResponse.model_validate(a) for a in attachments],
        missing_documents=sorted(missing),
    )


@router.post("", response_model=VendorWriteResponse, status_code=201)
async def create_vendor(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    file_store: LocalFileStore = Depends(get_file_store)
) -> VendorWriteResponse:
    """Create a vendor, store its documents and evaluate verification."""
    service = VendorService(db, file_store)

    with file_store.discard_on_error():
        async with read_submission(request, settings.MAX_ATTACHMENTS_PER_UPLOAD) as (fields, uploads):
            payload = parse_form(VendorCreateRequest, fields)
            vendor = await service.create_vendor(payload.changes(), uploads)

        await db.commit()
    return VendorWriteResponse(
        id_vendor=vendor.id_vendor,
        status_verifikasi=vendor.status_verifikasi,
        message="Vendor berhasil dibuat",
    )


@router.put("/{id_vendor:int}", response_model=VendorWriteResponse)
async def update_vendor(
    id_vendor: int,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    file_store: LocalFileStore = Depends(get_file_store)
) -> VendorWriteResponse:
    """Partially update a vendor, append documents and re-evaluate verification."""
    service = VendorService(db, file_store)

    with file_store.discard_on_error():
        async with read_submission(request, settings.MAX_ATTACHMENTS_PER_UPLOAD) as (fields, uploads):
            payload = parse_form(VendorUpdateRequest, fields)
            vendor = await service.update_vendor(id_vendor, payload.changes(), uploads)

        await db.commit()
    return VendorWriteResponse(
        id_vendor=vendor.id_vendor,
        status_verifikasi=vendor.status_verifikasi,
        message="Vendor berhasil diperbarui",
    )
