# ==== ATTACHMENT SERVICE ==== #

"""
Attachment storage for purchase orders and memos, and attachment removal.

Vendor uploads go through ``VendorService`` because they also drive the
vendor's verification status.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from procurement.exceptions import NotFoundError
from procurement.observability.logging import log_business_event
from procurement.observability.metrics import (
    attachments_deleted_total, attachments_stored_total
)
from procurement.observability.tracing import get_tracer
from procurement.services.vendor_service import VendorService
from procurement.storage import repositories
from procurement.storage.files import LocalFileStore


tracer = get_tracer(__name__)


async def store_attachments(
    db: AsyncSession,
    file_store: LocalFileStore,
    related_table: str,
    related_id: int | str,
    uploads: list[tuple[str, UploadFile]]
) -> int:
    """
    Write uploads to the file store and record them against one entity.

    Returns:
        int: Number of attachments recorded
    """
    stored = await file_store.save_all(uploads)
    await repositories.add_attachments(db, related_table, related_id, stored)
    if stored:
        attachments_stored_total.labels(related_table=related_table).inc(len(stored))
    return len(stored)


async def remove_attachment(
    db: AsyncSession,
    file_store: LocalFileStore,
    id_attachment: int
) -> None:
    """
    Delete an attachment row and its file.

    The row removal and, for vendor documents, the verification
    re-evaluation are committed together before the file is unlinked.

    Raises:
        NotFoundError: If the attachment does not exist
    """
    with tracer.start_as_current_span("remove_attachment") as span:
        span.set_attribute("id_attachment", id_attachment)

        attachment = await repositories.get_attachment(db, id_attachment)
        if attachment is None:
            raise NotFoundError("Attachment", id_attachment)

        file_path = attachment.file_path
        related_table = attachment.related_table
        related_id_int = attachment.related_id_int
        span.set_attribute("related_table", related_table)

        await repositories.delete_attachment(db, id_attachment)

        if related_table == "vendor" and related_id_int is not None:
            await VendorService(db, file_store).refresh_verification_by_id(related_id_int)

        await db.commit()

        file_store.delete(file_path)
        attachments_deleted_total.labels(related_table=related_table).inc()
        log_business_event(
            "attachment_deleted",
            id_attachment=id_attachment,
            related_table=related_table,
            file_path=file_path,
        )
