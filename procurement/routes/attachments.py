"""Attachment removal endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.schemas.common import MessageResponse
from procurement.services.attachment_service import remove_attachment
from procurement.storage.db import get_db_session
from procurement.storage.files import LocalFileStore, get_file_store


router = APIRouter()


@router.delete("/{id_attachment:int}", response_model=MessageResponse)
async def delete_attachment(
    id_attachment: int,
    db: AsyncSession = Depends(get_db_session),
    file_store: LocalFileStore = Depends(get_file_store)
) -> MessageResponse:
    """
    Delete an attachment and its stored file.

    Removing a vendor document re-evaluates that vendor's verification.
    """
    await remove_attachment(db, file_store, id_attachment)
    return MessageResponse(message="Attachment berhasil dihapus")
