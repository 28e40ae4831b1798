# ==== MEMO ROUTES MODULE ==== #

"""Procurement memo endpoints with attachment uploads."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.exceptions import NotFoundError
from procurement.routes.submission import read_submission
from procurement.schemas.attachment import AttachmentResponse
from procurement.schemas.common import parse_form
from procurement.schemas.memo import (
    MemoCreateRequest, MemoDetailResponse, MemoResponse,
    MemoUpdateRequest, MemoWriteResponse
)
from procurement.services.attachment_service import store_attachments
from procurement.settings import settings
from procurement.storage import repositories
from procurement.storage.db import get_db_session
from procurement.storage.files import LocalFileStore, get_file_store
from procurement.storage.repositories import to_dict


router = APIRouter()


@router.get("", response_model=list[MemoResponse])
async def list_memos(db: AsyncSession = Depends(get_db_session)) -> list[MemoResponse]:
    """List memos in number order with their client names."""
    rows = await repositories.list_memos(db)
    return [MemoResponse.model_validate(row) for row in rows]


@router.get("/{no_memo:path}", response_model=MemoDetailResponse)
async def get_memo(
    no_memo: str,
    db: AsyncSession = Depends(get_db_session)
) -> MemoDetailResponse:
    """Get one memo with its attachments, newest first."""
    memo = await repositories.get_memo(db, no_memo)
    if memo is None:
        raise NotFoundError("Memo", no_memo)

    attachments = await repositories.list_attachments(db, "memo", no_memo)
    return MemoDetailResponse(
        **to_dict(memo),
        attachments=[AttachmentResponse.model_validate(a) for a in attachments],
    )


@router.post("", response_model=MemoWriteResponse, status_code=201)
async def create_memo(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    file_store: LocalFileStore = Depends(get_file_store)
) -> MemoWriteResponse:
    """Create a memo and store its attachments."""
    with file_store.discard_on_error():
        async with read_submission(request, settings.MAX_ATTACHMENTS_PER_UPLOAD) as (fields, uploads):
            payload = parse_form(MemoCreateRequest, fields)
            memo = await repositories.create_memo(db, payload.changes())
            await store_attachments(db, file_store, "memo", memo.no_memo, uploads)

        await db.commit()
    return MemoWriteResponse(no_memo=memo.no_memo, message="Memo berhasil dibuat")


@router.put("/{no_memo:path}", response_model=MemoWriteResponse)
async def update_memo(
    no_memo: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    file_store: LocalFileStore = Depends(get_file_store)
) -> MemoWriteResponse:
    """Partially update a memo and append attachments."""
    with file_store.discard_on_error():
        async with read_submission(request, settings.MAX_ATTACHMENTS_PER_UPLOAD) as (fields, uploads):
            payload = parse_form(MemoUpdateRequest, fields)

            memo = await repositories.get_memo(db, no_memo)
            if memo is None:
                raise NotFoundError("Memo", no_memo)

            repositories.apply_changes(memo, payload.changes())
            await db.flush()
            await store_attachments(db, file_store, "memo", no_memo, uploads)

        await db.commit()
    return MemoWriteResponse(no_memo=no_memo, message="Memo berhasil diperbarui")
