"""Pydantic schemas for procurement memos."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from procurement.schemas.attachment import AttachmentResponse
from procurement.schemas.common import FormModel


class MemoCreateRequest(FormModel):
    """Memo fields submitted on creation."""

    no_memo: str = Field(..., min_length=1, max_length=64)
    id_client: Optional[int] = None
    perihal: Optional[str] = None


class MemoUpdateRequest(FormModel):
    """Partial memo update; the memo number itself is immutable."""

    id_client: Optional[int] = None
    perihal: Optional[str] = None


class MemoResponse(BaseModel):
    """Memo row joined with its client names."""

    model_config = ConfigDict(from_attributes=True)

    no_memo: str
    id_client: Optional[int] = None
    perihal: Optional[str] = None
    nama_brand: Optional[str] = None
    nama_pt: Optional[str] = None


class MemoDetailResponse(MemoResponse):
    """Memo with its attachments."""

    attachments: list[AttachmentResponse] = []


class MemoWriteResponse(BaseModel):
    """Acknowledgement of a memo create or update."""

    no_memo: str
    message: str
