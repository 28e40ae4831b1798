"""Pydantic schemas for purchase orders."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from procurement.schemas.attachment import AttachmentResponse
from procurement.schemas.common import FormModel


class PurchaseOrderCreateRequest(FormModel):
    """Purchase order fields submitted on creation."""

    no_po: str = Field(..., min_length=1, max_length=64)
    id_vendor: Optional[int] = None
    id_client: Optional[int] = None
    no_memo: Optional[str] = Field(None, max_length=64)
    nominal: Decimal = Field(..., max_digits=18, decimal_places=2)
    perihal_project: Optional[str] = None
    tanggal_po: Optional[date] = None
    status_po: Optional[str] = Field(None, max_length=32)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "no_po": "PO/2024/001",
                "id_vendor": 7,
                "id_client": 2,
                "no_memo": "MEMO/2024/010",
                "nominal": "1000000.00",
                "perihal_project": "Cetak banner pameran",
                "tanggal_po": "2024-05-02",
                "status_po": "Open"
            }
        }
    )


class PurchaseOrderUpdateRequest(FormModel):
    """Partial purchase order update; the PO number itself is immutable."""

    id_vendor: Optional[int] = None
    id_client: Optional[int] = None
    no_memo: Optional[str] = Field(None, max_length=64)
    nominal: Optional[Decimal] = Field(None, max_digits=18, decimal_places=2)
    perihal_project: Optional[str] = None
    tanggal_po: Optional[date] = None
    status_po: Optional[str] = Field(None, max_length=32)


class PurchaseOrderResponse(BaseModel):
    """Purchase order row joined with vendor and client display names."""

    model_config = ConfigDict(from_attributes=True)

    no_po: str
    id_vendor: Optional[int] = None
    id_client: Optional[int] = None
    no_memo: Optional[str] = None
    nominal: Decimal
    perihal_project: Optional[str] = None
    tanggal_po: Optional[date] = None
    status_po: Optional[str] = None
    nama_vendor: Optional[str] = None
    nama_client: Optional[str] = None


class PurchaseOrderDetailResponse(PurchaseOrderResponse):
    """Purchase order with its attachments."""

    attachments: list[AttachmentResponse] = []


class PurchaseOrderWriteResponse(BaseModel):
    """Acknowledgement of a purchase order create or update."""

    no_po: str
    message: str
