"""Pydantic schemas for vendors."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from procurement.business.vendor_verification import VerificationStatus
from procurement.schemas.attachment import AttachmentResponse
from procurement.schemas.common import FormModel


class VendorCreateRequest(FormModel):
    """
    Vendor fields submitted on creation.

    ``status_verifikasi`` is not accepted: it is derived from the vendor's
    attached documents.
    """

    nama_pt_cv: str = Field(..., min_length=1, max_length=255)
    nama_vendor: Optional[str] = Field(None, max_length=255)
    id_kategori: Optional[int] = None
    alamat: Optional[str] = None
    no_pic: Optional[str] = Field(None, max_length=32)
    nama_pic: Optional[str] = Field(None, max_length=128)


class VendorUpdateRequest(FormModel):
    """Partial vendor update; omitted or blank fields keep their value."""

    nama_pt_cv: Optional[str] = Field(None, min_length=1, max_length=255)
    nama_vendor: Optional[str] = Field(None, max_length=255)
    id_kategori: Optional[int] = None
    alamat: Optional[str] = None
    no_pic: Optional[str] = Field(None, max_length=32)
    nama_pic: Optional[str] = Field(None, max_length=128)


class VendorResponse(BaseModel):
    """Vendor row as listed, joined with its category name."""

    model_config = ConfigDict(from_attributes=True)

    id_vendor: int
    nama_pt_cv: str
    nama_vendor: Optional[str] = None
    id_kategori: Optional[int] = None
    nama_kategori: Optional[str] = None
    alamat: Optional[str] = None
    no_pic: Optional[str] = None
    nama_pic: Optional[str] = None
    status_verifikasi: VerificationStatus


class VendorDetailResponse(VendorResponse):
    """Vendor with its attachments and the required documents still missing."""

    attachments: list[AttachmentResponse] = []
    missing_documents: list[str] = []


class VendorWriteResponse(BaseModel):
    """Acknowledgement of a vendor create or update."""

    id_vendor: int
    status_verifikasi: VerificationStatus
    message: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id_vendor": 7,
                "status_verifikasi": "Belum terverifikasi",
                "message": "Vendor berhasil dibuat"
            }
        }
    )
