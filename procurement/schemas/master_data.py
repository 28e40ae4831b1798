"""Pydantic schemas for categories and clients."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from procurement.schemas.common import FormModel


# ==== KATEGORI ==== #


class KategoriRequest(FormModel):
    """Request schema for creating or renaming a category."""

    nama_kategori: str = Field(..., min_length=1, max_length=128)

    model_config = ConfigDict(
        json_schema_extra={"example": {"nama_kategori": "Percetakan"}}
    )


class KategoriResponse(BaseModel):
    """Response schema for a category."""

    model_config = ConfigDict(from_attributes=True)

    id_kategori: int
    nama_kategori: str


# ==== CLIENT ==== #


class ClientRequest(FormModel):
    """Request schema for creating or replacing a client."""

    nama_brand: str = Field(..., min_length=1, max_length=128)
    nama_pt: Optional[str] = Field(None, max_length=255)
    alamat: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nama_brand": "Kopi Senja",
                "nama_pt": "PT Senja Abadi",
                "alamat": "Jl. Sudirman No. 1, Jakarta"
            }
        }
    )


class ClientResponse(BaseModel):
    """Response schema for a client."""

    model_config = ConfigDict(from_attributes=True)

    id_client: int
    nama_brand: str
    nama_pt: Optional[str] = None
    alamat: Optional[str] = None
