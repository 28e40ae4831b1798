"""Pydantic schemas for stored attachments."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AttachmentResponse(BaseModel):
    """Attachment as listed on a vendor, purchase order or memo."""

    model_config = ConfigDict(from_attributes=True)

    id_attachment: int
    file_path: str
    original_name: Optional[str] = None
    document_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
