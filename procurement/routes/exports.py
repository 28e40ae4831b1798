# ==== EXCEL EXPORT ROUTES ==== #

"""Excel workbook downloads for each list resource."""

from enum import Enum

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.services.excel_export import XLSX_MEDIA_TYPE, export_filename, export_resource
from procurement.storage.db import get_db_session


router = APIRouter()


class ExportResource(str, Enum):
    """Resources that can be downloaded as a workbook."""
    KATEGORI = "kategori"
    CLIENT = "client"
    VENDOR = "vendor"
    MEMO = "memo"
    PO = "po"
    INVOICE = "invoice"


@router.get("/{resource}/export", response_class=Response)
async def export_workbook(
    resource: ExportResource,
    db: AsyncSession = Depends(get_db_session)
) -> Response:
    """
    Download every row of a resource as an ``.xlsx`` workbook.

    Invoice exports include the derived tax columns.
    """
    content = await export_resource(db, resource.value)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(resource.value)}"'
        }
    )
