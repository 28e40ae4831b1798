# ==== EXCEL EXPORT SERVICE ==== #

"""
Excel workbook export for the procurement listings.

Each exportable resource maps to the same rows its list endpoint returns,
written as one worksheet with a bold header row. Invoice exports carry
the derived tax fields.
"""

import io
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Awaitable, Callable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from sqlalchemy.ext.asyncio import AsyncSession

from procurement.exceptions import NotFoundError
from procurement.observability.logging import log_business_event
from procurement.observability.metrics import exports_total
from procurement.services import invoice_service
from procurement.storage import repositories
from procurement.storage.repositories import to_dict


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_MAX_COLUMN_WIDTH = 60


async def _kategori_rows(db: AsyncSession) -> list[dict[str, Any]]:
    return [to_dict(row) for row in await repositories.list_kategori(db)]


async def _client_rows(db: AsyncSession) -> list[dict[str, Any]]:
    return [to_dict(row) for row in await repositories.list_clients(db)]


@dataclass(frozen=True)
class ExportDefinition:
    """Sheet title, (field, header) columns and the row loader of one export."""
    title: str
    columns: list[tuple[str, str]]
    load_rows: Callable[[AsyncSession], Awaitable[list[dict[str, Any]]]]


EXPORTS: dict[str, ExportDefinition] = {
    "kategori": ExportDefinition(
        title="Kategori",
        columns=[("id_kategori", "ID Kategori"), ("nama_kategori", "Nama Kategori")],
        load_rows=lambda db: _kategori_rows(db),
    ),
    "client": ExportDefinition(
        title="Client",
        columns=[
            ("id_client", "ID Client"),
            ("nama_brand", "Nama Brand"),
            ("nama_pt", "Nama PT"),
            ("alamat", "Alamat"),
        ],
        load_rows=lambda db: _client_rows(db),
    ),
    "vendor": ExportDefinition(
        title="Vendor",
        columns=[
            ("id_vendor", "ID Vendor"),
            ("nama_pt_cv", "Nama PT/CV"),
            ("nama_vendor", "Nama Vendor"),
            ("nama_kategori", "Kategori"),
            ("alamat", "Alamat"),
            ("nama_pic", "Nama PIC"),
            ("no_pic", "No. PIC"),
            ("status_verifikasi", "Status Verifikasi"),
        ],
        load_rows=lambda db: repositories.list_vendors(db),
    ),
    "memo": ExportDefinition(
        title="Memo",
        columns=[
            ("no_memo", "No. Memo"),
            ("nama_brand", "Brand"),
            ("nama_pt", "Nama PT"),
            ("perihal", "Perihal"),
        ],
        load_rows=lambda db: repositories.list_memos(db),
    ),
    "po": ExportDefinition(
        title="Purchase Order",
        columns=[
            ("no_po", "No. PO"),
            ("tanggal_po", "Tanggal PO"),
            ("nama_vendor", "Vendor"),
            ("nama_client", "Client"),
            ("no_memo", "No. Memo"),
            ("perihal_project", "Perihal Project"),
            ("nominal", "Nominal"),
            ("status_po", "Status PO"),
        ],
        load_rows=lambda db: repositories.list_purchase_orders(db),
    ),
    "invoice": ExportDefinition(
        title="Invoice",
        columns=[
            ("id_invoice", "ID Invoice"),
            ("no_invoice", "No. Invoice"),
            ("no_po", "No. PO"),
            ("termin", "Termin"),
            ("status_invoice", "Status Invoice"),
            ("ppn_status", "Status PPN"),
            ("invoice_portion_percent", "Porsi (%)"),
            ("nominal_po", "Nominal PO"),
            ("dpp", "DPP"),
            ("ppn", "PPN"),
            ("pph", "PPh"),
            ("grand_total", "Grand Total"),
        ],
        load_rows=lambda db: invoice_service.list_invoices(db),
    ),
}


def _cell_value(value: Any) -> Any:
    if isinstance(value, Decimal) and not value.is_finite():
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def build_workbook(definition: ExportDefinition, rows: list[dict[str, Any]]) -> bytes:
    """
    Render rows into an .xlsx document.

    Args:
        definition: Columns and sheet title
        rows: Records keyed by field name

    Returns:
        bytes: The serialized workbook
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = definition.title[:31]

    sheet.append([header for _, header in definition.columns])
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for row in rows:
        sheet.append([_cell_value(row.get(field)) for field, _ in definition.columns])

    for index, (field, header) in enumerate(definition.columns, start=1):
        longest = max(
            [len(header)] + [len(str(row.get(field) or "")) for row in rows]
        )
        sheet.column_dimensions[get_column_letter(index)].width = min(longest + 2, _MAX_COLUMN_WIDTH)

    sheet.freeze_panes = "A2"

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


async def export_resource(db: AsyncSession, resource: str) -> bytes:
    """
    Build the workbook for one exportable resource.

    Raises:
        NotFoundError: If ``resource`` is not exportable
    """
    definition = EXPORTS.get(resource)
    if definition is None:
        raise NotFoundError("Export", resource)

    rows = await definition.load_rows(db)
    content = build_workbook(definition, rows)

    exports_total.labels(resource=resource).inc()
    log_business_event("excel_exported", resource=resource, rows=len(rows))
    return content


def export_filename(resource: str) -> str:
    return f"{resource}.xlsx"
