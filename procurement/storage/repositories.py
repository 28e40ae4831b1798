# ==== DATA ACCESS FUNCTIONS ==== #

"""
Data access for the procurement tables.

Every function takes the request's ``AsyncSession`` and leaves committing
to the caller, so a route's writes form one unit of work. Listing queries
return plain dictionaries shaped like the API rows; single-record lookups
return ORM instances so callers can update them in place.
"""

from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.inspection import inspect

from procurement.storage.files import StoredFile
from procurement.storage.models import (
    Attachment, Client, Invoice, Kategori, MemoProcurement, PurchaseOrder, Vendor
)


RECENT_PO_LIMIT = 5


def to_dict(obj: Any) -> dict[str, Any]:
    """Column values of an ORM instance keyed by attribute name."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


def apply_changes(obj: Any, changes: dict[str, Any]) -> Any:
    """Set the given attributes on an ORM instance."""
    for key, value in changes.items():
        setattr(obj, key, value)
    return obj


async def _insert(db: AsyncSession, obj: Any) -> Any:
    db.add(obj)
    await db.flush()
    await db.refresh(obj)
    return obj


# ==== KATEGORI ==== #


async def list_kategori(db: AsyncSession) -> list[Kategori]:
    result = await db.execute(select(Kategori).order_by(Kategori.id_kategori.asc()))
    return list(result.scalars().all())


async def get_kategori(db: AsyncSession, id_kategori: int) -> Optional[Kategori]:
    return await db.get(Kategori, id_kategori)


async def create_kategori(db: AsyncSession, data: dict[str, Any]) -> Kategori:
    return await _insert(db, Kategori(**data))


# ==== CLIENT ==== #


async def list_clients(db: AsyncSession) -> list[Client]:
    result = await db.execute(select(Client).order_by(Client.id_client.asc()))
    return list(result.scalars().all())


async def get_client(db: AsyncSession, id_client: int) -> Optional[Client]:
    return await db.get(Client, id_client)


async def create_client(db: AsyncSession, data: dict[str, Any]) -> Client:
    return await _insert(db, Client(**data))


# ==== VENDOR ==== #


async def list_vendors(db: AsyncSession) -> list[dict[str, Any]]:
    """Vendors in id order with their category name."""
    query = (
        select(Vendor, Kategori.nama_kategori)
        .outerjoin(Kategori, Vendor.id_kategori == Kategori.id_kategori)
        .order_by(Vendor.id_vendor.asc())
    )
    result = await db.execute(query)
    return [
        {**to_dict(vendor), "nama_kategori": nama_kategori}
        for vendor, nama_kategori in result.all()
    ]


async def get_vendor(db: AsyncSession, id_vendor: int) -> Optional[Vendor]:
    return await db.get(Vendor, id_vendor)


async def list_vendor_ids(db: AsyncSession) -> list[int]:
    result = await db.execute(select(Vendor.id_vendor).order_by(Vendor.id_vendor.asc()))
    return list(result.scalars().all())


async def create_vendor(db: AsyncSession, data: dict[str, Any]) -> Vendor:
    return await _insert(db, Vendor(**data))


# ==== MEMO ==== #


async def list_memos(db: AsyncSession) -> list[dict[str, Any]]:
    """Memos in number order with their client's brand and company name."""
    query = (
        select(MemoProcurement, Client.nama_brand, Client.nama_pt)
        .outerjoin(Client, MemoProcurement.id_client == Client.id_client)
        .order_by(MemoProcurement.no_memo.asc())
    )
    result = await db.execute(query)
    return [
        {**to_dict(memo), "nama_brand": nama_brand, "nama_pt": nama_pt}
        for memo, nama_brand, nama_pt in result.all()
    ]


async def get_memo(db: AsyncSession, no_memo: str) -> Optional[MemoProcurement]:
    return await db.get(MemoProcurement, no_memo)


async def create_memo(db: AsyncSession, data: dict[str, Any]) -> MemoProcurement:
    return await _insert(db, MemoProcurement(**data))


# ==== PURCHASE ORDER ==== #


async def list_purchase_orders(db: AsyncSession) -> list[dict[str, Any]]:
    """Purchase orders, newest first, with vendor and client display names."""
    query = (
        select(
            PurchaseOrder,
            Vendor.nama_pt_cv.label("nama_vendor"),
            Client.nama_brand.label("nama_client"),
        )
        .outerjoin(Vendor, PurchaseOrder.id_vendor == Vendor.id_vendor)
        .outerjoin(Client, PurchaseOrder.id_client == Client.id_client)
        .order_by(PurchaseOrder.tanggal_po.desc().nulls_last())
    )
    result = await db.execute(query)
    return [
        {**to_dict(po), "nama_vendor": nama_vendor, "nama_client": nama_client}
        for po, nama_vendor, nama_client in result.all()
    ]


async def get_purchase_order(db: AsyncSession, no_po: str) -> Optional[PurchaseOrder]:
    return await db.get(PurchaseOrder, no_po)


async def get_po_nominal(db: AsyncSession, no_po: str) -> Optional[Decimal]:
    """Current nominal of a purchase order, read fresh from the table."""
    result = await db.execute(
        select(PurchaseOrder.nominal).where(PurchaseOrder.no_po == no_po)
    )
    return result.scalar_one_or_none()


async def create_purchase_order(db: AsyncSession, data: dict[str, Any]) -> PurchaseOrder:
    return await _insert(db, PurchaseOrder(**data))


# ==== INVOICE ==== #


async def list_invoices_with_nominal(db: AsyncSession) -> list[tuple[dict[str, Any], Decimal]]:
    """Every invoice paired with its purchase order's current nominal."""
    query = (
        select(Invoice, PurchaseOrder.nominal)
        .join(PurchaseOrder, Invoice.no_po == PurchaseOrder.no_po)
        .order_by(Invoice.id_invoice.asc())
    )
    result = await db.execute(query)
    return [(to_dict(invoice), nominal) for invoice, nominal in result.all()]


async def get_invoice(db: AsyncSession, id_invoice: int) -> Optional[Invoice]:
    return await db.get(Invoice, id_invoice)


async def create_invoice(db: AsyncSession, data: dict[str, Any]) -> Invoice:
    return await _insert(db, Invoice(**data))


# ==== ATTACHMENTS ==== #


def _related_ids(related_id: int | str) -> dict[str, Any]:
    if isinstance(related_id, str):
        return {"related_id_text": related_id, "related_id_int": None}
    return {"related_id_text": None, "related_id_int": related_id}


def _related_filter(related_table: str, related_id: int | str):
    if isinstance(related_id, str):
        return (Attachment.related_table == related_table) & (Attachment.related_id_text == related_id)
    return (Attachment.related_table == related_table) & (Attachment.related_id_int == related_id)


async def add_attachments(
    db: AsyncSession,
    related_table: str,
    related_id: int | str,
    files: Iterable[StoredFile]
) -> list[Attachment]:
    """
    Record stored files as attachments of one entity.

    Text identifiers (PO and memo numbers) go to ``related_id_text``,
    integer identifiers (vendors) to ``related_id_int``.
    """
    attachments = [
        Attachment(
            file_path=stored.file_path,
            original_name=stored.original_name,
            document_type=stored.document_type,
            related_table=related_table,
            **_related_ids(related_id),
        )
        for stored in files
    ]
    if attachments:
        db.add_all(attachments)
        await db.flush()
    return attachments


async def list_attachments(
    db: AsyncSession,
    related_table: str,
    related_id: int | str
) -> list[Attachment]:
    """Attachments of one entity, newest first."""
    query = (
        select(Attachment)
        .where(_related_filter(related_table, related_id))
        .order_by(Attachment.uploaded_at.desc(), Attachment.id_attachment.desc())
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def vendor_document_types(db: AsyncSession, id_vendor: int) -> set[str]:
    """Distinct document types currently attached to a vendor."""
    query = (
        select(Attachment.document_type)
        .where(_related_filter("vendor", id_vendor))
        .where(Attachment.document_type.is_not(None))
        .distinct()
    )
    result = await db.execute(query)
    return set(result.scalars().all())


async def get_attachment(db: AsyncSession, id_attachment: int) -> Optional[Attachment]:
    return await db.get(Attachment, id_attachment)


async def delete_attachment(db: AsyncSession, id_attachment: int) -> None:
    await db.execute(delete(Attachment).where(Attachment.id_attachment == id_attachment))
    await db.flush()


# ==== DASHBOARD ==== #


async def dashboard_stats(db: AsyncSession) -> dict[str, Any]:
    """Purchase order totals, invoice counts and the latest purchase orders."""
    po_totals = (await db.execute(
        select(func.count(PurchaseOrder.no_po), func.sum(PurchaseOrder.nominal))
    )).one()

    paid_invoices = (await db.execute(
        select(func.count()).select_from(Invoice).where(Invoice.status_invoice == "Paid")
    )).scalar_one()

    pending_invoices = (await db.execute(
        select(func.count()).select_from(Invoice).where(Invoice.status_invoice.in_(["Bill", "Unbill"]))
    )).scalar_one()

    recent_query = (
        select(
            PurchaseOrder.no_po,
            PurchaseOrder.perihal_project,
            Vendor.nama_pt_cv.label("nama_vendor"),
            PurchaseOrder.nominal,
        )
        .join(Vendor, PurchaseOrder.id_vendor == Vendor.id_vendor)
        .order_by(PurchaseOrder.tanggal_po.desc().nulls_last())
        .limit(RECENT_PO_LIMIT)
    )
    recent_pos = [dict(row._mapping) for row in (await db.execute(recent_query)).all()]

    return {
        "total_po": po_totals[0] or 0,
        "total_value": po_totals[1] or Decimal(0),
        "paid_invoices": paid_invoices or 0,
        "pending_invoices": pending_invoices or 0,
        "recent_pos": recent_pos,
    }
