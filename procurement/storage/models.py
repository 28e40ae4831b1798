"""SQLAlchemy models for the procurement API."""

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String, Integer, ForeignKey, Text, DateTime, Date, Numeric, Index, func
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from procurement.business.vendor_verification import VerificationStatus
from procurement.storage.db import Base


class Kategori(Base):
    """Vendor category."""

    __tablename__ = "kategori"

    id_kategori: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nama_kategori: Mapped[str] = mapped_column(String(128), nullable=False)

    vendors = relationship("Vendor", back_populates="kategori")


class Client(Base):
    """Client brand on whose behalf procurement happens."""

    __tablename__ = "client"

    id_client: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nama_brand: Mapped[str] = mapped_column(String(128), nullable=False)
    nama_pt: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    alamat: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Vendor(Base):
    """Supplier with a derived document verification status."""

    __tablename__ = "vendor"

    id_vendor: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nama_pt_cv: Mapped[str] = mapped_column(String(255), nullable=False)
    nama_vendor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    id_kategori: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("kategori.id_kategori"), nullable=True, index=True
    )
    alamat: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    no_pic: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    nama_pic: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    status_verifikasi: Mapped[str] = mapped_column(
        String(32),
        default=VerificationStatus.UNVERIFIED.value,
        server_default=VerificationStatus.UNVERIFIED.value,
        nullable=False
    )

    kategori = relationship("Kategori", back_populates="vendors")


class MemoProcurement(Base):
    """Procurement memo raised for a client."""

    __tablename__ = "memo_procurement"

    no_memo: Mapped[str] = mapped_column(String(64), primary_key=True)
    id_client: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("client.id_client"), nullable=True, index=True
    )
    perihal: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class PurchaseOrder(Base):
    """Purchase order; ``nominal`` is the base for invoice tax math."""

    __tablename__ = "purchase_order"

    no_po: Mapped[str] = mapped_column(String(64), primary_key=True)
    id_vendor: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("vendor.id_vendor"), nullable=True, index=True
    )
    id_client: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("client.id_client"), nullable=True, index=True
    )
    no_memo: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("memo_procurement.no_memo"), nullable=True
    )
    nominal: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    perihal_project: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tanggal_po: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    status_po: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    __table_args__ = (
        Index("ix_purchase_order_tanggal_po", "tanggal_po"),
    )


class Invoice(Base):
    """Invoice billing a portion of a purchase order. Tax fields are derived."""

    __tablename__ = "invoice"

    id_invoice: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    no_po: Mapped[str] = mapped_column(
        String(64), ForeignKey("purchase_order.no_po"), nullable=False, index=True
    )
    no_invoice: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    status_invoice: Mapped[str] = mapped_column(String(16), default="Unbill", nullable=False)
    termin: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    invoice_portion_percent: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    ppn_status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    __table_args__ = (
        Index("ix_invoice_status_invoice", "status_invoice"),
    )


class Attachment(Base):
    """Uploaded file linked to a vendor, purchase order or memo."""

    __tablename__ = "attachments"

    id_attachment: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    file_path: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    document_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    related_table: Mapped[str] = mapped_column(String(16), nullable=False)
    related_id_text: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    related_id_int: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    uploaded_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        Index("ix_attachments_related_int", "related_table", "related_id_int"),
        Index("ix_attachments_related_text", "related_table", "related_id_text"),
    )


# ==== END OF MODELS ==== #
