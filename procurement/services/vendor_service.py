# ==== VENDOR SERVICE ==== #

"""
Vendor writes and document-completeness verification.

Every mutation that touches a vendor's attachments finishes by re-reading
the vendor's full attachment set inside the same session and re-deriving
``status_verifikasi`` from it. The status is never accepted from clients.
"""

from typing import Any, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from procurement.business.vendor_verification import (
    VerificationStatus, evaluate_vendor_verification
)
from procurement.exceptions import NotFoundError
from procurement.observability.logging import get_logger, log_business_event
from procurement.observability.metrics import (
    attachments_stored_total, vendor_verifications_total
)
from procurement.observability.tracing import get_tracer
from procurement.settings import settings
from procurement.storage import repositories
from procurement.storage.files import LocalFileStore
from procurement.storage.models import Vendor


logger = get_logger(__name__)
tracer = get_tracer(__name__)


class VendorService:
    """
    Service for vendor creation, updates and verification.

    Args:
        db: Session of the current unit of work
        file_store: Where uploaded vendor documents are written
        required_documents: Document types a vendor needs to be verified,
            defaults to the configured set
    """

    def __init__(
        self,
        db: AsyncSession,
        file_store: LocalFileStore,
        required_documents: Optional[Iterable[str]] = None
    ):
        self.db = db
        self.file_store = file_store
        self.required_documents = frozenset(
            required_documents if required_documents is not None
            else settings.required_vendor_documents
        )

    # ==== VERIFICATION ==== #

    async def derive_status(self, vendor: Vendor) -> VerificationStatus:
        """Evaluate a vendor's current attachments without touching the vendor."""
        document_types = await repositories.vendor_document_types(self.db, vendor.id_vendor)
        return evaluate_vendor_verification(document_types, self.required_documents)

    async def refresh_verification(self, vendor: Vendor) -> VerificationStatus:
        """
        Re-derive a vendor's status from its current attachments.

        Returns:
            VerificationStatus: The status now stored on the vendor
        """
        status = await self.derive_status(vendor)
        vendor_verifications_total.labels(outcome=status.name.lower()).inc()

        previous = vendor.status_verifikasi
        if previous != status.value:
            vendor.status_verifikasi = status.value
            await self.db.flush()
            log_business_event(
                "vendor_verification_changed",
                id_vendor=vendor.id_vendor,
                previous=previous,
                current=status.value,
            )
        return status

    async def refresh_verification_by_id(self, id_vendor: int) -> Optional[VerificationStatus]:
        """Re-derive the status of a vendor that may no longer exist."""
        vendor = await repositories.get_vendor(self.db, id_vendor)
        if vendor is None:
            logger.warning("Attachment references missing vendor", id_vendor=id_vendor)
            return None
        return await self.refresh_verification(vendor)

    # ==== WRITES ==== #

    async def _attach(self, vendor: Vendor, uploads: list[tuple[str, UploadFile]]) -> None:
        stored = await self.file_store.save_all(uploads)
        await repositories.add_attachments(self.db, "vendor", vendor.id_vendor, stored)
        if stored:
            attachments_stored_total.labels(related_table="vendor").inc(len(stored))

    async def create_vendor(
        self,
        data: dict[str, Any],
        uploads: list[tuple[str, UploadFile]]
    ) -> Vendor:
        """
        Create a vendor as unverified, attach its documents and evaluate it.

        Args:
            data: Validated vendor fields
            uploads: (field name, file) pairs from the request

        Returns:
            Vendor: The new vendor with its derived status
        """
        with tracer.start_as_current_span("create_vendor") as span:
            vendor = await repositories.create_vendor(
                self.db,
                {**data, "status_verifikasi": VerificationStatus.UNVERIFIED.value}
            )
            span.set_attribute("id_vendor", vendor.id_vendor)
            span.set_attribute("upload_count", len(uploads))

            await self._attach(vendor, uploads)
            await self.refresh_verification(vendor)

            logger.info("Vendor created", id_vendor=vendor.id_vendor)
            return vendor

    async def update_vendor(
        self,
        id_vendor: int,
        changes: dict[str, Any],
        uploads: list[tuple[str, UploadFile]]
    ) -> Vendor:
        """
        Apply a partial update, append new documents and re-evaluate.

        Raises:
            NotFoundError: If the vendor does not exist
        """
        with tracer.start_as_current_span("update_vendor") as span:
            span.set_attribute("id_vendor", id_vendor)
            vendor = await repositories.get_vendor(self.db, id_vendor)
            if vendor is None:
                raise NotFoundError("Vendor", id_vendor)

            repositories.apply_changes(vendor, changes)
            await self.db.flush()

            await self._attach(vendor, uploads)
            await self.refresh_verification(vendor)
            return vendor

    async def reverify_all(self, dry_run: bool = False) -> list[dict[str, Any]]:
        """
        Recompute every vendor's status against the current required set.

        Args:
            dry_run: Report the changes without applying, logging or
                counting them

        Returns:
            list[dict[str, Any]]: One entry per vendor whose status changed
        """
        changed = []
        for id_vendor in await repositories.list_vendor_ids(self.db):
            vendor = await repositories.get_vendor(self.db, id_vendor)
            previous = vendor.status_verifikasi
            if dry_run:
                status = await self.derive_status(vendor)
            else:
                status = await self.refresh_verification(vendor)
            if previous != status.value:
                changed.append({
                    "id_vendor": id_vendor,
                    "nama_pt_cv": vendor.nama_pt_cv,
                    "previous": previous,
                    "current": status.value,
                })
        return changed
