"""Unit tests for vendor writes and verification refresh."""

import io
from unittest.mock import AsyncMock, patch

import pytest
from starlette.datastructures import UploadFile

from procurement.business.vendor_verification import VerificationStatus
from procurement.exceptions import NotFoundError
from procurement.services.attachment_service import remove_attachment
from procurement.services.vendor_service import VendorService
from procurement.storage.models import Attachment, Vendor


REPO = "procurement.storage.repositories"


def make_vendor(**overrides) -> Vendor:
    fields = {
        "id_vendor": 7,
        "nama_pt_cv": "PT Maju Jaya",
        "status_verifikasi": VerificationStatus.UNVERIFIED.value,
    }
    fields.update(overrides)
    return Vendor(**fields)


def upload(field: str) -> tuple[str, UploadFile]:
    return field, UploadFile(file=io.BytesIO(b"doc"), filename=f"{field.lower()}.pdf")


@pytest.mark.unit
class TestRefreshVerification:
    """Test cases for re-deriving vendor status."""

    async def test_complete_documents_verify_vendor(self, db_session, file_store, required_documents):
        vendor = make_vendor()
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set(required_documents))):
            status = await service.refresh_verification(vendor)

        assert status is VerificationStatus.VERIFIED
        assert vendor.status_verifikasi == "Terverifikasi"
        db_session.flush.assert_awaited()

    async def test_incomplete_documents_unverify_vendor(self, db_session, file_store):
        vendor = make_vendor(status_verifikasi=VerificationStatus.VERIFIED.value)
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.vendor_document_types", AsyncMock(return_value={"NPWP_FILE"})):
            status = await service.refresh_verification(vendor)

        assert status is VerificationStatus.UNVERIFIED
        assert vendor.status_verifikasi == "Belum terverifikasi"

    async def test_unchanged_status_is_not_flushed(self, db_session, file_store):
        vendor = make_vendor()
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set())):
            await service.refresh_verification(vendor)

        db_session.flush.assert_not_awaited()

    async def test_required_set_can_be_injected(self, db_session, file_store):
        vendor = make_vendor()
        service = VendorService(db_session, file_store, required_documents={"NPWP_FILE"})

        with patch(f"{REPO}.vendor_document_types", AsyncMock(return_value={"NPWP_FILE"})):
            status = await service.refresh_verification(vendor)

        assert status is VerificationStatus.VERIFIED


@pytest.mark.unit
class TestVendorWrites:
    """Test cases for creating and updating vendors."""

    async def test_create_stores_documents_and_evaluates(self, db_session, file_store, required_documents):
        vendor = make_vendor()
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.create_vendor", AsyncMock(return_value=vendor)) as create, \
             patch(f"{REPO}.add_attachments", AsyncMock()) as add, \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set(required_documents))):
            result = await service.create_vendor(
                {"nama_pt_cv": "PT Maju Jaya", "status_verifikasi": "Terverifikasi"},
                [upload(doc) for doc in required_documents]
            )

        # Client-supplied status is overwritten before insert
        assert create.await_args.args[1]["status_verifikasi"] == "Belum terverifikasi"
        related_table, related_id, stored = add.await_args.args[1:]
        assert (related_table, related_id) == ("vendor", 7)
        assert {item.document_type for item in stored} == set(required_documents)
        assert result.status_verifikasi == "Terverifikasi"

    async def test_update_missing_vendor_raises(self, db_session, file_store):
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.get_vendor", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError) as exc_info:
                await service.update_vendor(99, {"alamat": "Bandung"}, [])

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Vendor tidak ditemukan"

    async def test_update_applies_changes_and_reevaluates(self, db_session, file_store):
        vendor = make_vendor(alamat="Jakarta")
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.get_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.add_attachments", AsyncMock()), \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value={"NPWP_FILE"})) as doc_types:
            result = await service.update_vendor(7, {"alamat": "Bandung"}, [upload("NPWP_FILE")])

        assert result.alamat == "Bandung"
        assert result.nama_pt_cv == "PT Maju Jaya"
        doc_types.assert_awaited_once_with(db_session, 7)

    async def test_reverify_all_reports_changes_only(self, db_session, file_store, required_documents):
        vendors = {
            1: make_vendor(id_vendor=1, nama_pt_cv="PT Satu"),
            2: make_vendor(id_vendor=2, nama_pt_cv="PT Dua"),
        }
        documents = {1: set(required_documents), 2: {"NPWP_FILE"}}
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.list_vendor_ids", AsyncMock(return_value=[1, 2])), \
             patch(f"{REPO}.get_vendor", AsyncMock(side_effect=lambda db, i: vendors[i])), \
             patch(f"{REPO}.vendor_document_types", AsyncMock(side_effect=lambda db, i: documents[i])):
            changed = await service.reverify_all()

        assert changed == [{
            "id_vendor": 1,
            "nama_pt_cv": "PT Satu",
            "previous": "Belum terverifikasi",
            "current": "Terverifikasi",
        }]

    async def test_reverify_all_dry_run_changes_nothing(self, db_session, file_store, required_documents):
        vendor = make_vendor(id_vendor=1, nama_pt_cv="PT Satu")
        service = VendorService(db_session, file_store)

        with patch(f"{REPO}.list_vendor_ids", AsyncMock(return_value=[1])), \
             patch(f"{REPO}.get_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=set(required_documents))), \
             patch("procurement.services.vendor_service.log_business_event") as business_event:
            changed = await service.reverify_all(dry_run=True)

        assert changed[0]["current"] == "Terverifikasi"
        assert vendor.status_verifikasi == "Belum terverifikasi"
        db_session.flush.assert_not_awaited()
        business_event.assert_not_called()


@pytest.mark.unit
class TestRemoveAttachment:
    """Test cases for attachment deletion."""

    async def test_vendor_attachment_removal_unverifies(self, db_session, file_store, required_documents):
        stored = await file_store.save(*upload("NIB_FILE"))
        attachment = Attachment(
            id_attachment=5, file_path=stored.file_path, document_type="NIB_FILE",
            related_table="vendor", related_id_int=7
        )
        vendor = make_vendor(status_verifikasi=VerificationStatus.VERIFIED.value)
        remaining = set(required_documents) - {"NIB_FILE"}

        with patch(f"{REPO}.get_attachment", AsyncMock(return_value=attachment)), \
             patch(f"{REPO}.delete_attachment", AsyncMock()) as delete, \
             patch(f"{REPO}.get_vendor", AsyncMock(return_value=vendor)), \
             patch(f"{REPO}.vendor_document_types", AsyncMock(return_value=remaining)):
            await remove_attachment(db_session, file_store, 5)

        delete.assert_awaited_once_with(db_session, 5)
        db_session.commit.assert_awaited_once()
        assert vendor.status_verifikasi == "Belum terverifikasi"
        assert not (file_store.root / stored.file_path).exists()

    async def test_po_attachment_removal_skips_verification(self, db_session, file_store):
        attachment = Attachment(
            id_attachment=6, file_path="attachments-1.pdf",
            related_table="po", related_id_text="PO/2024/001"
        )

        with patch(f"{REPO}.get_attachment", AsyncMock(return_value=attachment)), \
             patch(f"{REPO}.delete_attachment", AsyncMock()), \
             patch(f"{REPO}.get_vendor", AsyncMock()) as get_vendor:
            await remove_attachment(db_session, file_store, 6)

        get_vendor.assert_not_awaited()
        db_session.commit.assert_awaited_once()

    async def test_missing_attachment_raises(self, db_session, file_store):
        with patch(f"{REPO}.get_attachment", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError):
                await remove_attachment(db_session, file_store, 404)

        db_session.commit.assert_not_awaited()
